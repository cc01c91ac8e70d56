"""Pluggable data detection and name tagging."""

from .base import TextAnnotator
from .rule_based import RuleBasedAnnotator

__all__ = ["TextAnnotator", "RuleBasedAnnotator"]
