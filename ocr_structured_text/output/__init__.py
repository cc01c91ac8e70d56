"""Output generation modules."""

from .json_generator import JSONGenerator
from .summary_generator import SummaryGenerator

__all__ = ["JSONGenerator", "SummaryGenerator"]
