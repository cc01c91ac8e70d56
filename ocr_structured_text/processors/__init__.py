"""Text, table and layout processing modules."""

from .text_processor import TextProcessor
from .table_detector import TableDetector
from .layout_analyzer import DocumentLayoutAnalyzer
from .document_classifier import DocumentClassifier

__all__ = ["TextProcessor", "TableDetector", "DocumentLayoutAnalyzer", "DocumentClassifier"]
