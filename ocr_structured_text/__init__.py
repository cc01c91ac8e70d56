"""
OCR Structured Text

Turns OCR output (raw text plus positioned text blocks) into structured data:
contact details, business cards, document layout, entities and a document type
with a generated summary, action items and tags.

Features:
- Contact extraction (phones, e-mails, addresses, URLs, dates)
- Business card detection and CRM export
- Layout analysis with section, list and table detection
- Rule-based entity tagging behind a pluggable annotator interface
- Document classification driving summaries, action items and tags
"""

from .config import ExtractionSettings
from .core.main_processor import StructuredTextExtractor
from .models.data_structures import (
    BoundingBox, BusinessCardData, ContactInfo, DocumentLayout, ExtractionOptions,
    StructuredTextData, TableData, TextBlock,
)
from .models.enums import DocumentType

__version__ = "1.0.0"
__all__ = [
    "StructuredTextExtractor",
    "ExtractionSettings",
    "ExtractionOptions",
    "StructuredTextData",
    "BoundingBox",
    "TextBlock",
    "ContactInfo",
    "BusinessCardData",
    "DocumentLayout",
    "TableData",
    "DocumentType",
]
