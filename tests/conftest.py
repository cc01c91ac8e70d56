"""Shared fixtures for the extraction tests."""

import pytest

from ocr_structured_text.annotators import RuleBasedAnnotator
from ocr_structured_text.config import ExtractionSettings
from ocr_structured_text.models import BoundingBox, TextBlock


BUSINESS_CARD_TEXT = "John Smith\nSenior Director\nAcme Corp\n(555) 123-4567\njohn@acme.com"


def _make_block(text, x, y, width=0.2, height=0.03, confidence=0.9):
    return TextBlock(text=text, bounding_box=BoundingBox(x, y, width, height), confidence=confidence)


@pytest.fixture
def make_block():
    """Factory for positioned text blocks in normalized, bottom-left-origin coordinates."""
    return _make_block


@pytest.fixture
def settings():
    return ExtractionSettings()


@pytest.fixture
def annotator():
    return RuleBasedAnnotator()


@pytest.fixture
def card_text():
    return BUSINESS_CARD_TEXT


@pytest.fixture
def table_blocks():
    """A titled three-column inventory table with three data rows."""
    rows = [
        ("Name", "Qty", "Price"),
        ("Widget", "2", "$3.00"),
        ("Gadget", "5", "$7.50"),
        ("Sprocket", "1", "$0.75"),
    ]
    blocks = [_make_block("Inventory", 0.3, 0.85)]
    for row_index, row in enumerate(rows):
        y = 0.8 - 0.07 * row_index
        for column_index, text in enumerate(row):
            blocks.append(_make_block(text, 0.1 + 0.3 * column_index, y))
    return blocks
