"""End-to-end tests for the extraction coordinator."""

from dataclasses import fields, is_dataclass

import pytest

from ocr_structured_text import StructuredTextExtractor
from ocr_structured_text.config import ExtractionSettings
from ocr_structured_text.models import DocumentType, ExtractionOptions


def _confidences(value):
    """Every ``confidence`` value anywhere inside a result."""
    if is_dataclass(value):
        for f in fields(value):
            child = getattr(value, f.name)
            if f.name in ("confidence", "processing_confidence") and isinstance(child, float):
                yield child
            else:
                yield from _confidences(child)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _confidences(item)


@pytest.fixture
def extractor():
    return StructuredTextExtractor()


class TestBusinessCardScenario:
    """The canonical business card passing through the whole pipeline."""

    @pytest.mark.asyncio
    async def test_comprehensive(self, extractor, card_text):
        result = await extractor.extract_structured_data(card_text, options=ExtractionOptions.comprehensive())

        assert result.document_type is DocumentType.BUSINESS_CARD
        card = result.business_card
        assert card.name.full_name == "John Smith"
        assert "Director" in card.title
        assert card.company == "Acme Corp"
        for tag in ("business_card", "networking", "contact", "acme corp"):
            assert tag in result.tags
        assert result.tags[0] == "business_card"

        assert result.summary.startswith("Business Card - Contact: John Smith")
        assert result.action_items == ["Add contact to CRM", "Send follow-up email"]

    @pytest.mark.asyncio
    async def test_dict_blocks_are_accepted(self, extractor, card_text):
        blocks = [
            {"text": line, "boundingBox": {"x": 0.1, "y": 0.8 - 0.1 * i, "width": 0.5, "height": 0.05},
             "confidence": 0.95}
            for i, line in enumerate(card_text.splitlines())
        ]
        result = await extractor.extract_structured_data(card_text, blocks)
        assert result.document_layout is not None
        assert result.document_layout.title == "John Smith"
        assert 0.0 <= result.processing_confidence <= 1.0

    def test_sync_wrapper(self, extractor, card_text):
        result = extractor.extract(card_text)
        assert result.document_type is DocumentType.BUSINESS_CARD
        assert extractor.generate_crm_data(result)["company"] == "Acme Corp"


class TestOptions:

    @pytest.mark.asyncio
    async def test_minimal_skips_optional_stages(self, extractor):
        result = await extractor.extract_structured_data(
            "NOTICE\nThe office will be closed on Friday.\nPlease note the new hours.",
            options=ExtractionOptions.minimal(),
        )
        assert result.document_type is DocumentType.NOTICE
        assert result.document_layout is None
        assert result.extracted_entities is None
        assert result.business_card is None
        assert result.contact_info is not None

    @pytest.mark.asyncio
    async def test_unclassified_text_stays_generic(self, extractor, card_text):
        options = ExtractionOptions(classify_document_type=False)
        result = await extractor.extract_structured_data(card_text, options=options)
        assert result.document_type is DocumentType.GENERIC
        assert result.business_card is not None

    @pytest.mark.asyncio
    async def test_empty_input(self, extractor):
        result = await extractor.extract_structured_data("")
        assert result.document_type is DocumentType.GENERIC
        assert result.business_card is None
        assert result.contact_info.is_empty
        assert result.summary == "Document"


class TestConfidenceBounds:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [
        "John Smith\nSenior Director\nAcme Corp\n(555) 123-4567\njohn@acme.com\nwww.acme.com",
        "Receipt\nCoffee $3.50\nMuffin $2.25\nTotal $5.75\nThank you",
        "Phone: (800) 555-0199 Phone: (800) 555-0199 Email: help@gmail.com Visit 1 Main St, Austin, TX 78701",
        "",
    ])
    async def test_every_confidence_is_in_unit_range(self, extractor, text, table_blocks):
        result = await extractor.extract_structured_data(text, table_blocks)
        values = list(_confidences(result))
        assert values
        assert all(0.0 <= v <= 1.0 for v in values)

    def test_overall_confidence_without_components(self):
        assert StructuredTextExtractor.calculate_overall_confidence([], None, None, None) == 0.5


class TestSettings:

    def test_invalid_settings_rejected(self):
        with pytest.raises(ValueError):
            StructuredTextExtractor(settings=ExtractionSettings(row_gap=-0.1))

    def test_custom_threshold_is_used(self, card_text):
        strict = StructuredTextExtractor(settings=ExtractionSettings(card_score_threshold=20))
        result = strict.extract(card_text)
        assert result.document_type is not DocumentType.BUSINESS_CARD
        assert result.business_card is None
