"""Tests for the data model helpers and extraction settings."""

import pytest

from ocr_structured_text.config import ExtractionSettings
from ocr_structured_text.models import BoundingBox, DocumentType, ExtractionOptions, TableData, TextBlock


class TestBoundingBox:
    """Geometry helpers on normalized boxes."""

    def test_derived_edges(self):
        box = BoundingBox(0.1, 0.2, 0.3, 0.4)
        assert box.max_x == pytest.approx(0.4)
        assert box.max_y == pytest.approx(0.6)
        assert box.mid_x == pytest.approx(0.25)
        assert box.mid_y == pytest.approx(0.4)

    def test_union_covers_both(self):
        union = BoundingBox(0.1, 0.1, 0.1, 0.1).union(BoundingBox(0.5, 0.6, 0.2, 0.1))
        assert union.min_x == pytest.approx(0.1)
        assert union.min_y == pytest.approx(0.1)
        assert union.max_x == pytest.approx(0.7)
        assert union.max_y == pytest.approx(0.7)

    def test_touching_edges_do_not_intersect(self):
        left = BoundingBox(0.0, 0.0, 0.5, 0.5)
        assert not left.intersects(BoundingBox(0.5, 0.0, 0.5, 0.5))
        assert left.intersects(BoundingBox(0.4, 0.4, 0.5, 0.5))


class TestTextBlockFromDict:
    """Coercion of OCR dump entries into text blocks."""

    def test_accepts_camel_case_mapping(self):
        block = TextBlock.from_dict({"text": "Hi", "boundingBox": {"x": 0.1, "y": 0.2, "width": 0.3, "height": 0.05},
                                     "confidence": 0.8})
        assert block.bounding_box == BoundingBox(0.1, 0.2, 0.3, 0.05)
        assert block.confidence == 0.8

    def test_accepts_bbox_sequence(self):
        block = TextBlock.from_dict({"text": "Hi", "bbox": [0.1, 0.2, 0.3, 0.05]})
        assert block.bounding_box.width == pytest.approx(0.3)
        assert block.confidence == 1.0

    def test_missing_box_raises(self):
        with pytest.raises(KeyError):
            TextBlock.from_dict({"text": "Hi"})

    def test_malformed_box_raises(self):
        with pytest.raises(ValueError):
            TextBlock.from_dict({"text": "Hi", "bbox": "0.1 0.2"})


class TestTableDataValidity:

    def test_confidence_threshold(self):
        box = BoundingBox(0, 0, 1, 1)
        assert TableData(None, ["A", "B"], [["1", "2"]], box, 0.31).is_valid
        assert not TableData(None, ["A", "B"], [["1", "2"]], box, 0.3).is_valid
        assert not TableData(None, ["A", "B"], [], box, 0.9).is_valid


class TestExtractionOptions:
    """Named option presets."""

    def test_presets(self):
        card = ExtractionOptions.business_card()
        assert card.detect_business_card and card.classify_document_type
        assert not card.analyze_layout and not card.extract_entities

        notice = ExtractionOptions.notice()
        assert not notice.detect_business_card and notice.analyze_layout

        minimal = ExtractionOptions.minimal()
        assert minimal.extract_contact_info and minimal.classify_document_type
        assert not (minimal.detect_business_card or minimal.analyze_layout or minimal.extract_entities)

    def test_preset_lookup_by_name(self):
        assert ExtractionOptions.preset("business-card") == ExtractionOptions.business_card()
        assert ExtractionOptions.preset("Comprehensive") == ExtractionOptions.comprehensive()

    def test_unknown_preset_raises(self):
        with pytest.raises(ValueError, match="Unknown extraction preset"):
            ExtractionOptions.preset("everything")


class TestDocumentType:

    def test_labels(self):
        assert DocumentType.FLYER.label == "Event Flyer"
        assert DocumentType.GENERIC.label == "Document"
        assert DocumentType.BUSINESS_CARD.value == "business_card"

    def test_every_type_has_hints_and_elements(self):
        for doc_type in DocumentType:
            assert isinstance(doc_type.processing_hints, list)
            assert doc_type.expected_elements


class TestExtractionSettings:
    """Tuning constants and environment overrides."""

    def test_defaults_are_pinned(self, settings):
        assert settings.row_tolerance == 0.02
        assert settings.column_tolerance == 0.03
        assert settings.row_gap == 0.05
        assert settings.card_score_threshold == 10
        assert settings.card_max_words == 100
        assert settings.max_tags == 8

    def test_out_of_range_tolerance_raises(self):
        with pytest.raises(ValueError, match="row_tolerance"):
            ExtractionSettings(row_tolerance=1.5).validate()

    def test_non_positive_threshold_raises(self):
        with pytest.raises(ValueError, match="max_tags"):
            ExtractionSettings(max_tags=0).validate()

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.setenv("OCR_STRUCT_CARD_SCORE_THRESHOLD", "12")
        monkeypatch.setenv("OCR_STRUCT_ROW_GAP", "0.08")
        settings = ExtractionSettings.from_env()
        assert settings.card_score_threshold == 12
        assert settings.row_gap == pytest.approx(0.08)

    def test_from_env_invalid_value_raises(self, monkeypatch):
        monkeypatch.setenv("OCR_STRUCT_MAX_TAGS", "plenty")
        with pytest.raises(ValueError, match="OCR_STRUCT_MAX_TAGS"):
            ExtractionSettings.from_env()


class TestBusinessCardCompleteness:

    def test_complete_needs_name_role_and_contact(self):
        from ocr_structured_text.models import BusinessCardData, ContactInfo, EmailAddress, PersonName

        contact = ContactInfo(email_addresses=[EmailAddress("a@b.com", "b.com", True, 0.8)])
        assert BusinessCardData(PersonName("A B"), "CEO", None, contact).is_complete
        assert not BusinessCardData(PersonName("A B"), None, None, contact).is_complete
        assert not BusinessCardData(PersonName("A B"), "CEO", None, ContactInfo()).is_complete
