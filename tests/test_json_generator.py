"""Tests for JSON serialisation of extraction results."""

import datetime
import json
from decimal import Decimal

from ocr_structured_text import __version__
from ocr_structured_text.config import ExtractionSettings
from ocr_structured_text.models import (
    CurrencyRef, DateRef, DocumentType, ExtractedEntities, ExtractionOptions, StructuredTextData,
)
from ocr_structured_text.output import JSONGenerator


def _result():
    entities = ExtractedEntities(
        dates=[DateRef("2025-01-31", datetime.date(2025, 1, 31), "yyyy-MM-dd", 0.7)],
        currencies=[CurrencyRef("$5.75", Decimal("5.75"), "USD", 0.9)],
        confidence=0.3,
    )
    return StructuredTextData(None, None, None, entities, DocumentType.RECEIPT, 0.6,
                              summary="Receipt", action_items=["File receipt for expense tracking"])


class TestToDict:

    def test_values_are_json_safe(self):
        data = JSONGenerator.to_dict(_result())
        assert data["document_type"] == "receipt"
        assert data["confidence"] == 0.6
        assert data["extracted_entities"]["dates"][0]["parsed"] == "2025-01-31"
        assert data["extracted_entities"]["currencies"][0]["amount"] == "5.75"
        assert data["business_card"] is None
        json.dumps(data)


class TestOutputFiles:

    def test_metadata(self):
        metadata = JSONGenerator.create_metadata("/tmp/scan.json", ExtractionOptions.minimal(),
                                                 ExtractionSettings(), 4)
        assert metadata["source_file"] == "scan.json"
        assert metadata["processing_version"] == __version__
        assert metadata["block_count"] == 4
        assert metadata["options"]["analyze_layout"] is False
        assert metadata["processing_parameters"]["card_score_threshold"] == 10

    def test_save_json_creates_directory(self, tmp_path):
        path = tmp_path / "out" / "result.json"
        JSONGenerator.save_json(JSONGenerator.create_output(_result(), {"source_file": None}), str(path))
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["result"]["summary"] == "Receipt"
        assert payload["metadata"] == {"source_file": None}
