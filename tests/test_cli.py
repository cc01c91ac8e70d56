"""Tests for the command-line front end."""

import json

from ocr_structured_text.cli import main


def _write_dump(tmp_path, payload):
    path = tmp_path / "scan.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


class TestCli:

    def test_writes_result_file(self, tmp_path, card_text):
        source = _write_dump(tmp_path, {"text": card_text, "blocks": [], "image_size": {"width": 350, "height": 200}})
        output = tmp_path / "result.json"

        assert main([source, "--output", str(output)]) == 0

        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["result"]["document_type"] == "business_card"
        assert payload["metadata"]["source_file"] == "scan.json"

    def test_text_is_rebuilt_from_blocks(self, tmp_path, capsys):
        blocks = [{"text": "Receipt", "bbox": [0.1, 0.9, 0.3, 0.05]},
                  {"text": "Coffee $3.50", "bbox": [0.1, 0.8, 0.3, 0.05]},
                  {"text": "Total $3.50", "bbox": [0.1, 0.7, 0.3, 0.05]}]
        source = _write_dump(tmp_path, {"blocks": blocks})

        assert main([source, "--preset", "minimal"]) == 0

        out = capsys.readouterr().out
        assert json.loads(out)["result"]["document_type"] == "receipt"

    def test_crm_record(self, tmp_path, capsys, card_text):
        source = _write_dump(tmp_path, {"text": card_text})
        output = tmp_path / "result.json"

        assert main([source, "--output", str(output), "--crm"]) == 0

        crm = json.loads(capsys.readouterr().out)
        assert crm["full_name"] == "John Smith"

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "nope.json")]) == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert main([str(path)]) == 1

    def test_malformed_block(self, tmp_path):
        source = _write_dump(tmp_path, {"text": "hi", "blocks": [{"text": "no box"}]})
        assert main([source]) == 1

    def test_image_feeds_card_detection(self, tmp_path, capsys):
        from PIL import Image

        text = "Jane Doe - Widget Inc\n(415) 555-2671 jane@widget.com"
        source = _write_dump(tmp_path, {"text": text})
        image_path = tmp_path / "card.png"
        Image.new("RGB", (350, 200)).save(image_path)

        assert main([source, "--image", str(image_path)]) == 0

        result = json.loads(capsys.readouterr().out)["result"]
        assert result["document_type"] == "business_card"
        assert result["business_card"]["name"]["full_name"] == "Jane Doe"

    def test_unreadable_image(self, tmp_path, card_text):
        source = _write_dump(tmp_path, {"text": card_text})
        image_path = tmp_path / "card.png"
        image_path.write_text("not an image", encoding="utf-8")
        assert main([source, "--image", str(image_path)]) == 1
