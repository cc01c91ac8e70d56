"""Command Line Interface for OCR structured text extraction."""

import argparse
import json
import logging
import os
import sys

from .config import ExtractionSettings
from .core.main_processor import StructuredTextExtractor
from .models.data_structures import ExtractionOptions, ImageSize
from .utils.image_utils import ImageUtils

logger = logging.getLogger(__name__)


def load_ocr_dump(path):
    """Read ``{"text": ..., "blocks": [...], "image_size": {...}}`` from a JSON file."""
    with open(path, encoding='utf-8') as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError("OCR dump must be a JSON object")

    blocks = payload.get('blocks', payload.get('text_blocks', []))
    text = payload.get('text')
    if text is None:
        text = "\n".join(str(b.get('text', '')) for b in blocks)

    image_size = None
    size = payload.get('image_size')
    if size:
        image_size = ImageSize(width=float(size['width']), height=float(size['height']))
    return text, blocks, image_size


def main(argv=None):
    parser = argparse.ArgumentParser(description='Structured text extraction from OCR output')
    parser.add_argument('input_json', help='Path to a JSON dump of OCR output')
    parser.add_argument('--image', help='Source image of the scan (used for card aspect ratio and image size)')
    parser.add_argument('--preset', default='comprehensive', choices=ExtractionOptions.PRESET_NAMES,
                        help='Extraction preset (default: comprehensive)')
    parser.add_argument('--output', help='Write the JSON result to this file instead of stdout')
    parser.add_argument('--crm', action='store_true', help='Print a CRM record when a business card is found')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if not os.path.exists(args.input_json):
        print(f"Error: input file not found: {args.input_json}", file=sys.stderr)
        return 1

    try:
        text, blocks, image_size = load_ocr_dump(args.input_json)
    except (OSError, ValueError, KeyError, TypeError) as e:
        print(f"Error: invalid OCR dump {args.input_json}: {e}", file=sys.stderr)
        return 1

    image = None
    if args.image:
        try:
            image = ImageUtils.load_image(args.image)
        except OSError as e:
            print(f"Error: cannot read image {args.image}: {e}", file=sys.stderr)
            return 1

    settings = ExtractionSettings.from_env()
    options = ExtractionOptions.preset(args.preset)
    extractor = StructuredTextExtractor(settings=settings)

    try:
        data = extractor.extract(text, blocks, image=image, options=options, image_size=image_size)
    except (ValueError, KeyError, TypeError) as e:
        print(f"Error: malformed text blocks in {args.input_json}: {e}", file=sys.stderr)
        return 1

    generator = extractor.json_generator
    metadata = generator.create_metadata(args.input_json, options, settings, len(blocks))
    output = generator.create_output(data, metadata)

    if args.output:
        generator.save_json(output, args.output)
        logger.info("Results saved to %s", args.output)
    else:
        print(generator.dumps(output))

    print(f"\n=== Extraction Summary ===", file=sys.stderr)
    print(f"Document type: {data.document_type.value}", file=sys.stderr)
    print(f"Summary: {data.summary}", file=sys.stderr)
    print(f"Confidence: {data.confidence:.2f}", file=sys.stderr)
    print(f"Tags: {', '.join(data.tags)}", file=sys.stderr)
    for item in data.action_items:
        print(f"  - {item}", file=sys.stderr)

    if args.crm:
        crm = extractor.generate_crm_data(data)
        if crm is None:
            print("No business card detected; no CRM record produced.", file=sys.stderr)
        else:
            print(generator.dumps(crm))

    return 0


if __name__ == "__main__":
    sys.exit(main())
