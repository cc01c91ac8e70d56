#!/usr/bin/env python3
"""
Demo script showing how to use the OCR structured text extractor
"""

import os
from dotenv import load_dotenv
from ocr_structured_text import ExtractionOptions, ExtractionSettings, StructuredTextExtractor
from ocr_structured_text.cli import load_ocr_dump
from ocr_structured_text.utils.image_utils import ImageUtils

# Load environment variables from .env file
load_dotenv()


def main():
    # Get paths from environment variables
    input_json = os.getenv('INPUT_JSON')
    output_dir = os.getenv('OUTPUT_DIR')
    image_path = os.getenv('IMAGE_PATH')  # optional

    if not input_json or not output_dir:
        print("❌ Error: Please set INPUT_JSON and OUTPUT_DIR in your .env file")
        return

    settings = ExtractionSettings.from_env()
    extractor = StructuredTextExtractor(settings=settings)
    options = ExtractionOptions.comprehensive()

    try:
        text, blocks, image_size = load_ocr_dump(input_json)
        image = ImageUtils.load_image(image_path) if image_path else None
        data = extractor.extract(text, blocks, image=image, options=options, image_size=image_size)

        generator = extractor.json_generator
        metadata = generator.create_metadata(input_json, options, settings, len(blocks))
        base_name = os.path.splitext(os.path.basename(input_json))[0]
        output_path = generator.save_json(generator.create_output(data, metadata),
                                          os.path.join(output_dir, f"{base_name}_structured.json"))

        print("✅ Structured extraction completed successfully!")
        print(f"📁 Results saved to: {output_path}")
        print(f"📄 Document type: {data.document_type.label}")
        print(f"📝 Summary: {data.summary}")
        print(f"🏷️  Tags: {', '.join(data.tags)}")

        layout = data.document_layout
        if layout:
            print(f"  - Sections: {len(layout.sections)}")
            print(f"  - Bullet points: {len(layout.bullet_points)}")
            print(f"  - Numbered lists: {len(layout.numbered_lists)}")
            print(f"  - Tables: {len(layout.tables)}")

        crm = extractor.generate_crm_data(data)
        if crm:
            crm_path = generator.save_json(crm, os.path.join(output_dir, f"{base_name}_crm.json"))
            print(f"👤 CRM record saved to: {crm_path}")

    except Exception as e:
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    main()
