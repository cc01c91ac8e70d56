"""Structured text extraction coordinator."""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Union

from PIL import Image

from ..annotators.base import TextAnnotator
from ..annotators.rule_based import RuleBasedAnnotator
from ..config import DEFAULT_SETTINGS, ExtractionSettings
from ..extractors.business_card_processor import BusinessCardProcessor
from ..extractors.contact_info_extractor import ContactInfoExtractor
from ..extractors.entity_extractor import EntityExtractor
from ..models.data_structures import (
    BusinessCardData, DocumentLayout, ExtractedEntities,
    ExtractionOptions, ImageSize, StructuredTextData, TextBlock,
)
from ..models.enums import DocumentType
from ..output.json_generator import JSONGenerator
from ..output.summary_generator import SummaryGenerator
from ..processors.document_classifier import DocumentClassifier
from ..processors.layout_analyzer import DocumentLayoutAnalyzer
from ..processors.table_detector import TableDetector
from ..utils.image_utils import ImageUtils

logger = logging.getLogger(__name__)

BlockInput = Union[TextBlock, Dict[str, Any]]


class StructuredTextExtractor:
    """
    Structured document understanding over OCR output:
    - Contact details and business-card identity
    - Layout structure (title, sections, lists, tables)
    - Named entities, money amounts and products
    - Document type with a matching summary, action items and tags
    """

    def __init__(self, annotator: Optional[TextAnnotator] = None,
                 settings: ExtractionSettings = DEFAULT_SETTINGS):
        settings.validate()
        self.settings = settings
        self.annotator = annotator or RuleBasedAnnotator()

        # Initialize modular components
        self.contact_extractor = ContactInfoExtractor(self.annotator, settings)
        self.business_card_processor = BusinessCardProcessor(self.contact_extractor, self.annotator, settings)
        self.layout_analyzer = DocumentLayoutAnalyzer(TableDetector(settings), settings)
        self.entity_extractor = EntityExtractor(self.annotator, self.contact_extractor, settings)
        self.classifier = DocumentClassifier(self.business_card_processor, settings)
        self.summary_generator = SummaryGenerator(settings)
        self.json_generator = JSONGenerator()

    # ========================================================================
    # Extraction
    # ========================================================================

    async def extract_structured_data(self, text: str, text_blocks: Sequence[BlockInput] = (),
                                      image: Optional[Image.Image] = None,
                                      options: Optional[ExtractionOptions] = None,
                                      image_size: Optional[ImageSize] = None) -> StructuredTextData:
        """
        Run every enabled stage over one piece of OCR output.

        ``image_size`` stands in for the image dimensions when only the OCR dump is
        available; an actual image takes precedence.
        """
        options = options or ExtractionOptions.comprehensive()
        text = text or ""
        blocks = self.coerce_blocks(text_blocks)
        if image is not None or image_size is None:
            image_size = ImageUtils.image_size(image)
        logger.debug("Extracting from %d characters, %d blocks (options=%s)", len(text), len(blocks), options)

        contact_info, document_layout, extracted_entities = await self._fan_out(text, blocks, image_size, options)

        document_type = DocumentType.GENERIC
        business_card: Optional[BusinessCardData] = None
        if options.classify_document_type:
            classification = await asyncio.to_thread(self.classifier.classify, text, contact_info, image)
            document_type = classification.document_type
            business_card = classification.business_card

        if business_card is None and (options.detect_business_card or document_type is DocumentType.BUSINESS_CARD):
            business_card = await asyncio.to_thread(
                self.business_card_processor.detect_business_card, text, image, contact_info)

        processing_confidence = self.calculate_overall_confidence(
            blocks, business_card, document_layout, extracted_entities)

        draft = StructuredTextData(
            contact_info=contact_info,
            business_card=business_card,
            document_layout=document_layout,
            extracted_entities=extracted_entities,
            document_type=document_type,
            processing_confidence=processing_confidence,
        )
        result = replace(
            draft,
            summary=self.summary_generator.generate_smart_summary(draft),
            action_items=[item.title for item in self.summary_generator.generate_actionable_items(draft)],
            tags=self.summary_generator.generate_smart_tags(draft),
        )
        logger.info("Extracted %s document (confidence %.2f, %d tags)",
                    document_type.value, processing_confidence, len(result.tags))
        return result

    def extract(self, text: str, text_blocks: Sequence[BlockInput] = (),
                image: Optional[Image.Image] = None,
                options: Optional[ExtractionOptions] = None,
                image_size: Optional[ImageSize] = None) -> StructuredTextData:
        """Synchronous wrapper around ``extract_structured_data``."""
        return asyncio.run(self.extract_structured_data(text, text_blocks, image, options, image_size))

    async def _fan_out(self, text: str, blocks: List[TextBlock], image_size: ImageSize,
                       options: ExtractionOptions):
        """Run contact, layout and entity extraction concurrently; disabled stages yield None."""

        async def skipped():
            return None

        contact_task = (asyncio.to_thread(self.contact_extractor.extract_contact_info, text)
                        if options.extract_contact_info else skipped())
        layout_task = (asyncio.to_thread(self.layout_analyzer.analyze_document_layout, blocks, image_size)
                       if options.analyze_layout else skipped())
        entity_task = (asyncio.to_thread(self.entity_extractor.extract_entities, text)
                       if options.extract_entities else skipped())

        contact_info, document_layout, extracted_entities = await asyncio.gather(
            contact_task, layout_task, entity_task)
        return contact_info, document_layout, extracted_entities

    @staticmethod
    def coerce_blocks(text_blocks: Sequence[BlockInput]) -> List[TextBlock]:
        return [b if isinstance(b, TextBlock) else TextBlock.from_dict(b) for b in text_blocks]

    @staticmethod
    def calculate_overall_confidence(blocks: Sequence[TextBlock], business_card: Optional[BusinessCardData],
                                     document_layout: Optional[DocumentLayout],
                                     extracted_entities: Optional[ExtractedEntities]) -> float:
        """Unweighted mean of whichever component confidences are available."""
        components = []
        if blocks:
            components.append(sum(b.confidence for b in blocks) / len(blocks))
        if business_card is not None:
            components.append(business_card.confidence)
        if document_layout is not None:
            components.append(document_layout.confidence)
        if extracted_entities is not None:
            components.append(extracted_entities.confidence)
        if not components:
            return 0.5
        return min(max(sum(components) / len(components), 0.0), 1.0)

    # ========================================================================
    # Export helpers
    # ========================================================================

    def to_dict(self, data: StructuredTextData) -> Dict[str, Any]:
        return self.json_generator.to_dict(data)

    def generate_crm_data(self, data: StructuredTextData) -> Optional[Dict[str, Any]]:
        if data.business_card is None:
            return None
        return self.business_card_processor.generate_crm_data(data.business_card)

