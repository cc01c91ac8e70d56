"""Text-based document type classification."""

import logging
import re
from typing import Dict, Optional

from PIL import Image

from ..config import DEFAULT_SETTINGS, ExtractionSettings
from ..models.data_structures import ContactInfo, DocumentClassification
from ..models.enums import DocumentType
from .text_processor import TextProcessor

logger = logging.getLogger(__name__)


# Candidate order doubles as the tie-break order
TYPE_KEYWORDS = {
    DocumentType.NOTICE: DocumentType.NOTICE.processing_hints + [
        "notice", "attention", "important", "reminder", "please note", "effective", "closed",
    ],
    DocumentType.FORM: DocumentType.FORM.processing_hints + [
        "form", "name:", "date:", "signature:", "check", "fill", "complete", "applicant",
    ],
    DocumentType.RECEIPT: DocumentType.RECEIPT.processing_hints + [
        "receipt", "subtotal", "cash", "change", "visa", "mastercard", "qty", "thank you",
    ],
    DocumentType.LETTER: DocumentType.LETTER.processing_hints + [
        "sincerely", "regards", "yours truly", "to whom it may concern",
    ],
    DocumentType.FLYER: DocumentType.FLYER.processing_hints + [
        "join us", "free", "tickets", "admission", "register", "festival", "concert",
    ],
    DocumentType.MENU: DocumentType.MENU.processing_hints + [
        "menu", "appetizers", "entrees", "desserts", "drinks", "beverages", "specials",
    ],
}

AMOUNT_PATTERN = re.compile(r'[$€£]\s?\d+(?:[.,]\d{2})?|\b\d+(?:\.\d{2})?\s?(?:USD|EUR|GBP)\b')
PRICE_LINE_PATTERN = re.compile(r'[$€£]?\s?\d+[.,]\d{2}\s*$')
SALUTATION_PATTERN = re.compile(r'^\s*dear\s+\w+', re.IGNORECASE | re.MULTILINE)
CHECKBOX_GLYPHS = ("□", "☐")


class DocumentClassifier:
    """Assigns one ``DocumentType`` to a piece of text"""

    def __init__(self, card_processor=None, settings: ExtractionSettings = DEFAULT_SETTINGS):
        self.settings = settings
        if card_processor is None:
            from ..extractors.business_card_processor import BusinessCardProcessor
            card_processor = BusinessCardProcessor(settings=settings)
        self.card_processor = card_processor
        self.keyword_patterns = {
            doc_type: TextProcessor.keyword_pattern(keywords)
            for doc_type, keywords in TYPE_KEYWORDS.items()
        }

    def classify(self, text: str, contact_info: Optional[ContactInfo] = None,
                 image: Optional[Image.Image] = None) -> DocumentClassification:
        if not text or not text.strip():
            return DocumentClassification(DocumentType.GENERIC, 0.0)

        card = self.card_processor.detect_business_card(text, image=image, contact_info=contact_info)
        if card is not None:
            logger.debug("Classified as business card (confidence %.2f)", card.confidence)
            return DocumentClassification(
                document_type=DocumentType.BUSINESS_CARD,
                confidence=card.confidence,
                business_card=card,
            )

        scores = self.score_types(text)
        best_type = DocumentType.GENERIC
        best_score = 0
        for doc_type, score in scores.items():
            if score > best_score:
                best_type, best_score = doc_type, score

        if best_score < self.settings.classification_min_score:
            logger.debug("No document type reached the minimum score: %s",
                         {t.value: s for t, s in scores.items()})
            return DocumentClassification(DocumentType.GENERIC, 0.4, scores=scores)

        confidence = min(1.0, 0.4 + 0.1 * best_score)
        logger.debug("Classified as %s with score %d", best_type.value, best_score)
        return DocumentClassification(best_type, confidence, scores=scores)

    def score_types(self, text: str) -> Dict[DocumentType, int]:
        lines = TextProcessor.non_empty_lines(text)
        scores = {}
        for doc_type, pattern in self.keyword_patterns.items():
            hits = {m.group(0).lower() for m in pattern.finditer(text)}
            scores[doc_type] = len(hits)

        if len(AMOUNT_PATTERN.findall(text)) >= 2:
            scores[DocumentType.RECEIPT] += 2
        if sum(1 for line in lines if PRICE_LINE_PATTERN.search(line)) >= 3:
            scores[DocumentType.MENU] += 2
        if sum(1 for line in lines if line.endswith(':') or '____' in line) >= 2:
            scores[DocumentType.FORM] += 2
        scores[DocumentType.FORM] += sum(text.count(glyph) for glyph in CHECKBOX_GLYPHS)
        if SALUTATION_PATTERN.search(text):
            scores[DocumentType.LETTER] += 2
        return scores
