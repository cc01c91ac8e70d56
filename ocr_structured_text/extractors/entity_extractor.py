"""Named entity, currency and product extraction."""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from ..annotators.base import TextAnnotator
from ..annotators.rule_based import RuleBasedAnnotator
from ..config import DEFAULT_SETTINGS, ExtractionSettings
from ..models.data_structures import ContactInfo, CurrencyRef, ExtractedEntities
from ..models.enums import EntityKind
from .contact_info_extractor import ContactInfoExtractor

logger = logging.getLogger(__name__)


_AMOUNT = r'(\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)'
CURRENCY_PATTERNS = [
    (re.compile(r'\$\s?' + _AMOUNT), 'USD'),
    (re.compile(_AMOUNT + r'\s*USD\b'), 'USD'),
    (re.compile(r'€\s?' + _AMOUNT), 'EUR'),
    (re.compile(_AMOUNT + r'\s*EUR\b'), 'EUR'),
    (re.compile(r'£\s?' + _AMOUNT), 'GBP'),
    (re.compile(_AMOUNT + r'\s*GBP\b'), 'GBP'),
]

PRODUCT_INDICATORS = ("buy", "purchase", "item", "product", "service")
SENTENCE_BREAKS = re.compile(r'[.!?,;:()\[\]"\n]+')


class EntityExtractor:
    """People, places, organizations, dates, money amounts and products mentioned in text"""

    def __init__(self, annotator: Optional[TextAnnotator] = None,
                 contact_extractor: Optional[ContactInfoExtractor] = None,
                 settings: ExtractionSettings = DEFAULT_SETTINGS):
        self.annotator = annotator or RuleBasedAnnotator()
        self.settings = settings
        self.contact_extractor = contact_extractor or ContactInfoExtractor(self.annotator, settings)

    def extract_entities(self, text: str, contact_info: Optional[ContactInfo] = None) -> ExtractedEntities:
        if not text or not text.strip():
            return ExtractedEntities(confidence=self.calculate_confidence(0))

        people: List[str] = []
        places: List[str] = []
        organizations: List[str] = []
        buckets = {
            EntityKind.PERSON: people,
            EntityKind.PLACE: places,
            EntityKind.ORGANIZATION: organizations,
        }
        for tag in self.annotator.tag_names(text):
            name = tag.text.strip()
            bucket = buckets[tag.kind]
            if name and name not in bucket:
                bucket.append(name)

        if contact_info is not None:
            dates = list(contact_info.dates)
        else:
            dates = self.contact_extractor.extract_dates(text)

        entities = ExtractedEntities(
            people=people,
            places=places,
            organizations=organizations,
            dates=dates,
            currencies=self.extract_currencies(text),
            products=self.extract_products(text),
            confidence=self.calculate_confidence(len(people) + len(places) + len(organizations)),
        )
        logger.debug("Entities: %d people, %d places, %d organizations, %d amounts",
                     len(people), len(places), len(organizations), len(entities.currencies))
        return entities

    @staticmethod
    def extract_currencies(text: str) -> List[CurrencyRef]:
        found = []
        spans = []
        for pattern, code in CURRENCY_PATTERNS:
            for match in pattern.finditer(text):
                if any(match.start() < end and start < match.end() for start, end in spans):
                    continue
                try:
                    amount = Decimal(match.group(1).replace(',', ''))
                except InvalidOperation:
                    logger.debug("Dropping unparseable amount %r", match.group(0))
                    continue
                spans.append((match.start(), match.end()))
                found.append((match.start(), CurrencyRef(raw=match.group(0).strip(), amount=amount,
                                                         currency=code, confidence=0.9)))
        return [ref for _, ref in sorted(found, key=lambda item: item[0])]

    def extract_products(self, text: str) -> List[str]:
        products: List[str] = []
        for sentence in SENTENCE_BREAKS.split(text):
            words = sentence.split()
            for index, word in enumerate(words[:-1]):
                if word.lower() not in PRODUCT_INDICATORS:
                    continue
                candidate = words[index + 1]
                if len(candidate) > 2 and candidate not in products:
                    products.append(candidate)
        return products[:self.settings.max_products]

    @staticmethod
    def calculate_confidence(entity_count: int) -> float:
        if entity_count == 0:
            return 0.3
        if entity_count >= 5:
            return 0.9
        return 0.5 + 0.1 * entity_count
