"""Business card detection and identity extraction."""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from PIL import Image

from ..annotators.base import TextAnnotator
from ..annotators.rule_based import RuleBasedAnnotator
from ..config import DEFAULT_SETTINGS, ExtractionSettings
from ..models.data_structures import BusinessCardData, ContactInfo, PersonName, SocialMediaInfo
from ..models.enums import EntityKind, SocialPlatform
from ..processors.text_processor import TextProcessor
from ..utils.image_utils import ImageUtils
from .contact_info_extractor import ContactInfoExtractor

logger = logging.getLogger(__name__)


TITLE_KEYWORDS = [
    "ceo", "cfo", "cto", "coo", "president", "director", "manager", "vp", "vice president",
    "senior", "lead", "head", "chief", "founder", "co-founder", "partner", "consultant",
    "specialist", "analyst", "engineer", "developer", "designer", "architect", "coordinator",
    "supervisor", "executive", "officer", "principal", "owner", "attorney", "agent",
]

COMPANY_INDICATORS = [
    "inc", "llc", "corp", "corporation", "company", "co.", "ltd", "limited", "group",
    "associates", "partners", "solutions", "services", "systems", "technologies", "tech",
    "consulting", "studio", "agency", "labs",
]

SOCIAL_PLATFORMS = [
    ("linkedin.com", SocialPlatform.LINKEDIN, None),
    ("twitter.com", SocialPlatform.TWITTER, None),
    ("x.com", SocialPlatform.TWITTER, None),
    ("facebook.com", SocialPlatform.FACEBOOK, None),
    ("instagram.com", SocialPlatform.INSTAGRAM, None),
    ("github.com", SocialPlatform.OTHER, "GitHub"),
]

NAME_PREFIXES = {"dr", "mr", "mrs", "ms", "prof"}
NAME_SUFFIXES = {"jr", "sr", "ii", "iii", "iv", "phd", "md", "esq"}

NAME_REGEXES = [
    re.compile(r"^([A-Z][a-z]+ [A-Z][a-z]+)$", re.MULTILINE),
    re.compile(r"^([A-Z][a-z]+ [A-Z]\. [A-Z][a-z]+)$", re.MULTILINE),
    re.compile(r"^([A-Z][a-z]+, [A-Z][a-z]+)$", re.MULTILINE),
    re.compile(r"\b([A-Z][A-Z]+ [A-Z][A-Z]+)\b"),
    re.compile(r"\b([A-Z][a-z]+ [A-Z][a-z]+ [A-Z][a-z]+)\b"),
]
NON_NAME_INDICATORS = ("phone", "tel", "email", "www", ".com", "@",
                       "solutions", "service", "company", "inc", "llc")

TITLE_SHAPES = [
    re.compile(r"\b(?:senior|lead|head|chief|principal)\s+\w+", re.IGNORECASE),
    re.compile(r"\w+\s+(?:manager|director|officer|specialist)\b", re.IGNORECASE),
]

CARD_ASPECT_RATIO_RANGE = (1.5, 1.8)


class BusinessCardProcessor:
    """Decides whether text comes from a business card and reads the card's fields"""

    def __init__(self, contact_extractor: Optional[ContactInfoExtractor] = None,
                 annotator: Optional[TextAnnotator] = None,
                 settings: ExtractionSettings = DEFAULT_SETTINGS):
        self.annotator = annotator or RuleBasedAnnotator()
        self.settings = settings
        self.contact_extractor = contact_extractor or ContactInfoExtractor(self.annotator, settings)
        self.title_pattern = TextProcessor.keyword_pattern(TITLE_KEYWORDS)
        self.company_pattern = TextProcessor.keyword_pattern(COMPANY_INDICATORS)

    # ========================================================================
    # Detection
    # ========================================================================

    def detect_business_card(self, text: str, image: Optional[Image.Image] = None,
                             contact_info: Optional[ContactInfo] = None) -> Optional[BusinessCardData]:
        """
        Return the card's data when the text passes every gating rule, otherwise None.

        ``contact_info`` may be passed in when it has already been extracted from
        the same text; it is computed here otherwise.
        """
        if not text or not text.strip():
            return None

        if contact_info is None:
            contact_info = self.contact_extractor.extract_contact_info(text)

        name = self.score_business_card(text, contact_info, image)
        if name is None:
            return None

        title = self.extract_title(text, name.full_name)
        company = self.extract_company(text, name.full_name, title)
        social_media = self.extract_social_media(text)
        confidence = self.calculate_confidence(name, title, company, contact_info)

        logger.debug("Business card accepted: name=%s title=%s company=%s confidence=%.2f",
                     name.full_name, title, company, confidence)
        return BusinessCardData(
            name=name,
            title=title,
            company=company,
            contact_info=contact_info,
            social_media=social_media,
            confidence=confidence,
        )

    def score_business_card(self, text: str, contact_info: ContactInfo,
                            image: Optional[Image.Image] = None) -> Optional[PersonName]:
        """Apply the gating rules; the extracted name is returned when they all pass."""
        has_phone = bool(contact_info.phone_numbers)
        has_email = bool(contact_info.email_addresses)
        has_address = bool(contact_info.addresses)

        contact_methods = sum((has_phone, has_email, has_address))
        if contact_methods < self.settings.card_min_contact_methods:
            logger.debug("Card gate: only %d contact methods", contact_methods)
            return None

        name = self.extract_person_name(text, contact_info)
        if name is None:
            logger.debug("Card gate: no person name")
            return None

        has_title = bool(self.title_pattern.search(text))
        has_company = bool(self.company_pattern.search(text))
        if not (has_title or has_company):
            logger.debug("Card gate: no title keyword or company indicator")
            return None

        word_count = len(TextProcessor.words(text))
        if word_count > self.settings.card_max_words:
            logger.debug("Card gate: %d words is too long for a card", word_count)
            return None

        line_count = len(TextProcessor.non_empty_lines(text))

        score = 0
        score += 2 if has_phone else 0
        score += 2 if has_email else 0
        score += 1 if has_address else 0
        score += 1 if contact_info.urls else 0
        score += 2 if has_title else 0
        score += 2 if has_company else 0
        score += 3
        score += 1 if 15 <= word_count <= 80 else 0
        score += 1 if 3 <= line_count <= 15 else 0

        ratio = ImageUtils.aspect_ratio(image)
        if ratio is not None and CARD_ASPECT_RATIO_RANGE[0] <= ratio <= CARD_ASPECT_RATIO_RANGE[1]:
            score += self.settings.card_aspect_ratio_bonus

        logger.debug("Card gate score: %d (threshold %d)", score, self.settings.card_score_threshold)
        if score < self.settings.card_score_threshold:
            return None
        return name

    # ========================================================================
    # Name extraction
    # ========================================================================

    def extract_person_name(self, text: str,
                            contact_info: Optional[ContactInfo] = None) -> Optional[PersonName]:
        """
        Try each name strategy in turn and keep the first hit.

        Lines holding digits, or lying inside an address found in ``contact_info``,
        are never taken as a name.
        """
        for tag in self.annotator.tag_names(text):
            if tag.kind is EntityKind.PERSON:
                logger.debug("Name from tagger: %s", tag.text)
                return self.parse_person_name(tag.text)

        addresses = [' '.join(a.raw.split()) for a in contact_info.addresses] if contact_info else []
        lines = [
            line for line in TextProcessor.non_empty_lines(TextProcessor.normalize_lines(text))
            if not self._is_address_line(line, addresses)
        ]

        # Names often sit at the bottom of a card
        for line in reversed(lines[-3:]):
            name = self._name_from_line(line)
            if name:
                logger.debug("Name from trailing lines: %s", name.full_name)
                return name

        for line in lines[:5]:
            name = self._name_from_line(line)
            if name:
                logger.debug("Name from leading lines: %s", name.full_name)
                return name

        for line in lines:
            name = self._capitalized_name_in_line(line)
            if name:
                logger.debug("Name from capitalized line: %s", name.full_name)
                return name

        return self._name_from_regex('\n'.join(lines))

    @staticmethod
    def _is_address_line(line: str, addresses: List[str]) -> bool:
        if any(c.isdigit() for c in line):
            return True
        line = ' '.join(line.split())
        return any(line in address or address in line for address in addresses)

    def _is_role_line(self, line: str) -> bool:
        return bool(self.title_pattern.search(line) or self.company_pattern.search(line))

    def _name_from_line(self, line: str) -> Optional[PersonName]:
        lower = line.lower()
        if TextProcessor.contains_any(lower, ("@", "www", ".com", "phone")) or self._is_role_line(line):
            return None

        words = line.split()
        if not 2 <= len(words) <= 4:
            return None
        name_words = [w for w in words if w[:1].isalpha() and w[:1].isupper()]
        if len(name_words) >= 2:
            return self.parse_person_name(' '.join(name_words))
        return None

    def _capitalized_name_in_line(self, line: str) -> Optional[PersonName]:
        lower = line.lower()
        if TextProcessor.contains_any(lower, ("@", ".com", "phone", "tel", "www", "http")) or self._is_role_line(line):
            return None

        words = line.split()
        if not 2 <= len(words) <= 4:
            return None
        capitalized = [
            w for w in words
            if w[:1].isupper() and all(c.isalpha() or c in ".'" for c in w) and 2 <= len(w) <= 20
        ]
        if len(capitalized) >= 2 and len(capitalized) >= len(words) - 1:
            return self.parse_person_name(' '.join(capitalized))
        return None

    def _name_from_regex(self, text: str) -> Optional[PersonName]:
        for pattern in NAME_REGEXES:
            for match in pattern.finditer(text):
                candidate = match.group(1)
                if not TextProcessor.contains_any(candidate.lower(), NON_NAME_INDICATORS):
                    logger.debug("Name from pattern: %s", candidate)
                    return self.parse_person_name(candidate)
        return None

    @staticmethod
    def parse_person_name(full_name: str) -> PersonName:
        """Split a name into prefix, first name, last name and suffix."""
        full_name = ' '.join(full_name.split())
        components = full_name.split(' ')

        def key(token: str) -> str:
            return token.lower().rstrip(',').replace('.', '')

        prefix = suffix = None
        if len(components) > 1 and key(components[0]) in NAME_PREFIXES:
            prefix = components.pop(0)
        if len(components) > 1 and key(components[-1]) in NAME_SUFFIXES:
            suffix = components.pop().rstrip(',')
            components[-1] = components[-1].rstrip(',')

        first_name = last_name = None
        if len(components) == 2 and components[0].endswith(','):
            last_name, first_name = components[0].rstrip(','), components[1]
        elif len(components) >= 2:
            first_name = components[0]
            last_name = ' '.join(components[1:])
        elif components and components[0]:
            first_name = components[0]

        return PersonName(
            full_name=full_name,
            first_name=first_name,
            last_name=last_name,
            prefix=prefix,
            suffix=suffix,
        )

    # ========================================================================
    # Title, company and social media
    # ========================================================================

    def extract_title(self, text: str, person_name: Optional[str]) -> Optional[str]:
        lines = [line.strip() for line in text.splitlines()]
        name_parts = person_name.lower().split() if person_name else []

        for index, line in enumerate(lines):
            lower = line.lower()
            if name_parts and all(part in lower for part in name_parts):
                for candidate in lines[index + 1:index + 3]:
                    title = self._title_from_line(candidate)
                    if title:
                        return title
            else:
                title = self._title_from_line(line)
                if title:
                    return title
        return None

    def _title_from_line(self, line: str) -> Optional[str]:
        lower = line.lower()
        if not line or TextProcessor.contains_any(lower, ("@", "www", ".com", "phone")):
            return None
        if self.title_pattern.search(line):
            return line
        if any(shape.search(line) for shape in TITLE_SHAPES):
            return line
        return None

    def extract_company(self, text: str, person_name: Optional[str], title: Optional[str]) -> Optional[str]:
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        name_parts = person_name.lower().split() if person_name else []

        def is_name_or_title(line: str) -> bool:
            lower = line.lower()
            if name_parts and all(part in lower for part in name_parts):
                return True
            return title is not None and lower == title.lower()

        for line in lines:
            lower = line.lower()
            if TextProcessor.contains_any(lower, ("@", "phone", "mobile", "cell")) or is_name_or_title(line):
                continue
            if self.company_pattern.search(line):
                return line

        candidates = [
            line for line in lines
            if not TextProcessor.contains_any(line.lower(), ("@", "phone", "www"))
            and not is_name_or_title(line)
            and len(re.sub(r'\D', '', line)) < 7
            and len(line) > 3
        ]
        if not candidates:
            return None
        return max(candidates, key=len)

    def extract_social_media(self, text: str) -> List[SocialMediaInfo]:
        found: List[SocialMediaInfo] = []
        seen = set()
        for domain, platform, platform_name in SOCIAL_PLATFORMS:
            pattern = re.compile(
                r'(?<![\w.@])(?:https?://)?(?:www\.)?' + re.escape(domain) + r'(?:/[^\s]*)?',
                re.IGNORECASE,
            )
            for match in pattern.finditer(text):
                matched = match.group(0).rstrip('.,;')
                handle = self._extract_handle(matched, platform)
                if not handle or (platform, handle.lower()) in seen:
                    continue
                seen.add((platform, handle.lower()))
                url = matched if matched.lower().startswith('http') else f"https://{matched}"
                found.append(SocialMediaInfo(platform=platform, handle=handle, url=url,
                                             platform_name=platform_name))
        return found

    @staticmethod
    def _extract_handle(url: str, platform: SocialPlatform) -> str:
        path = re.sub(r'^(?:https?://)?[^/]+', '', url)
        components = [c for c in path.split('/') if c]
        if not components:
            return ''
        if platform is SocialPlatform.LINKEDIN:
            if 'in' in components:
                index = components.index('in')
                if index + 1 < len(components):
                    return components[index + 1]
            return components[-1]
        if platform is SocialPlatform.TWITTER:
            return components[-1].replace('@', '')
        return components[-1]

    # ========================================================================
    # Confidence and CRM export
    # ========================================================================

    @staticmethod
    def calculate_confidence(name: Optional[PersonName], title: Optional[str],
                             company: Optional[str], contact_info: ContactInfo) -> float:
        confidence = 0.0
        if name is not None:
            confidence += 0.3
            if name.first_name and name.last_name:
                confidence += 0.1
        if title:
            confidence += 0.2
        if company:
            confidence += 0.2
        if contact_info.phone_numbers:
            confidence += 0.1 + 0.05 * (len(contact_info.phone_numbers) - 1)
        if contact_info.email_addresses:
            confidence += 0.1 + 0.05 * (len(contact_info.email_addresses) - 1)
        if contact_info.addresses:
            confidence += 0.1
        return min(confidence, 1.0)

    @staticmethod
    def generate_crm_data(business_card: BusinessCardData) -> Dict[str, Any]:
        """Flatten a card into a string-keyed record for CRM import."""
        crm: Dict[str, Any] = {}
        contact = business_card.contact_info

        if business_card.name:
            name = business_card.name
            crm.update({
                "first_name": name.first_name or "",
                "last_name": name.last_name or "",
                "full_name": name.full_name,
                "prefix": name.prefix,
                "suffix": name.suffix,
            })

        crm["title"] = business_card.title or ""
        crm["company"] = business_card.company or ""

        if contact.phone_numbers:
            crm["phone"] = contact.phone_numbers[0].formatted
            crm["phone_numbers"] = [
                {"number": p.formatted, "type": p.type.value, "confidence": p.confidence}
                for p in contact.phone_numbers
            ]

        if contact.email_addresses:
            crm["email"] = contact.email_addresses[0].address
            crm["emails"] = [
                {"address": e.address, "domain": e.domain, "is_valid": e.is_valid, "confidence": e.confidence}
                for e in contact.email_addresses
            ]

        if contact.addresses:
            address = contact.addresses[0]
            crm.update({
                "address": address.raw,
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zip_code": address.zip_code,
                "country": address.country,
            })

        if business_card.social_media:
            crm["social_media"] = [
                {"platform": s.platform_name or s.platform.value, "handle": s.handle, "url": s.url}
                for s in business_card.social_media
            ]
            shortcuts: Dict[SocialPlatform, Tuple[str, bool]] = {
                SocialPlatform.LINKEDIN: ("linkedin", True),
                SocialPlatform.TWITTER: ("twitter", False),
                SocialPlatform.FACEBOOK: ("facebook", True),
            }
            for social in business_card.social_media:
                if social.platform in shortcuts and shortcuts[social.platform][0] not in crm:
                    key, prefer_url = shortcuts[social.platform]
                    crm[key] = (social.url or social.handle) if prefer_url else social.handle

        crm["source"] = "business_card_scan"
        crm["confidence"] = business_card.confidence
        crm["created_date"] = datetime.now(timezone.utc).isoformat()
        return crm
