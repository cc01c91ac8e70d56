"""Contact information extraction from recognized text."""

import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from ..annotators.base import TextAnnotator
from ..annotators.rule_based import RuleBasedAnnotator
from ..config import DEFAULT_SETTINGS, ExtractionSettings
from ..models.data_structures import (
    Address, ContactInfo, DataMatch, DateRef, EmailAddress, PhoneNumber, UrlRef,
)
from ..models.enums import DataKind, PhoneType
from ..processors.text_processor import TextProcessor

logger = logging.getLogger(__name__)


SUPPLEMENTARY_PHONE_PATTERN = re.compile(
    r'(?<![\d+])(?:\+?\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}(?!\d)'
    r'(?:\s*(?:ext\.?|x|extension)\s*(\d{1,6}))?',
    re.IGNORECASE,
)
EXTENSION_PATTERN = re.compile(r'\s*(?:ext\.?|x|extension)\s*(\d{1,6})(?!\d)', re.IGNORECASE)
SUPPLEMENTARY_EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
ZIP_PATTERN = re.compile(r'\b(\d{5}(?:-\d{4})?)\b')
COUNTRY_PATTERN = re.compile(r',?\s*(USA|U\.S\.A\.|United States)\s*$', re.IGNORECASE)

TOLL_FREE_PREFIXES = ('800', '888', '877', '866', '855', '844', '833')
COMMON_EMAIL_PROVIDERS = ('gmail', 'yahoo', 'hotmail', 'outlook', 'icloud')

PHONE_CONTEXT_WORDS = ('phone', 'tel', 'mobile', 'cell')
EMAIL_CONTEXT_WORDS = ('email', 'e-mail', 'contact')
ADDRESS_CONTEXT_WORDS = ('address', 'location', 'visit', 'office')
URL_CONTEXT_WORDS = ('website', 'visit', 'web', 'www')
DATE_CONTEXT_WORDS = ('date', 'when', 'schedule', 'due')

DATE_FORMATS = (
    (re.compile(r'^\d{1,2}/\d{1,2}/\d{4}$'), 'MM/dd/yyyy'),
    (re.compile(r'^\d{4}-\d{2}-\d{2}$'), 'yyyy-MM-dd'),
    (re.compile(r'^[A-Za-z]+\.?\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}$'), 'MMMM dd, yyyy'),
    (re.compile(r'^\d{1,2}(?:st|nd|rd|th)?\s+[A-Za-z]+\.?,?\s+\d{4}$'), 'dd MMMM yyyy'),
)


class ContactInfoExtractor:
    """Finds phones, e-mails, addresses, URLs and dates and scores each find"""

    def __init__(self, annotator: Optional[TextAnnotator] = None,
                 settings: ExtractionSettings = DEFAULT_SETTINGS):
        self.annotator = annotator or RuleBasedAnnotator()
        self.settings = settings

    def extract_contact_info(self, text: str) -> ContactInfo:
        """Extract every kind of contact detail; missing kinds come back as empty lists."""
        if not text or not text.strip():
            return ContactInfo()

        matches = self.annotator.detect_data(text)

        contact_info = ContactInfo(
            phone_numbers=self.extract_phone_numbers(text, matches),
            email_addresses=self.extract_email_addresses(text, matches),
            addresses=self.extract_addresses(text, matches),
            urls=self.extract_urls(text, matches),
            dates=self.extract_dates(text, matches),
        )
        logger.debug(
            "Contact extraction: %d phones, %d emails, %d addresses, %d urls, %d dates",
            len(contact_info.phone_numbers), len(contact_info.email_addresses),
            len(contact_info.addresses), len(contact_info.urls), len(contact_info.dates),
        )
        return contact_info

    # ========================================================================
    # Phone numbers
    # ========================================================================

    def extract_phone_numbers(self, text: str, matches: Optional[List[DataMatch]] = None) -> List[PhoneNumber]:
        if matches is None:
            matches = self.annotator.detect_data(text)

        phones: List[PhoneNumber] = []
        seen_digits: List[str] = []

        for match in matches:
            if match.kind is not DataKind.PHONE:
                continue
            digits = re.sub(r'\D', '', match.text)
            if self._is_duplicate_phone(digits, seen_digits):
                continue
            seen_digits.append(digits)
            extension = EXTENSION_PATTERN.match(text, match.end)
            if extension:
                phones.append(self._build_phone(text[match.start:extension.end()], text, extension=extension.group(1)))
            else:
                phones.append(self._build_phone(match.text, text))

        for match in SUPPLEMENTARY_PHONE_PATTERN.finditer(text):
            main_part = match.group(0)[:match.start(1) - match.start()] if match.group(1) else match.group(0)
            digits = re.sub(r'\D', '', main_part)
            if self._is_duplicate_phone(digits, seen_digits):
                continue
            seen_digits.append(digits)
            phones.append(self._build_phone(match.group(0).strip(), text, extension=match.group(1)))
            logger.debug("Supplementary pattern found phone %r", match.group(0))

        return phones

    @staticmethod
    def _is_duplicate_phone(digits: str, seen_digits: List[str]) -> bool:
        return any(digits == seen or digits in seen or seen in digits for seen in seen_digits)

    def _build_phone(self, raw: str, text: str, extension: Optional[str] = None) -> PhoneNumber:
        main = raw
        if extension:
            main = re.split(r'\s*(?:ext\.?|x|extension)\s*\d', raw, maxsplit=1, flags=re.IGNORECASE)[0]
        cleaned = re.sub(r'[^\d+]', '', main)
        formatted = self.format_phone_number(cleaned)
        if extension:
            formatted = f"{formatted} ext. {extension}"
        return PhoneNumber(
            raw=raw,
            formatted=formatted,
            type=self.classify_phone_number(cleaned),
            confidence=self._phone_confidence(raw, text),
        )

    @staticmethod
    def format_phone_number(cleaned: str) -> str:
        """Group a digits-and-plus string into a North American display form where possible."""
        if cleaned.startswith('+1') and len(cleaned) == 12:
            digits = cleaned[2:]
        elif cleaned.startswith('1') and len(cleaned) == 11:
            digits = cleaned[1:]
        elif len(cleaned) == 10 and cleaned.isdigit():
            return f"({cleaned[:3]}) {cleaned[3:6]}-{cleaned[6:]}"
        else:
            return cleaned
        return f"+1 ({digits[:3]}) {digits[3:6]}-{digits[6:]}"

    @staticmethod
    def classify_phone_number(cleaned: str) -> PhoneType:
        if cleaned.startswith('+'):
            return PhoneType.INTERNATIONAL
        digits = cleaned[1:] if cleaned.startswith('1') and len(cleaned) == 11 else cleaned
        if len(digits) == 10 and digits.startswith(TOLL_FREE_PREFIXES):
            return PhoneType.TOLL_FREE
        return PhoneType.UNKNOWN

    def _phone_confidence(self, raw: str, text: str) -> float:
        confidence = 0.7
        context = TextProcessor.context_window(raw, text, self.settings.context_radius).lower()
        if TextProcessor.contains_any(context, PHONE_CONTEXT_WORDS):
            confidence += 0.2
        if '(' in raw and ')' in raw and '-' in raw:
            confidence += 0.1
        return min(confidence, 1.0)

    # ========================================================================
    # E-mail addresses
    # ========================================================================

    def extract_email_addresses(self, text: str, matches: Optional[List[DataMatch]] = None) -> List[EmailAddress]:
        if matches is None:
            matches = self.annotator.detect_data(text)

        candidates = [m.url[len('mailto:'):] for m in matches
                      if m.kind is DataKind.LINK and m.url and m.url.lower().startswith('mailto:')]
        candidates.extend(m.group(0) for m in SUPPLEMENTARY_EMAIL_PATTERN.finditer(text))

        emails: List[EmailAddress] = []
        seen = set()
        for candidate in candidates:
            address = candidate.strip().lower()
            if not address or address in seen:
                continue
            seen.add(address)
            emails.append(EmailAddress(
                address=address,
                domain=address.split('@', 1)[1] if '@' in address else '',
                is_valid=self.is_valid_email(address),
                confidence=self._email_confidence(candidate, address, text),
            ))
        return emails

    @staticmethod
    def is_valid_email(address: str) -> bool:
        if address.count('@') != 1:
            return False
        local, domain = address.split('@')
        return bool(local) and '.' in domain and len(domain) >= 4

    def _email_confidence(self, raw: str, address: str, text: str) -> float:
        confidence = 0.8
        context = TextProcessor.context_window(raw, text, self.settings.context_radius).lower()
        if TextProcessor.contains_any(context, EMAIL_CONTEXT_WORDS):
            confidence += 0.1
        domain = address.split('@', 1)[-1]
        if TextProcessor.contains_any(domain, COMMON_EMAIL_PROVIDERS):
            confidence += 0.1
        return min(confidence, 1.0)

    # ========================================================================
    # Postal addresses
    # ========================================================================

    def extract_addresses(self, text: str, matches: Optional[List[DataMatch]] = None) -> List[Address]:
        if matches is None:
            matches = self.annotator.detect_data(text)

        addresses: List[Address] = []
        seen = set()
        for match in matches:
            if match.kind is not DataKind.ADDRESS or match.text in seen:
                continue
            seen.add(match.text)
            address = self.parse_address(match.text)
            addresses.append(Address(
                raw=address.raw,
                street=address.street,
                city=address.city,
                state=address.state,
                zip_code=address.zip_code,
                country=address.country,
                confidence=self._address_confidence(match.text, address.zip_code, text),
            ))
        return addresses

    @staticmethod
    def parse_address(raw: str) -> Address:
        """Split an address into street, city, state, ZIP and country where recognizable."""
        lines = [line.strip() for line in raw.splitlines() if line.strip()]
        if len(lines) > 1:
            street, tail = lines[0], lines[-1]
        elif ',' in raw:
            street, tail = (part.strip() for part in raw.split(',', 1))
        else:
            street, tail = raw.strip(), ''

        country = None
        country_match = COUNTRY_PATTERN.search(tail)
        if country_match:
            country = country_match.group(1)
            tail = tail[:country_match.start()].strip()

        city = state = zip_code = None
        zip_match = ZIP_PATTERN.search(tail)
        if zip_match:
            zip_code = zip_match.group(1)
            city, state = ContactInfoExtractor._split_city_state(tail[:zip_match.start()])

        return Address(
            raw=raw,
            street=street or None,
            city=city,
            state=state,
            zip_code=zip_code,
            country=country,
            confidence=0.6,
        )

    @staticmethod
    def _split_city_state(before_zip: str) -> Tuple[Optional[str], Optional[str]]:
        parts = [p.strip() for p in before_zip.strip().rstrip(',').split(',') if p.strip()]
        if len(parts) >= 2:
            return parts[-2], parts[-1]
        if len(parts) == 1:
            tokens = parts[0].rsplit(' ', 1)
            if len(tokens) == 2 and re.fullmatch(r'[A-Z]{2}', tokens[1]):
                return tokens[0], tokens[1]
            return parts[0], None
        return None, None

    def _address_confidence(self, raw: str, zip_code: Optional[str], text: str) -> float:
        confidence = 0.6
        context = TextProcessor.context_window(raw, text, self.settings.address_context_radius).lower()
        if TextProcessor.contains_any(context, ADDRESS_CONTEXT_WORDS):
            confidence += 0.2
        if zip_code:
            confidence += 0.2
        return min(confidence, 1.0)

    # ========================================================================
    # URLs
    # ========================================================================

    def extract_urls(self, text: str, matches: Optional[List[DataMatch]] = None) -> List[UrlRef]:
        if matches is None:
            matches = self.annotator.detect_data(text)

        urls: List[UrlRef] = []
        seen = set()
        for match in matches:
            if match.kind is not DataKind.LINK or (match.url or '').lower().startswith('mailto:'):
                continue
            url = match.url or match.text
            if not re.match(r'^[a-z][a-z0-9+.-]*://', url, re.IGNORECASE):
                url = f"http://{url}"
            if url.lower() in seen:
                continue
            try:
                is_valid = self.is_valid_url(url)
            except ValueError:
                logger.debug("Dropping malformed URL %r", url)
                continue
            seen.add(url.lower())

            confidence = 0.8
            context = TextProcessor.context_window(match.text, text, self.settings.context_radius).lower()
            if TextProcessor.contains_any(context, URL_CONTEXT_WORDS):
                confidence += 0.1
            urls.append(UrlRef(url=url, display_text=match.text, is_valid=is_valid,
                               confidence=min(confidence, 1.0)))
        return urls

    @staticmethod
    def is_valid_url(url: str) -> bool:
        parsed = urlparse(url)
        return parsed.scheme in ('http', 'https') and '.' in parsed.netloc

    # ========================================================================
    # Dates
    # ========================================================================

    def extract_dates(self, text: str, matches: Optional[List[DataMatch]] = None) -> List[DateRef]:
        if matches is None:
            matches = self.annotator.detect_data(text)

        dates: List[DateRef] = []
        seen = set()
        for match in matches:
            if match.kind is not DataKind.DATE or match.text in seen:
                continue
            if match.parsed_date is None:
                logger.debug("Dropping unparsed date %r", match.text)
                continue
            seen.add(match.text)

            confidence = 0.7
            context = TextProcessor.context_window(match.text, text, self.settings.context_radius).lower()
            if TextProcessor.contains_any(context, DATE_CONTEXT_WORDS):
                confidence += 0.2
            dates.append(DateRef(
                raw=match.text,
                parsed=match.parsed_date,
                format=self.detect_date_format(match.text),
                confidence=min(confidence, 1.0),
            ))
        return dates

    @staticmethod
    def detect_date_format(raw: str) -> Optional[str]:
        for pattern, name in DATE_FORMATS:
            if pattern.match(raw.strip()):
                return name
        return None
