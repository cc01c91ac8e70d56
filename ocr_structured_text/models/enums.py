"""Enumerations for structured text extraction."""

from enum import Enum
from typing import List


class DocumentType(Enum):
    """Closed set of document types that drive summary and action generation"""
    BUSINESS_CARD = "business_card"
    NOTICE = "notice"
    FORM = "form"
    RECEIPT = "receipt"
    LETTER = "letter"
    FLYER = "flyer"
    MENU = "menu"
    GENERIC = "generic"

    @property
    def label(self) -> str:
        return _DOCUMENT_LABELS[self]

    @property
    def processing_hints(self) -> List[str]:
        return list(_PROCESSING_HINTS[self])

    @property
    def expected_elements(self) -> List[str]:
        return list(_EXPECTED_ELEMENTS[self])


_DOCUMENT_LABELS = {
    DocumentType.BUSINESS_CARD: "Business Card",
    DocumentType.NOTICE: "Notice",
    DocumentType.FORM: "Form",
    DocumentType.RECEIPT: "Receipt",
    DocumentType.LETTER: "Letter",
    DocumentType.FLYER: "Event Flyer",
    DocumentType.MENU: "Menu",
    DocumentType.GENERIC: "Document",
}

_PROCESSING_HINTS = {
    DocumentType.BUSINESS_CARD: ("name", "title", "company", "contact", "email", "phone"),
    DocumentType.NOTICE: ("announcement", "date", "contact", "location", "time"),
    DocumentType.FORM: ("field", "label", "value", "checkbox", "signature"),
    DocumentType.RECEIPT: ("item", "price", "total", "date", "tax", "payment"),
    DocumentType.LETTER: ("date", "address", "signature", "subject", "dear"),
    DocumentType.FLYER: ("event", "date", "location", "contact", "price"),
    DocumentType.MENU: ("item", "price", "description", "category"),
    DocumentType.GENERIC: (),
}

_EXPECTED_ELEMENTS = {
    DocumentType.BUSINESS_CARD: ("name", "contact_info"),
    DocumentType.NOTICE: ("title", "content", "contact"),
    DocumentType.FORM: ("fields", "labels"),
    DocumentType.RECEIPT: ("items", "total"),
    DocumentType.LETTER: ("header", "body", "signature"),
    DocumentType.FLYER: ("title", "details", "contact"),
    DocumentType.MENU: ("categories", "items", "prices"),
    DocumentType.GENERIC: ("content",),
}


class PhoneType(Enum):
    """Phone number classification"""
    MOBILE = "mobile"
    LANDLINE = "landline"
    TOLL_FREE = "toll_free"
    INTERNATIONAL = "international"
    UNKNOWN = "unknown"


class SocialPlatform(Enum):
    """Social network a profile link belongs to"""
    LINKEDIN = "linkedin"
    TWITTER = "twitter"
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    OTHER = "other"


class Priority(Enum):
    """Action item priority"""
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    URGENT = 3


class DataKind(Enum):
    """Kinds of spans reported by a data detector"""
    PHONE = "phone"
    LINK = "link"
    ADDRESS = "address"
    DATE = "date"


class EntityKind(Enum):
    """Kinds of spans reported by a named-entity tagger"""
    PERSON = "person"
    PLACE = "place"
    ORGANIZATION = "organization"
