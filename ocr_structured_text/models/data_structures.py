"""Data structures for structured text extraction."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Dict, List, Optional, Sequence

from .enums import DataKind, DocumentType, EntityKind, PhoneType, Priority, SocialPlatform


@dataclass(frozen=True)
class BoundingBox:
    """Normalized bounding box, origin at the bottom-left of the source image"""
    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    def union(self, other: "BoundingBox") -> "BoundingBox":
        min_x = min(self.min_x, other.min_x)
        min_y = min(self.min_y, other.min_y)
        max_x = max(self.max_x, other.max_x)
        max_y = max(self.max_y, other.max_y)
        return BoundingBox(min_x, min_y, max_x - min_x, max_y - min_y)

    def intersects(self, other: "BoundingBox") -> bool:
        """True when the boxes share area; touching edges do not count."""
        return (self.min_x < other.max_x and other.min_x < self.max_x and
                self.min_y < other.max_y and other.min_y < self.max_y)

    @staticmethod
    def from_value(value: Any) -> "BoundingBox":
        """Build from a ``{x, y, width, height}`` mapping or an ``[x, y, w, h]`` sequence."""
        if isinstance(value, BoundingBox):
            return value
        if isinstance(value, dict):
            return BoundingBox(
                x=float(value["x"]),
                y=float(value["y"]),
                width=float(value.get("width", value.get("w", 0.0))),
                height=float(value.get("height", value.get("h", 0.0))),
            )
        if isinstance(value, (list, tuple)) and len(value) >= 4:
            return BoundingBox(*(float(v) for v in value[:4]))
        raise ValueError(f"Unsupported bounding box value: {value!r}")


@dataclass(frozen=True)
class ImageSize:
    """Source image dimensions"""
    width: float = 1.0
    height: float = 1.0


@dataclass(frozen=True)
class TextBlock:
    """One unit of recognized text with its location and recognition confidence"""
    text: str
    bounding_box: BoundingBox
    confidence: float = 1.0

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TextBlock":
        box = d.get("boundingBox", d.get("bounding_box", d.get("bbox")))
        if box is None:
            raise KeyError("text block is missing a bounding box")
        return TextBlock(
            text=str(d.get("text", "")),
            bounding_box=BoundingBox.from_value(box),
            confidence=float(d.get("confidence", 1.0)),
        )


# ============================================================================
# Contact information
# ============================================================================

@dataclass(frozen=True)
class PhoneNumber:
    raw: str
    formatted: str
    type: PhoneType
    confidence: float


@dataclass(frozen=True)
class EmailAddress:
    address: str
    domain: str
    is_valid: bool
    confidence: float


@dataclass(frozen=True)
class Address:
    raw: str
    street: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip_code: Optional[str]
    country: Optional[str]
    confidence: float


@dataclass(frozen=True)
class UrlRef:
    url: str
    display_text: Optional[str]
    is_valid: bool
    confidence: float


@dataclass(frozen=True)
class DateRef:
    raw: str
    parsed: Optional[date]
    format: Optional[str]
    confidence: float


@dataclass(frozen=True)
class CurrencyRef:
    raw: str
    amount: Optional[Decimal]
    currency: str
    confidence: float


@dataclass(frozen=True)
class ContactInfo:
    """Contact details found in a piece of text"""
    phone_numbers: List[PhoneNumber] = field(default_factory=list)
    email_addresses: List[EmailAddress] = field(default_factory=list)
    addresses: List[Address] = field(default_factory=list)
    urls: List[UrlRef] = field(default_factory=list)
    dates: List[DateRef] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.phone_numbers or self.email_addresses or
                    self.addresses or self.urls or self.dates)


# ============================================================================
# Business cards
# ============================================================================

@dataclass(frozen=True)
class PersonName:
    full_name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    prefix: Optional[str] = None
    suffix: Optional[str] = None


@dataclass(frozen=True)
class SocialMediaInfo:
    platform: SocialPlatform
    handle: str
    url: Optional[str] = None
    platform_name: Optional[str] = None


@dataclass(frozen=True)
class BusinessCardData:
    """Identity and contact details read off a business card"""
    name: Optional[PersonName]
    title: Optional[str]
    company: Optional[str]
    contact_info: ContactInfo
    social_media: List[SocialMediaInfo] = field(default_factory=list)
    confidence: float = 0.0

    @property
    def is_complete(self) -> bool:
        has_contact = bool(self.contact_info.phone_numbers or self.contact_info.email_addresses)
        return self.name is not None and (self.title is not None or self.company is not None) and has_contact


# ============================================================================
# Layout
# ============================================================================

@dataclass(frozen=True)
class DocumentSection:
    title: str
    content: str
    level: int
    bounding_box: BoundingBox


@dataclass(frozen=True)
class BulletPoint:
    text: str
    level: int
    bounding_box: BoundingBox


@dataclass(frozen=True)
class NumberedItem:
    number: int
    text: str
    bounding_box: BoundingBox


@dataclass(frozen=True)
class NumberedList:
    items: List[NumberedItem]
    start_number: int = 1


@dataclass(frozen=True)
class TableData:
    """A table reconstructed from spatially aligned text blocks"""
    title: Optional[str]
    headers: List[str]
    rows: List[List[str]]
    bounding_box: BoundingBox
    confidence: float
    source_confidence: Optional[float] = None

    MIN_CONFIDENCE: ClassVar[float] = 0.3

    @property
    def is_valid(self) -> bool:
        return bool(self.headers) and bool(self.rows) and self.confidence > self.MIN_CONFIDENCE


@dataclass(frozen=True)
class DocumentLayout:
    title: Optional[str] = None
    sections: List[DocumentSection] = field(default_factory=list)
    bullet_points: List[BulletPoint] = field(default_factory=list)
    numbered_lists: List[NumberedList] = field(default_factory=list)
    tables: List[TableData] = field(default_factory=list)
    is_structured: bool = False
    confidence: float = 0.0


# ============================================================================
# Entities, classification and the aggregate result
# ============================================================================

@dataclass(frozen=True)
class ExtractedEntities:
    people: List[str] = field(default_factory=list)
    places: List[str] = field(default_factory=list)
    organizations: List[str] = field(default_factory=list)
    dates: List[DateRef] = field(default_factory=list)
    currencies: List[CurrencyRef] = field(default_factory=list)
    products: List[str] = field(default_factory=list)
    confidence: float = 0.0


@dataclass(frozen=True)
class DataMatch:
    """A span reported by a data detector"""
    kind: DataKind
    text: str
    start: int
    end: int
    url: Optional[str] = None
    parsed_date: Optional[date] = None


@dataclass(frozen=True)
class NameTag:
    """A span reported by a named-entity tagger"""
    kind: EntityKind
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class ActionItem:
    title: str
    priority: Priority = Priority.MEDIUM


@dataclass(frozen=True)
class DocumentClassification:
    document_type: DocumentType
    confidence: float
    scores: Dict[DocumentType, int] = field(default_factory=dict)
    business_card: Optional[BusinessCardData] = None


@dataclass(frozen=True)
class ExtractionOptions:
    """Toggles for the optional extraction stages"""
    extract_contact_info: bool = True
    detect_business_card: bool = True
    analyze_layout: bool = True
    extract_entities: bool = True
    classify_document_type: bool = True

    PRESET_NAMES: ClassVar[Sequence[str]] = ("business_card", "notice", "comprehensive", "minimal")

    @classmethod
    def business_card(cls) -> "ExtractionOptions":
        return cls(analyze_layout=False, extract_entities=False)

    @classmethod
    def notice(cls) -> "ExtractionOptions":
        return cls(detect_business_card=False)

    @classmethod
    def comprehensive(cls) -> "ExtractionOptions":
        return cls()

    @classmethod
    def minimal(cls) -> "ExtractionOptions":
        return cls(detect_business_card=False, analyze_layout=False, extract_entities=False)

    @classmethod
    def preset(cls, name: str) -> "ExtractionOptions":
        key = name.strip().lower().replace("-", "_")
        if key not in cls.PRESET_NAMES:
            raise ValueError(f"Unknown extraction preset: {name!r} (expected one of {', '.join(cls.PRESET_NAMES)})")
        return getattr(cls, key)()


@dataclass(frozen=True)
class StructuredTextData:
    """Everything the pipeline learned about one piece of OCR output"""
    contact_info: Optional[ContactInfo]
    business_card: Optional[BusinessCardData]
    document_layout: Optional[DocumentLayout]
    extracted_entities: Optional[ExtractedEntities]
    document_type: DocumentType
    processing_confidence: float
    summary: Optional[str] = None
    action_items: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    @property
    def confidence(self) -> float:
        return self.processing_confidence
