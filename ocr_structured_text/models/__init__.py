"""Data models and enums for structured text extraction."""

from .data_structures import (
    ActionItem,
    Address,
    BoundingBox,
    BulletPoint,
    BusinessCardData,
    ContactInfo,
    CurrencyRef,
    DataMatch,
    DateRef,
    DocumentClassification,
    DocumentLayout,
    DocumentSection,
    EmailAddress,
    ExtractedEntities,
    ExtractionOptions,
    ImageSize,
    NameTag,
    NumberedItem,
    NumberedList,
    PersonName,
    PhoneNumber,
    SocialMediaInfo,
    StructuredTextData,
    TableData,
    TextBlock,
    UrlRef,
)
from .enums import DataKind, DocumentType, EntityKind, PhoneType, Priority, SocialPlatform

__all__ = [
    "ActionItem",
    "Address",
    "BoundingBox",
    "BulletPoint",
    "BusinessCardData",
    "ContactInfo",
    "CurrencyRef",
    "DataMatch",
    "DateRef",
    "DocumentClassification",
    "DocumentLayout",
    "DocumentSection",
    "EmailAddress",
    "ExtractedEntities",
    "ExtractionOptions",
    "ImageSize",
    "NameTag",
    "NumberedItem",
    "NumberedList",
    "PersonName",
    "PhoneNumber",
    "SocialMediaInfo",
    "StructuredTextData",
    "TableData",
    "TextBlock",
    "UrlRef",
    "DataKind",
    "DocumentType",
    "EntityKind",
    "PhoneType",
    "Priority",
    "SocialPlatform",
]
