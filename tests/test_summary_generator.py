"""Tests for summaries, action items and tags."""

from decimal import Decimal

import pytest

from ocr_structured_text.models import (
    BoundingBox, BusinessCardData, ContactInfo, CurrencyRef, DocumentLayout, DocumentType,
    EmailAddress, ExtractedEntities, PersonName, PhoneNumber, PhoneType, Priority, StructuredTextData,
)
from ocr_structured_text.output import SummaryGenerator


PHONE = PhoneNumber("415-555-2671", "(415) 555-2671", PhoneType.UNKNOWN, 0.8)
EMAIL = EmailAddress("jane@widget.com", "widget.com", True, 0.8)


def _data(document_type, title=None, contact=None, card=None, entities=None):
    return StructuredTextData(
        contact_info=contact,
        business_card=card,
        document_layout=DocumentLayout(title=title),
        extracted_entities=entities,
        document_type=document_type,
        processing_confidence=0.5,
    )


@pytest.fixture
def generator():
    return SummaryGenerator()


class TestSummaries:

    def test_every_type_has_a_summary_and_actions(self, generator):
        for doc_type in DocumentType:
            data = _data(doc_type)
            assert generator.generate_smart_summary(data).startswith(doc_type.label)
            assert generator.generate_actionable_items(data)

    def test_business_card(self, generator):
        card = BusinessCardData(
            name=PersonName("Jane Doe", "Jane", "Doe"),
            title="Director",
            company="Widget Inc",
            contact_info=ContactInfo(phone_numbers=[PHONE], email_addresses=[EMAIL]),
            confidence=0.9,
        )
        summary = generator.generate_smart_summary(_data(DocumentType.BUSINESS_CARD, card=card))
        assert summary == ("Business Card - Contact: Jane Doe | Title: Director | Company: Widget Inc"
                           " | Phone: (415) 555-2671 | Email: jane@widget.com")

    def test_titled_types(self, generator):
        assert generator.generate_smart_summary(_data(DocumentType.FLYER, title="Summer Fair")) == \
            "Event Flyer - Summer Fair"
        assert generator.generate_smart_summary(_data(DocumentType.FORM)) == "Form | Requires completion"

    def test_notice_with_phone(self, generator):
        data = _data(DocumentType.NOTICE, title="Water Outage", contact=ContactInfo(phone_numbers=[PHONE]))
        assert generator.generate_smart_summary(data) == "Notice - Water Outage | Contact: (415) 555-2671"

    def test_receipt_total_is_highest_amount(self, generator):
        entities = ExtractedEntities(currencies=[
            CurrencyRef("$3.50", Decimal("3.50"), "USD", 0.9),
            CurrencyRef("$12.00", Decimal("12.00"), "USD", 0.9),
            CurrencyRef("$8.50", Decimal("8.50"), "USD", 0.9),
        ])
        data = _data(DocumentType.RECEIPT, title="Corner Cafe", entities=entities)
        assert generator.generate_smart_summary(data) == "Receipt - Corner Cafe - Total: $12.00"


class TestActionItems:

    def test_form_actions(self, generator):
        actions = generator.generate_actionable_items(_data(DocumentType.FORM))
        assert [(a.title, a.priority) for a in actions] == [
            ("Complete form", Priority.HIGH),
            ("Submit completed form", Priority.MEDIUM),
        ]

    def test_business_card_follow_up_needs_email(self, generator):
        card = BusinessCardData(PersonName("Jane Doe"), None, None, ContactInfo(phone_numbers=[PHONE]))
        actions = generator.generate_actionable_items(_data(DocumentType.BUSINESS_CARD, card=card))
        assert [a.title for a in actions] == ["Add contact to CRM"]

    def test_generic_action(self, generator):
        actions = generator.generate_actionable_items(_data(DocumentType.GENERIC))
        assert [(a.title, a.priority) for a in actions] == [("Review document", Priority.LOW)]


class TestTags:

    def test_tag_cap(self, generator):
        entities = ExtractedEntities(
            people=[f"Person {i}" for i in range(10)],
            places=[f"Place {i}" for i in range(10)],
            organizations=[f"Org {i}" for i in range(10)],
        )
        contact = ContactInfo(phone_numbers=[PHONE], email_addresses=[EMAIL])
        tags = generator.generate_smart_tags(_data(DocumentType.NOTICE, contact=contact, entities=entities))
        assert len(tags) == 8
        assert tags[:3] == ["notice", "announcement", "information"]

    def test_tags_are_deduplicated(self, generator):
        entities = ExtractedEntities(organizations=["Widget Inc", "widget inc"])
        tags = generator.generate_smart_tags(_data(DocumentType.GENERIC, entities=entities))
        assert tags == ["generic", "document", "widget inc"]
