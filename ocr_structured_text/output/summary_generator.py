"""Summary, action item and tag generation keyed on document type."""

from typing import Callable, Dict, List

from ..config import DEFAULT_SETTINGS, ExtractionSettings
from ..models.data_structures import ActionItem, BusinessCardData, StructuredTextData
from ..models.enums import DocumentType, Priority


class SummaryGenerator:
    """Turns an extraction result into a one-line summary, follow-up actions and tags"""

    # Type-specific tags always lead the tag list
    TYPE_TAGS: Dict[DocumentType, List[str]] = {
        DocumentType.BUSINESS_CARD: ["networking", "contact"],
        DocumentType.NOTICE: ["announcement", "information"],
        DocumentType.FORM: ["document", "paperwork"],
        DocumentType.RECEIPT: ["expense", "purchase"],
        DocumentType.LETTER: ["correspondence"],
        DocumentType.FLYER: ["event", "promotion"],
        DocumentType.MENU: ["restaurant", "food"],
        DocumentType.GENERIC: ["document"],
    }

    def __init__(self, settings: ExtractionSettings = DEFAULT_SETTINGS):
        self.settings = settings
        self._summaries: Dict[DocumentType, Callable[[StructuredTextData], str]] = {
            DocumentType.BUSINESS_CARD: self._business_card_summary,
            DocumentType.NOTICE: self._notice_summary,
            DocumentType.FORM: self._form_summary,
            DocumentType.RECEIPT: self._receipt_summary,
            DocumentType.LETTER: self._titled_summary,
            DocumentType.FLYER: self._titled_summary,
            DocumentType.MENU: self._titled_summary,
            DocumentType.GENERIC: self._titled_summary,
        }
        self._actions: Dict[DocumentType, Callable[[StructuredTextData], List[ActionItem]]] = {
            DocumentType.BUSINESS_CARD: self._business_card_actions,
            DocumentType.NOTICE: self._notice_actions,
            DocumentType.FORM: self._form_actions,
            DocumentType.RECEIPT: self._receipt_actions,
            DocumentType.LETTER: self._review_actions,
            DocumentType.FLYER: self._review_actions,
            DocumentType.MENU: self._review_actions,
            DocumentType.GENERIC: self._review_actions,
        }

    # ========================================================================
    # Summaries
    # ========================================================================

    def generate_smart_summary(self, data: StructuredTextData) -> str:
        return self._summaries[data.document_type](data)

    @staticmethod
    def _titled_summary(data: StructuredTextData) -> str:
        summary = data.document_type.label
        if data.document_layout and data.document_layout.title:
            summary += f" - {data.document_layout.title}"
        return summary

    def _business_card_summary(self, data: StructuredTextData) -> str:
        if data.business_card is None:
            return self._titled_summary(data)
        return self.business_card_summary(data.business_card)

    @staticmethod
    def business_card_summary(card: BusinessCardData) -> str:
        parts = []
        if card.name:
            parts.append(f"Contact: {card.name.full_name}")
        if card.title:
            parts.append(f"Title: {card.title}")
        if card.company:
            parts.append(f"Company: {card.company}")
        if card.contact_info.phone_numbers:
            parts.append(f"Phone: {card.contact_info.phone_numbers[0].formatted}")
        if card.contact_info.email_addresses:
            parts.append(f"Email: {card.contact_info.email_addresses[0].address}")
        return "Business Card - " + " | ".join(parts)

    def _notice_summary(self, data: StructuredTextData) -> str:
        summary = self._titled_summary(data)
        if data.contact_info and data.contact_info.phone_numbers:
            summary += f" | Contact: {data.contact_info.phone_numbers[0].formatted}"
        return summary

    def _form_summary(self, data: StructuredTextData) -> str:
        return self._titled_summary(data) + " | Requires completion"

    def _receipt_summary(self, data: StructuredTextData) -> str:
        summary = self._titled_summary(data)
        amounts = data.extracted_entities.currencies if data.extracted_entities else []
        priced = [c for c in amounts if c.amount is not None]
        if priced:
            summary += f" - Total: {max(priced, key=lambda c: c.amount).raw}"
        return summary

    # ========================================================================
    # Action items
    # ========================================================================

    def generate_actionable_items(self, data: StructuredTextData) -> List[ActionItem]:
        return self._actions[data.document_type](data)

    @staticmethod
    def _business_card_actions(data: StructuredTextData) -> List[ActionItem]:
        actions = [ActionItem("Add contact to CRM", Priority.MEDIUM)]
        card = data.business_card
        if card and card.contact_info.email_addresses:
            actions.append(ActionItem("Send follow-up email", Priority.LOW))
        return actions

    @staticmethod
    def _notice_actions(data: StructuredTextData) -> List[ActionItem]:
        actions = [ActionItem("Review notice details", Priority.MEDIUM)]
        if data.contact_info and data.contact_info.phone_numbers:
            actions.append(ActionItem("Call for more information", Priority.LOW))
        return actions

    @staticmethod
    def _form_actions(data: StructuredTextData) -> List[ActionItem]:
        return [
            ActionItem("Complete form", Priority.HIGH),
            ActionItem("Submit completed form", Priority.MEDIUM),
        ]

    @staticmethod
    def _receipt_actions(data: StructuredTextData) -> List[ActionItem]:
        return [
            ActionItem("File receipt for expense tracking", Priority.LOW),
            ActionItem("Update budget records", Priority.LOW),
        ]

    @staticmethod
    def _review_actions(data: StructuredTextData) -> List[ActionItem]:
        return [ActionItem("Review document", Priority.LOW)]

    # ========================================================================
    # Tags
    # ========================================================================

    def generate_smart_tags(self, data: StructuredTextData) -> List[str]:
        candidates = [data.document_type.value]
        candidates.extend(self.TYPE_TAGS[data.document_type])

        if data.document_type is DocumentType.BUSINESS_CARD and data.business_card and data.business_card.company:
            candidates.append(data.business_card.company.lower())

        contact = data.contact_info
        if contact is None and data.business_card is not None:
            contact = data.business_card.contact_info
        if contact:
            if contact.phone_numbers:
                candidates.append("phone")
            if contact.email_addresses:
                candidates.append("email")
            if contact.addresses:
                candidates.append("address")

        if data.extracted_entities:
            entities = data.extracted_entities
            candidates.extend(name.lower() for name in entities.people + entities.places + entities.organizations)

        tags: List[str] = []
        for tag in candidates:
            tag = tag.strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags[:self.settings.max_tags]
