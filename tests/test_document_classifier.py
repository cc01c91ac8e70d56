"""Tests for text-based document classification."""

import pytest

from ocr_structured_text.models import DocumentType
from ocr_structured_text.processors import DocumentClassifier


@pytest.fixture
def classifier():
    return DocumentClassifier()


class TestClassify:

    def test_empty_text_is_generic_with_zero_confidence(self, classifier):
        result = classifier.classify("   ")
        assert result.document_type is DocumentType.GENERIC
        assert result.confidence == 0.0

    def test_business_card_carries_card(self, classifier, card_text):
        result = classifier.classify(card_text)
        assert result.document_type is DocumentType.BUSINESS_CARD
        assert result.business_card is not None
        assert result.confidence == result.business_card.confidence

    def test_receipt(self, classifier):
        result = classifier.classify("Receipt\nCoffee $3.50\nMuffin $2.25\nTotal $5.75\nThank you")
        assert result.document_type is DocumentType.RECEIPT
        assert result.scores[DocumentType.RECEIPT] == 5
        assert result.confidence == pytest.approx(0.9)

    def test_notice(self, classifier):
        result = classifier.classify("NOTICE\nThe office will be closed on Friday.\nPlease note the new hours.")
        assert result.document_type is DocumentType.NOTICE
        assert result.confidence == pytest.approx(0.7)

    def test_form(self, classifier):
        result = classifier.classify("Application Form\nName:\nDate:\nSignature: ____\n☐ I agree")
        assert result.document_type is DocumentType.FORM
        assert result.confidence == 1.0

    def test_letter(self, classifier):
        result = classifier.classify("Dear Maria,\nThank you for your help.\nSincerely,\nTom")
        assert result.document_type is DocumentType.LETTER

    def test_menu(self, classifier):
        result = classifier.classify("Menu\nBurger 12.50\nSalad 9.00\nSoup 6.75\nDesserts")
        assert result.document_type is DocumentType.MENU

    def test_below_minimum_score_is_generic(self, classifier):
        result = classifier.classify("The quick brown fox jumps over the lazy dog")
        assert result.document_type is DocumentType.GENERIC
        assert result.confidence == pytest.approx(0.4)

    def test_keywords_match_whole_words_only(self, classifier):
        scores = classifier.score_types("uniform platform")
        assert scores[DocumentType.FORM] == 0
