"""Tests for business card gating and field extraction."""

import pytest
from PIL import Image

from ocr_structured_text.extractors.business_card_processor import BusinessCardProcessor
from ocr_structured_text.models import Address, ContactInfo, SocialPlatform


NARRATIVE = " ".join(
    ["The committee reviewed the annual plan and discussed how the garden project would grow over the season."] * 9
)


@pytest.fixture
def processor():
    return BusinessCardProcessor()


class TestGating:
    """Whether a text is accepted as a business card at all."""

    def test_synthetic_card_is_accepted(self, processor):
        card = processor.detect_business_card("Jane Doe\nDirector\nWidget Inc\n(415) 555-2671\njane@widget.com")
        assert card is not None
        assert card.confidence > 0
        assert card.name.full_name == "Jane Doe"
        assert card.title == "Director"
        assert card.company == "Widget Inc"

    def test_long_narrative_is_rejected(self, processor):
        assert len(NARRATIVE.split()) >= 150
        assert processor.detect_business_card(NARRATIVE) is None

    @pytest.mark.parametrize("filler_words, accepted", [(92, True), (93, False)])
    def test_word_limit(self, processor, filler_words, accepted):
        text = "Jane Doe\nDirector\nWidget Inc\n(415) 555-2671\njane@widget.com\n" + " ".join(["lorem"] * filler_words)
        assert len(text.split()) == 8 + filler_words
        card = processor.detect_business_card(text)
        assert (card is not None) is accepted

    def test_single_contact_method_is_rejected(self, processor):
        assert processor.detect_business_card("Jane Doe\nDirector\nWidget Inc\n(415) 555-2671") is None

    def test_empty_text(self, processor):
        assert processor.detect_business_card("") is None

    def test_card_aspect_ratio_tips_the_score(self, processor):
        text = "Jane Doe - Widget Inc\n(415) 555-2671 jane@widget.com"
        assert processor.detect_business_card(text) is None

        card_shaped = Image.new("RGB", (350, 200))
        card = processor.detect_business_card(text, image=card_shaped)
        assert card is not None
        assert card.name.full_name == "Jane Doe"

    def test_square_image_gives_no_bonus(self, processor):
        text = "Jane Doe - Widget Inc\n(415) 555-2671 jane@widget.com"
        assert processor.detect_business_card(text, image=Image.new("RGB", (200, 200))) is None


class TestNames:

    def test_role_lines_are_not_names(self, processor):
        name = processor.extract_person_name("Senior Director\nAcme Corp\nKaz Okafor")
        assert name.full_name == "Kaz Okafor"

    def test_address_lines_are_not_names(self, processor):
        text = ("Kaz Okafor\nDirector\nWidget Inc\n123 Main Street\nSpringfield, IL 62704\n"
                "(415) 555-2671\nkaz@widget.com")
        card = processor.detect_business_card(text)
        assert card is not None
        assert card.name.full_name == "Kaz Okafor"
        assert card.contact_info.addresses

    def test_lines_with_digits_are_not_names(self, processor):
        name = processor.extract_person_name("Kaz Okafor\nSuite 400 North\nSpringfield, IL 62704")
        assert name.full_name == "Kaz Okafor"

    def test_lines_inside_a_known_address_are_skipped(self, processor):
        address = Address(raw="Lakeside Plaza\nSpringfield", street="Lakeside Plaza", city="Springfield",
                          state=None, zip_code=None, country=None, confidence=0.7)
        text = "Kaz Okafor\nLakeside Plaza"
        assert processor.extract_person_name(text).full_name == "Lakeside Plaza"

        name = processor.extract_person_name(text, ContactInfo(addresses=[address]))
        assert name.full_name == "Kaz Okafor"

    def test_prefix_and_suffix(self):
        name = BusinessCardProcessor.parse_person_name("Dr. Jane Q. Public, Jr.")
        assert name.prefix == "Dr."
        assert name.suffix == "Jr."
        assert name.first_name == "Jane"
        assert name.last_name == "Q. Public"

    def test_last_comma_first(self):
        name = BusinessCardProcessor.parse_person_name("Doe, Jane")
        assert name.first_name == "Jane"
        assert name.last_name == "Doe"


class TestSocialMedia:

    def test_profiles(self, processor):
        social = processor.extract_social_media(
            "linkedin.com/in/janedoe\nhttps://twitter.com/@jdoe\ngithub.com/jdoe-dev"
        )
        by_platform = {s.platform: s for s in social}
        assert by_platform[SocialPlatform.LINKEDIN].handle == "janedoe"
        assert by_platform[SocialPlatform.LINKEDIN].url == "https://linkedin.com/in/janedoe"
        assert by_platform[SocialPlatform.TWITTER].handle == "jdoe"
        assert by_platform[SocialPlatform.OTHER].platform_name == "GitHub"


class TestCrmExport:

    def test_flat_record(self, processor, card_text):
        card = processor.detect_business_card(card_text)
        crm = BusinessCardProcessor.generate_crm_data(card)

        assert crm["full_name"] == "John Smith"
        assert crm["first_name"] == "John"
        assert crm["last_name"] == "Smith"
        assert crm["company"] == "Acme Corp"
        assert crm["phone"] == "(555) 123-4567"
        assert crm["email"] == "john@acme.com"
        assert crm["source"] == "business_card_scan"
        assert crm["confidence"] == card.confidence
        assert "created_date" in crm

    def test_confidence_is_capped(self):
        from ocr_structured_text.models import ContactInfo, EmailAddress, PersonName, PhoneNumber, PhoneType

        phones = [PhoneNumber(str(i), str(i), PhoneType.UNKNOWN, 0.8) for i in range(4)]
        emails = [EmailAddress(f"a{i}@b.com", "b.com", True, 0.8) for i in range(4)]
        confidence = BusinessCardProcessor.calculate_confidence(
            PersonName("A B", "A", "B"), "CEO", "B Inc", ContactInfo(phone_numbers=phones, email_addresses=emails))
        assert confidence == 1.0
