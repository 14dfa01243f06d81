"""
Tests for hr_assistant.ml.nlp.parsers.contact_parser — ContactParser and
merge_contact_info.
"""

import pytest

from hr_assistant.data.models import ContactInfo
from hr_assistant.ml.nlp.parsers import ContactParser, merge_contact_info

from conftest import RESUME_TEXT


@pytest.fixture
def parser():
    return ContactParser()


class TestContactParser:
    def test_resume_header(self, parser):
        info = parser.parse(RESUME_TEXT)
        assert info.full_name == "Jane Doe"
        assert info.email == "jane@example.com"
        assert info.phone == "(555) 123-4567"
        assert info.location == "San Francisco, CA"

    def test_example_domains_are_not_filtered(self, parser):
        assert parser.parse("Contact: jane@example.com").email == "jane@example.com"

    def test_email_lowercased(self, parser):
        assert parser.parse("Mail: Jane.Doe@Example.COM").email == "jane.doe@example.com"

    def test_secondary_email_kept_as_identifier(self, parser):
        info = parser.parse("jane@example.com\nalt: jane.doe@mail.org")
        assert info.email == "jane@example.com"
        assert "jane.doe@mail.org" in info.other_identifiers

    def test_phone_needs_ten_digits(self, parser):
        assert parser.parse("Ext 1234").phone is None

    def test_profile_urls(self, parser):
        info = parser.parse("linkedin.com/in/janedoe\ngithub.com/janedoe\njanedoe.dev")
        assert info.linkedin_url == "https://linkedin.com/in/janedoe"
        assert info.github_url == "https://github.com/janedoe"
        assert info.portfolio_url == "https://janedoe.dev"

    def test_email_domain_not_portfolio(self, parser):
        assert parser.parse("jane@janedoe.com").portfolio_url is None

    def test_labelled_location(self, parser):
        assert parser.parse("Location: Berlin, Germany").location == "Berlin, Germany"

    def test_section_header_not_a_name(self, parser):
        assert parser.parse("PROFESSIONAL SUMMARY\nBuilt things.").full_name is None

    def test_no_contact_details(self, parser):
        assert parser.parse("the quick brown fox").is_empty


class TestMergeContactInfo:
    def test_both_missing(self):
        assert merge_contact_info(None, None) is None

    def test_only_pattern(self):
        pattern = ContactInfo(email="a@x.com")
        assert merge_contact_info(pattern, None) == pattern

    def test_only_model(self):
        model = ContactInfo(email="b@x.com")
        assert merge_contact_info(None, model) == model

    def test_pattern_email_wins_and_model_value_kept(self):
        merged = merge_contact_info(
            ContactInfo(email="jane@example.com"),
            ContactInfo(email="jane.d@corp.com"),
        )
        assert merged.email == "jane@example.com"
        assert merged.other_identifiers == ["jane.d@corp.com"]

    def test_pattern_phone_wins(self):
        merged = merge_contact_info(
            ContactInfo(phone="555-123-4567"),
            ContactInfo(phone="+1 555 000 0000"),
        )
        assert merged.phone == "555-123-4567"
        assert "+1 555 000 0000" in merged.other_identifiers

    def test_model_fills_empty_fields(self):
        merged = merge_contact_info(
            ContactInfo(email="jane@example.com"),
            ContactInfo(phone="555-123-4567", github_url="https://github.com/jane"),
        )
        assert merged.phone == "555-123-4567"
        assert merged.github_url == "https://github.com/jane"
        assert merged.other_identifiers == []

    def test_model_name_and_location_preferred(self):
        merged = merge_contact_info(
            ContactInfo(full_name="Jane Doe Resume", location="Acme, Inc"),
            ContactInfo(full_name="Jane Doe", location="Austin, TX"),
        )
        assert merged.full_name == "Jane Doe"
        assert merged.location == "Austin, TX"

    def test_identifiers_deduplicated(self):
        merged = merge_contact_info(
            ContactInfo(email="a@x.com", other_identifiers=["b@x.com"]),
            ContactInfo(email="B@x.com", other_identifiers=["b@x.com", "a@x.com"]),
        )
        assert merged.other_identifiers == ["B@x.com"]

    def test_same_value_not_duplicated(self):
        merged = merge_contact_info(
            ContactInfo(email="a@x.com"),
            ContactInfo(email="A@X.com"),
        )
        assert merged.other_identifiers == []
