"""Tests for the email creation guide.

Tests verify:
- The guide payload attached as special content
- Professional address suggestions derived from the user's name
"""

from resume_builder.interview.email_guide import (
    GMAIL_HELP_URL,
    INLINE_EMAIL_GUIDE,
    build_email_guide_content,
    get_inline_email_guide,
    suggest_professional_emails,
)


class TestEmailGuideContent:
    """Tests for the guide payload."""

    def test_payload_shape(self):
        """The payload is an expandable email guide."""
        content = build_email_guide_content()
        assert content == {
            "type": "email_guide",
            "content": INLINE_EMAIL_GUIDE,
            "expandable": True,
        }

    def test_guide_links_to_help_page(self):
        """The guide ends with the detailed help link."""
        assert GMAIL_HELP_URL in get_inline_email_guide()

    def test_other_languages_fall_back_to_english(self):
        """Only English copy exists."""
        assert get_inline_email_guide("es") == INLINE_EMAIL_GUIDE


class TestSuggestProfessionalEmails:
    """Tests for suggest_professional_emails."""

    def test_three_part_name(self):
        """A middle name adds the initial variant."""
        assert suggest_professional_emails("John Michael Smith") == [
            "john.smith@gmail.com",
            "johnsmith@gmail.com",
            "john.m.smith@gmail.com",
            "jsmith@gmail.com",
            "john.s@gmail.com",
        ]

    def test_two_part_name(self):
        """Two parts give four suggestions."""
        assert suggest_professional_emails("Ana Lopez") == [
            "ana.lopez@gmail.com",
            "analopez@gmail.com",
            "alopez@gmail.com",
            "ana.l@gmail.com",
        ]

    def test_punctuation_is_stripped(self):
        """Apostrophes and hyphens never reach the address."""
        suggestions = suggest_professional_emails("Mary O'Brien-Kelly")
        assert suggestions[0] == "mary.obrienkelly@gmail.com"

    def test_limit(self):
        """The limit caps the number of suggestions."""
        assert suggest_professional_emails("Ana Lopez", limit=2) == [
            "ana.lopez@gmail.com",
            "analopez@gmail.com",
        ]

    def test_single_name_has_no_suggestions(self):
        """One name part is not enough."""
        assert suggest_professional_emails("Cher") == []
        assert suggest_professional_emails("") == []
