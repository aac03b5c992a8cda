"""Unit tests for canonical address rendering."""

import pytest

from wikiaddr.addressing import Address, AddressValidationError
from wikiaddr.models import SeparatorConfig


class TestPrefix:
    """Test rendering webs, topics and revisions."""

    def test_topic(self):
        assert Address("Web/SubWeb.Topic").stringify() == "Web/SubWeb.Topic"

    def test_revision(self):
        assert Address("Web.Topic@2").stringify() == "Web.Topic@2"

    def test_web_has_trailing_separator(self):
        assert Address("Web/SubWeb/").stringify() == "Web/SubWeb/"
        assert Address("Web").stringify() == "Web/"

    def test_separator_overrides(self):
        addr = Address("Web/SubWeb.Topic@2")
        assert addr.stringify(webseparator=".") == "Web.SubWeb.Topic@2"
        assert addr.stringify(topicseparator="/") == "Web/SubWeb/Topic@2"

    def test_separator_config(self):
        separators = SeparatorConfig(webseparator=".", topicseparator="/")
        assert Address("Web/SubWeb/").stringify(separators) == "Web.SubWeb."
        assert Address("Web.Topic").stringify(separators) == "Web/Topic"

    def test_address_keeps_its_separators(self):
        addr = Address("Web.SubWeb.Topic", webseparator=".")
        assert addr.stringify() == "Web.SubWeb.Topic"

    def test_invalid_override(self):
        with pytest.raises(AddressValidationError, match="Invalid separator"):
            Address("Web.Topic").stringify(webseparator=":")

    def test_no_web(self):
        """Test an address without a web cannot be built, so never renders."""
        with pytest.raises(AddressValidationError, match="at least one web"):
            Address(topic="Topic")

    def test_topic_named_meta_is_quoted(self):
        """Test a bare prefix that would read as a META part is quoted."""
        addr = Address(webs=["Web"], topic="META", topicseparator="/")
        text = addr.stringify()
        assert text == "'Web/META'"
        reparsed = Address(text, topicseparator="/")
        assert reparsed.equiv(addr)
        assert reparsed.type() == "topic"

    @pytest.mark.parametrize(
        "options, text",
        [
            ({"webs": ["Web"], "topic": "META"}, "Web.META"),
            ({"webs": ["Web"], "topic": "META", "rev": 2, "topicseparator": "/"}, "Web/META@2"),
            ({"webs": ["Web", "META"]}, "Web/META/"),
            ({"webs": ["META"], "topic": "Topic", "topicseparator": "/"}, "META/Topic"),
        ],
    )
    def test_meta_names_left_bare(self, options, text):
        assert Address(**options).stringify() == text


class TestParts:
    """Test parts always render in canonical form behind a quoted prefix."""

    @pytest.mark.parametrize(
        "text, canonical",
        [
            ("'Web.Topic'/report.pdf", "'Web.Topic'/report.pdf"),
            ("'Web.Topic'/FILE:Attachment", "'Web.Topic'/FILE:Attachment"),
            ("'Web.Topic'/FILE:report.pdf", "'Web.Topic'/report.pdf"),
            ("'Web.Topic'/text", "'Web.Topic'/text"),
            ("'Web.Topic'/META", "'Web.Topic'/META"),
            ("'Web.Topic'/info", "'Web.Topic'/META:TOPICINFO"),
            ("'Web.Topic'/info.version", "'Web.Topic'/META:TOPICINFO.version"),
            ("'Web.Topic'/fields[3]", "'Web.Topic'/META:FIELD[3]"),
            ("'Web.Topic'/Colour", "'Web.Topic'/META:FIELD[name='Colour'].value"),
            (
                "'Web.Topic'/MyForm.Colour",
                "'Web.Topic'/META:FIELD[form='MyForm', name='Colour'].value",
            ),
            (
                "'Web.Topic'/META:FIELD[name=\"Colour\", form=MyForm]",
                "'Web.Topic'/META:FIELD[form='MyForm', name='Colour']",
            ),
            ("Web/SubWeb.Topic/META:FIELD[3]", "'Web/SubWeb.Topic'/META:FIELD[3]"),
            ("Web.Topic@2/report.pdf", "'Web.Topic@2'/report.pdf"),
        ],
    )
    def test_canonical(self, text, canonical):
        assert Address(text).stringify() == canonical

    def test_field_named_like_alias(self):
        """Test an attachment whose name reads as a field gets FILE:."""
        addr = Address(webs=["Web"], topic="Topic", part="FILE", subpart="Colour")
        assert addr.stringify() == "'Web.Topic'/FILE:Colour"

    def test_selector_value_with_quote(self):
        addr = Address(
            webs=["Web"],
            topic="Topic",
            part="META",
            subpart=["FIELD", {"name": "it's"}],
        )
        text = addr.stringify()
        assert text == "'Web.Topic'/META:FIELD[name=\"it's\"]"
        assert Address(text).subpart == addr.subpart

    def test_selector_value_with_bracket(self):
        addr = Address("'Web.Topic'/META:FIELD[name='a]b'].value")
        assert addr.stringify() == "'Web.Topic'/META:FIELD[name='a]b'].value"

    def test_canonical_is_stable(self):
        """Test rendering a re-parsed canonical string gives it back."""
        text = Address("'Web/SubWeb.Topic@2'/fields[name='Colour'].value").stringify()
        assert Address(text).stringify() == text
