"""Unit tests for address tokenizing."""

import re

import pytest

from wikiaddr.addressing import (
    AddressSyntaxError,
    ByAttributes,
    Positional,
    parse_selector,
    split_part_spec,
    tokenize,
)
from wikiaddr.models import SeparatorConfig


class TestPrefix:
    """Test splitting the web/topic/revision prefix."""

    def test_web_and_topic(self):
        """Test default separators split webs and topic."""
        tokens = tokenize("Web/SubWeb.Topic")
        assert tokens.segments == ["Web", "SubWeb", "Topic"]
        assert tokens.web_only is False
        assert tokens.rev is None
        assert tokens.part is None

    def test_trailing_separator_marks_web(self):
        """Test a trailing separator makes the prefix a web."""
        tokens = tokenize("Web/SubWeb/")
        assert tokens.segments == ["Web", "SubWeb"]
        assert tokens.web_only is True

    def test_dot_separated(self):
        """Test dots work as web separators too."""
        assert tokenize("Web.SubWeb.Topic").segments == ["Web", "SubWeb", "Topic"]

    def test_revision(self):
        """Test @digits after the topic."""
        tokens = tokenize("Web.Topic@12")
        assert tokens.segments == ["Web", "Topic"]
        assert tokens.rev == 12

    def test_surrounding_whitespace(self):
        """Test leading and trailing whitespace is ignored."""
        assert tokenize("  Web.Topic  ").segments == ["Web", "Topic"]

    def test_only_configured_separators_split(self):
        """Test a '.' is not a separator when the config excludes it."""
        separators = SeparatorConfig(webseparator="/", topicseparator="/")
        with pytest.raises(AddressSyntaxError, match="Invalid character"):
            tokenize("Web/Sub.Topic", separators)


class TestQuoting:
    """Test quoted prefixes and the part delimiter."""

    def test_quoted_with_part(self):
        """Test a quoted prefix followed by a part specifier."""
        tokens = tokenize("'Web/SubWeb.Topic@2'/META:FIELD[name='Colour']")
        assert tokens.quoted is True
        assert tokens.segments == ["Web", "SubWeb", "Topic"]
        assert tokens.rev == 2
        assert tokens.part == "META:FIELD[name='Colour']"

    def test_quoted_without_part(self):
        """Test a quoted prefix alone."""
        tokens = tokenize("'Web.Topic'")
        assert tokens.segments == ["Web", "Topic"]
        assert tokens.part is None

    def test_part_offset(self):
        """Test the offset of the part specifier in the raw text."""
        tokens = tokenize("'Web.Topic'/fields")
        assert tokens.raw[tokens.part_offset :] == "fields"

    def test_unquoted_meta_part(self):
        """Test an unquoted /META starts the part specifier."""
        tokens = tokenize("Web/SubWeb.Topic/META:FIELD[3]")
        assert tokens.segments == ["Web", "SubWeb", "Topic"]
        assert tokens.part == "META:FIELD[3]"

    def test_unquoted_part_after_revision(self):
        """Test the first / after @rev starts the part specifier."""
        tokens = tokenize("Web.Topic@3/report.pdf")
        assert tokens.rev == 3
        assert tokens.part == "report.pdf"

    def test_unquoted_at_sign_inside_meta_part(self):
        """Test an @ inside a META selector is not a revision."""
        tokens = tokenize("Web.Topic/META:FIELD[name='a@b']")
        assert tokens.rev is None
        assert tokens.part == "META:FIELD[name='a@b']"

    def test_quote_in_filename_part(self):
        """Test quotes outside selector brackets are plain characters."""
        assert tokenize("'Web.Topic'/it's.txt").part == "it's.txt"


class TestSyntaxErrors:
    """Test malformed input raises AddressSyntaxError with a position."""

    @pytest.mark.parametrize(
        "text, message, position",
        [
            ("'Web.Topic", "Unterminated quote", 0),
            ("'Web.Topic'x", "Expected '/'", 11),
            ("'Web.Topic'/", "Empty part specifier", 12),
            ("Web.Topic@", "Revision must be a positive integer", 10),
            ("Web.Topic@2x", "Revision must be a positive integer", 10),
            ("Web.Topic@0", "Revision must be a positive integer", 10),
            ("Web/@2", "Revision must follow a topic", 4),
            ("Web..Topic", "Empty name segment", 4),
            ("Web.To pic", "Invalid character", 6),
            ("We'b.Topic", "Unexpected quote", 2),
            ("'Web.Topic'/META:FIELD[name='x'", "Unbalanced '['", 22),
            ("'Web.Topic'/META:FIELD]", "Unbalanced ']'", 22),
            ("'Web.Topic'/META:FIELD[name='x]", "Unterminated quote", 31),
            ("'Web.Topic'/META:FIELD[[1]]", "Nested '['", 23),
            ("'Web.Topic@2\n'/META", "Revision must be a positive integer", 11),
            ("Web.Topic@³", "Revision must be a positive integer", 10),
            ("'Web.Topic\n'", "Invalid character", 10),
        ],
    )
    def test_error(self, text, message, position):
        with pytest.raises(AddressSyntaxError, match=re.escape(message)) as exc_info:
            tokenize(text)
        assert exc_info.value.position == position
        assert exc_info.value.text == text

    def test_empty(self):
        """Test empty input."""
        with pytest.raises(AddressSyntaxError, match="cannot be empty"):
            tokenize("   ")

    def test_error_message_shows_position(self):
        """Test str() of the error includes position and text."""
        with pytest.raises(AddressSyntaxError) as exc_info:
            tokenize("'Web.Topic")
        assert "at position 0" in str(exc_info.value)
        assert "'Web.Topic" in str(exc_info.value)


class TestPartSpec:
    """Test cutting part specifiers into head, selector and key."""

    def test_canonical_meta(self):
        spec = split_part_spec("META:FIELD[3].value")
        assert spec.head == "META:FIELD"
        assert spec.selector == Positional(3)
        assert spec.key == "value"

    def test_head_and_key(self):
        spec = split_part_spec("MyForm.Colour")
        assert spec.head == "MyForm"
        assert spec.selector is None
        assert spec.key == "Colour"

    def test_not_alias_shaped(self):
        """Test text without the head[sel].key shape returns None."""
        assert split_part_spec("Atta.h.ent") is None
        assert split_part_spec("report-2.pdf") is None

    def test_text_after_selector(self):
        with pytest.raises(AddressSyntaxError, match="Expected '.key'"):
            split_part_spec("fields[3]value")


class TestSelector:
    """Test selector parsing."""

    def test_positional(self):
        assert parse_selector("3") == Positional(3)

    @pytest.mark.parametrize("body", ["³", "٣"])
    def test_positional_ascii_digits_only(self, body):
        """Test only ASCII digits make a positional selector."""
        with pytest.raises(AddressSyntaxError):
            parse_selector(body)

    def test_positional_zero(self):
        with pytest.raises(AddressSyntaxError, match="1-based"):
            parse_selector("0")

    def test_attributes_sorted(self):
        """Test attribute order does not matter."""
        selector = parse_selector("name='Colour', form='MyForm'")
        assert selector == ByAttributes.from_mapping({"form": "MyForm", "name": "Colour"})
        assert str(selector) == "[form='MyForm', name='Colour']"

    def test_double_quotes_and_bare_values(self):
        selector = parse_selector('name="Colour", form=MyForm')
        assert selector.as_dict() == {"name": "Colour", "form": "MyForm"}

    def test_value_with_bracket(self):
        assert parse_selector("name='a]b'").as_dict() == {"name": "a]b"}

    @pytest.mark.parametrize("body", ["", "name", "name='x',", "name='x' form='y'"])
    def test_malformed(self, body):
        with pytest.raises(AddressSyntaxError):
            parse_selector(body)

    def test_duplicate_attribute(self):
        with pytest.raises(AddressSyntaxError, match="Duplicate"):
            parse_selector("name='a', name='b'")
