"""Tests for parse error reporting."""

import unittest

from justssml import (
    AttributeParseError,
    InvalidNesting,
    MalformedMarkup,
    MalformedPitch,
    MismatchedClose,
    ParseError,
    UnknownEnumerationValue,
    UnterminatedElement,
    parse_ssml,
)


class TestParseError(unittest.TestCase):
    """Test ParseError class behavior."""

    def test_parse_error_str(self):
        """ParseError has readable string representation."""
        error = ParseError(code="test-error", line=1, column=5)
        assert str(error) == "(1,5): test-error"

    def test_parse_error_str_with_message(self):
        """A message different from the code is appended."""
        error = ParseError("something broke", code="test-error", line=2, column=3)
        assert str(error) == "(2,3): test-error - something broke"

    def test_parse_error_repr(self):
        """ParseError has useful repr."""
        error = ParseError(code="test-error", line=1, column=5)
        assert "test-error" in repr(error)
        assert "line=1" in repr(error)
        assert "column=5" in repr(error)

    def test_parse_error_no_location(self):
        """ParseError works without location info."""
        error = ParseError(code="test-error")
        assert str(error) == "test-error"
        assert "line=" not in repr(error)

    def test_parse_error_no_location_with_message(self):
        """ParseError with message but no location."""
        error = ParseError("This is a test error", code="test-error")
        assert str(error) == "test-error - This is a test error"

    def test_subclasses_carry_their_code(self):
        """Each error kind has a stable code."""
        assert MalformedMarkup().code == "malformed-markup"
        assert InvalidNesting(None, "#text").code == "invalid-nesting"
        assert MismatchedClose("p", "s").code == "mismatched-close"
        assert UnterminatedElement(["speak"]).code == "unterminated-element"
        assert MalformedPitch().code == "malformed-pitch"

    def test_all_errors_are_parse_errors(self):
        """Every error can be caught as ParseError."""
        for markup in ("<speak", "<p/>", "<speak></p>", "<speak>", '<speak><break time="x"/></speak>'):
            with self.assertRaises(ParseError):
                parse_ssml(markup)


class TestErrorMessages(unittest.TestCase):
    """Test the messages built from error details."""

    def test_invalid_nesting_message(self):
        """Nesting errors name both elements."""
        with self.assertRaises(InvalidNesting) as ctx:
            parse_ssml("<speak><s><p>x</p></s></speak>")
        assert str(ctx.exception) == "(1,11): invalid-nesting - p cannot be placed inside s"

    def test_outside_root_message(self):
        """Text outside the root is reported as #text."""
        with self.assertRaises(InvalidNesting) as ctx:
            parse_ssml("oops<speak/>")
        assert "#text cannot appear outside the speak root element" in str(ctx.exception)

    def test_mismatched_close_message(self):
        """Mismatched close tags name the expected and found tags."""
        with self.assertRaises(MismatchedClose) as ctx:
            parse_ssml("<speak>\n<p>x</s>")
        assert str(ctx.exception) == "(2,5): mismatched-close - expected </p> but found </s>"

    def test_unterminated_message(self):
        """Unterminated errors list every open element."""
        with self.assertRaises(UnterminatedElement) as ctx:
            parse_ssml("<speak><p>")
        assert "<speak>, <p>" in str(ctx.exception)

    def test_attribute_error_context(self):
        """Attribute errors name their element, attribute and value."""
        with self.assertRaises(UnknownEnumerationValue) as ctx:
            parse_ssml('<speak><emphasis level="loud">x</emphasis></speak>')
        exc = ctx.exception
        assert isinstance(exc, AttributeParseError)
        assert exc.element == "emphasis"
        assert exc.attribute == "level"
        assert exc.value == "loud"
        assert "reduced" in exc.allowed
        assert str(exc).startswith("(1,8): unknown-enumeration-value")
        assert str(exc).endswith("[<emphasis> @level]")

    def test_annotate_keeps_known_names(self):
        """annotate only fills in missing names."""
        error = AttributeParseError("bad", element="prosody")
        error.annotate("break", "time")
        assert error.element == "prosody"
        assert error.attribute == "time"

    def test_byte_offsets(self):
        """Byte offsets count UTF-8 bytes, char offsets count code points."""
        with self.assertRaises(MismatchedClose) as ctx:
            parse_ssml("<speak>ünïcödé</p>")
        assert ctx.exception.char_offset == 14
        assert ctx.exception.byte_offset == 18


if __name__ == "__main__":
    unittest.main()
