"""Parse errors raised by the scanner, the attribute decoders and the tree builder.

Every error is a ``ParseError`` carrying a short ``code`` plus the location of
the offending input where it is known: ``byte_offset`` (UTF-8 bytes),
``char_offset`` (Unicode scalar values), and ``line``/``column`` for humans.
Parsing never recovers from an error; the first one aborts the parse.
"""


class ParseError(Exception):
    """Base class for every error produced while parsing SSML."""

    code = "parse-error"

    def __init__(self, message=None, *, code=None, byte_offset=None, char_offset=None, line=None, column=None):
        if code is not None:
            self.code = code
        self.message = message or self.code
        self.byte_offset = byte_offset
        self.char_offset = char_offset
        self.line = line
        self.column = column
        super().__init__(self.message)

    def locate(self, token):
        """Attach the position of ``token`` unless a position is already known."""
        if self.char_offset is None and token is not None:
            self.byte_offset = token.byte_offset
            self.char_offset = token.char_offset
            self.line = token.line
            self.column = token.column
        return self

    def __repr__(self):
        if self.line is not None and self.column is not None:
            return f"{type(self).__name__}({self.code!r}, line={self.line}, column={self.column})"
        return f"{type(self).__name__}({self.code!r})"

    def __str__(self):
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"({self.line},{self.column}): {self.code} - {self.message}"
            return f"({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code


class MalformedMarkup(ParseError):
    """Low-level XML syntax error: unterminated tag, bad quoting, invalid entity."""

    code = "malformed-markup"


class InvalidNesting(ParseError):
    """An element (or text, reported as ``"#text"``) is not allowed inside its parent.

    ``parent`` is ``None`` when the offending item sits outside the root element.
    """

    code = "invalid-nesting"

    def __init__(self, parent, child, message=None, **kwargs):
        self.parent = parent
        self.child = child
        if message is None:
            if parent is None:
                message = f"{child} cannot appear outside the speak root element"
            else:
                message = f"{child} cannot be placed inside {parent}"
        super().__init__(message, **kwargs)


class MismatchedClose(ParseError):
    code = "mismatched-close"

    def __init__(self, expected, found, message=None, **kwargs):
        self.expected = expected
        self.found = found
        if message is None:
            if expected is None:
                message = f"close tag </{found}> has no matching open tag"
            else:
                message = f"expected </{expected}> but found </{found}>"
        super().__init__(message, **kwargs)


class UnterminatedElement(ParseError):
    code = "unterminated-element"

    def __init__(self, open_elements, message=None, **kwargs):
        self.open_elements = tuple(open_elements)
        if message is None:
            names = ", ".join(f"<{name}>" for name in self.open_elements)
            message = f"input ended with unclosed elements: {names}"
        super().__init__(message, **kwargs)


class AttributeParseError(ParseError):
    """A required attribute is missing or a present attribute failed to decode.

    ``value_offset`` is the index inside ``value`` where the grammar gave up.
    """

    code = "attribute-error"

    def __init__(self, message=None, *, element=None, attribute=None, value=None, value_offset=None, **kwargs):
        self.element = element
        self.attribute = attribute
        self.value = value
        self.value_offset = value_offset
        super().__init__(message, **kwargs)

    def annotate(self, element=None, attribute=None):
        """Fill in the element and attribute names when the grammar did not know them."""
        if self.element is None:
            self.element = element
        if self.attribute is None:
            self.attribute = attribute
        return self

    def __str__(self):
        base = super().__str__()
        where = []
        if self.element is not None:
            where.append(f"<{self.element}>")
        if self.attribute is not None:
            where.append(f"@{self.attribute}")
        if where:
            return f"{base} [{' '.join(where)}]"
        return base


class MissingAttribute(AttributeParseError):
    code = "missing-attribute"


class MalformedDuration(AttributeParseError):
    code = "malformed-duration"


class MalformedPercentage(AttributeParseError):
    code = "malformed-percentage"


class MalformedDecibel(AttributeParseError):
    code = "malformed-decibel"


class MalformedPitch(AttributeParseError):
    code = "malformed-pitch"


class MalformedContour(AttributeParseError):
    code = "malformed-contour"


class MalformedNumber(AttributeParseError):
    code = "malformed-number"


class MalformedMediaType(AttributeParseError):
    code = "malformed-media-type"


class MalformedUri(AttributeParseError):
    code = "malformed-uri"


class UnknownEnumerationValue(AttributeParseError):
    code = "unknown-enumeration-value"

    def __init__(self, message=None, *, allowed=(), **kwargs):
        self.allowed = tuple(allowed)
        super().__init__(message, **kwargs)
