"""XML character reference decoding.

SSML documents are XML, so only the five predefined entities and numeric
character references (&#60; and &#x3C;) are recognised. There is no DTD
processing, so any other named reference is an error rather than a lookup.
"""

NAMED_ENTITIES = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DEC_DIGITS = frozenset("0123456789")


class EntityDecodeError(ValueError):
    """Raised for an invalid reference; ``offset`` is the index of its ``&``."""

    def __init__(self, message, offset):
        super().__init__(message)
        self.offset = offset


def is_xml_char(codepoint):
    """Check the XML 1.0 ``Char`` production."""
    return (
        codepoint in (0x9, 0xA, 0xD)
        or 0x20 <= codepoint <= 0xD7FF
        or 0xE000 <= codepoint <= 0xFFFD
        or 0x10000 <= codepoint <= 0x10FFFF
    )


def decode_numeric_entity(text, is_hex=False):
    """Decode the digits of a numeric character reference.

    Returns the character, or None when the digits do not name a legal XML character.
    """
    if not text:
        return None
    digits = _HEX_DIGITS if is_hex else _DEC_DIGITS
    if any(c not in digits for c in text):
        return None
    codepoint = int(text, 16 if is_hex else 10)
    if not is_xml_char(codepoint):
        return None
    return chr(codepoint)


def decode_entities_in_text(text):
    """Decode every character reference in ``text``.

    Raises EntityDecodeError for a bare ``&``, an unterminated reference, an
    unknown entity name or a numeric reference outside the XML character range.
    """
    if "&" not in text:
        return text

    result = []
    i = 0
    length = len(text)
    while i < length:
        next_amp = text.find("&", i)
        if next_amp == -1:
            result.append(text[i:])
            break
        if next_amp > i:
            result.append(text[i:next_amp])

        i = next_amp
        end = text.find(";", i + 1)
        if end == -1:
            raise EntityDecodeError("unterminated character reference", i)
        reference = text[i + 1 : end]

        if reference.startswith("#x"):
            decoded = decode_numeric_entity(reference[2:], is_hex=True)
        elif reference.startswith("#"):
            decoded = decode_numeric_entity(reference[1:])
        else:
            decoded = NAMED_ENTITIES.get(reference)
            if decoded is None:
                raise EntityDecodeError(f"unknown entity &{reference};", i)

        if decoded is None:
            raise EntityDecodeError(f"invalid character reference &{reference};", i)
        result.append(decoded)
        i = end + 1

    return "".join(result)
