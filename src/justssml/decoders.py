"""Attribute value grammars.

Each ``decode_*`` function takes one raw attribute string and returns a typed
value, or raises an ``AttributeParseError`` subclass whose ``value_offset``
points at the character where the grammar gave up. The functions are pure and
know nothing about elements; ``attributes`` combines them per element.
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from urllib.parse import urlsplit

from .errors import (
    AttributeParseError,
    MalformedContour,
    MalformedDecibel,
    MalformedDuration,
    MalformedMediaType,
    MalformedNumber,
    MalformedPercentage,
    MalformedPitch,
    MalformedUri,
    UnknownEnumerationValue,
)

DEFAULT_FETCH_TIMEOUT = timedelta(seconds=10)
DEFAULT_LEXICON_TYPE = "application/pls+xml"

_DIGITS = "0123456789"
_WHITESPACE = " \t\r\n"
_NUMERIC_START = "+-." + _DIGITS


# ---------------------
# Value types
# ---------------------


class SignPolicy(Enum):
    UNSIGNED = "unsigned"
    NON_NEGATIVE = "non-negative"
    SIGNED = "signed"


@dataclass(frozen=True, slots=True)
class Percentage:
    """A percentage as written: ``value`` keeps its sign, ``signed`` records an explicit sign."""

    value: float
    signed: bool = False


@dataclass(frozen=True, slots=True)
class Frequency:
    hertz: float


class PitchUnit(Enum):
    HZ = "Hz"
    SEMITONE = "st"
    PERCENT = "%"


@dataclass(frozen=True, slots=True)
class RelativeChange:
    amount: float
    unit: PitchUnit


@dataclass(frozen=True, slots=True)
class ContourPoint:
    position: Percentage
    pitch: object


@dataclass(frozen=True, slots=True)
class LanguageAccentPair:
    language: str
    accent: str | None = None


class BreakStrength(Enum):
    NONE = "none"
    X_WEAK = "x-weak"
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"
    X_STRONG = "x-strong"


class EmphasisLevel(Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    NONE = "none"
    REDUCED = "reduced"


class PitchKeyword(Enum):
    X_LOW = "x-low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    X_HIGH = "x-high"
    DEFAULT = "default"


class RateKeyword(Enum):
    X_SLOW = "x-slow"
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"
    X_FAST = "x-fast"
    DEFAULT = "default"


class VolumeKeyword(Enum):
    SILENT = "silent"
    X_SOFT = "x-soft"
    SOFT = "soft"
    MEDIUM = "medium"
    LOUD = "loud"
    X_LOUD = "x-loud"
    DEFAULT = "default"


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    NEUTRAL = "neutral"


class OnLanguageFailure(Enum):
    CHANGE_VOICE = "changevoice"
    IGNORE_TEXT = "ignoretext"
    IGNORE_LANG = "ignorelang"
    PROCESSOR_CHOICE = "processorchoice"


class OnVoiceFailure(Enum):
    PRIORITY_SELECT = "priorityselect"
    KEEP_EXISTING = "keepexisting"
    PROCESSOR_CHOICE = "processorchoice"


class VoiceFeature(Enum):
    GENDER = "gender"
    AGE = "age"
    VARIANT = "variant"
    NAME = "name"
    LANGUAGES = "languages"


class FetchHint(Enum):
    PREFETCH = "prefetch"
    SAFE = "safe"


SAY_AS_INTERPRETATIONS = frozenset(
    {
        "address",
        "bleep",
        "cardinal",
        "characters",
        "currency",
        "date",
        "digits",
        "expletive",
        "fraction",
        "interjection",
        "name",
        "number",
        "ordinal",
        "spell-out",
        "telephone",
        "time",
        "unit",
        "verbatim",
    }
)

SAY_AS_FORMATS = {
    "date": frozenset({"mdy", "dmy", "ymd", "md", "dm", "ym", "my", "d", "m", "y"}),
    "time": frozenset({"hms12", "hms24", "hm12", "hm24", "h12", "h24", "ms"}),
}


# ---------------------
# Scanning helpers
# ---------------------


def _scan_digits(value, pos):
    length = len(value)
    while pos < length and value[pos] in _DIGITS:
        pos += 1
    return pos


def _scan_real(value, pos):
    """Scan ``digits``, ``digits.digits`` or ``.digits`` from ``pos``; return the end index."""
    end = _scan_digits(value, pos)
    if end < len(value) and value[end] == ".":
        fraction_end = _scan_digits(value, end + 1)
        if fraction_end > end + 1:
            return fraction_end
    return end


def _scan_signed_real(value, error_cls, what):
    """Return (number, explicitly_signed, end) for an optionally signed real at the start of ``value``."""
    pos = 0
    signed = value[:1] in ("+", "-")
    if signed:
        pos = 1
    end = _scan_real(value, pos)
    if end == pos:
        raise error_cls(f"expected a number in {what} {value!r}", value=value, value_offset=pos)
    number = float(value[pos:end])
    if value[0] == "-":
        number = -number
    return number, signed, end


def _shift(exc, value, base):
    """Re-anchor an error raised on a slice of ``value`` that starts at ``base``."""
    exc.value = value
    exc.value_offset = base + (exc.value_offset or 0)
    return exc


# ---------------------
# Durations
# ---------------------


def decode_duration(value):
    """Decode ``250ms``, ``1.5 s``, ``.5s``, ``01:02:03.5`` or ``02:03.5`` to a timedelta."""
    if not value:
        raise MalformedDuration("empty duration", value=value, value_offset=0)
    if ":" in value:
        return _decode_clock_value(value)
    if value[0] in "+-":
        raise MalformedDuration(f"durations cannot be signed: {value!r}", value=value, value_offset=0)
    end = _scan_real(value, 0)
    if end == 0:
        raise MalformedDuration(f"expected a number in duration {value!r}", value=value, value_offset=0)
    number = float(value[:end])
    pos = end
    while pos < len(value) and value[pos] in _WHITESPACE:
        pos += 1
    unit = value[pos:]
    if unit == "ms":
        return timedelta(milliseconds=number)
    if unit == "s":
        return timedelta(seconds=number)
    raise MalformedDuration(f"expected unit 's' or 'ms' in duration {value!r}", value=value, value_offset=pos)


def _decode_clock_value(value):
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise MalformedDuration(f"expected [HH:]MM:SS clock value, got {value!r}", value=value, value_offset=0)

    offset = 0
    hours = 0
    if len(parts) == 3:
        hours_text = parts[0]
        if not hours_text or _scan_digits(hours_text, 0) != len(hours_text):
            raise MalformedDuration(f"invalid hours in clock value {value!r}", value=value, value_offset=0)
        hours = int(hours_text)
        offset = len(hours_text) + 1
        parts = parts[1:]

    minutes_text, seconds_text = parts
    if len(minutes_text) != 2 or _scan_digits(minutes_text, 0) != 2:
        raise MalformedDuration(f"invalid minutes in clock value {value!r}", value=value, value_offset=offset)
    minutes = int(minutes_text)
    if minutes >= 60:
        raise MalformedDuration(f"minutes out of range in clock value {value!r}", value=value, value_offset=offset)

    offset += 3
    if _scan_digits(seconds_text, 0) != 2:
        raise MalformedDuration(f"invalid seconds in clock value {value!r}", value=value, value_offset=offset)
    end = _scan_real(seconds_text, 0)
    if end != len(seconds_text):
        raise MalformedDuration(
            f"unexpected characters in clock value {value!r}", value=value, value_offset=offset + end
        )
    seconds = float(seconds_text)
    if seconds >= 60:
        raise MalformedDuration(f"seconds out of range in clock value {value!r}", value=value, value_offset=offset)
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


def decode_fetch_timeout(value=None):
    if value is None:
        return DEFAULT_FETCH_TIMEOUT
    return decode_duration(value)


# ---------------------
# Percentages, decibels, pitch
# ---------------------


def decode_percentage(value, sign=SignPolicy.SIGNED):
    """Decode ``[+|-]N[.N]%`` under the given sign policy."""
    first = value[:1]
    if first in ("+", "-"):
        if sign is SignPolicy.UNSIGNED:
            raise MalformedPercentage(f"percentage {value!r} cannot be signed", value=value, value_offset=0)
        if first == "-" and sign is SignPolicy.NON_NEGATIVE:
            raise MalformedPercentage(f"percentage {value!r} cannot be negative", value=value, value_offset=0)
    number, signed, end = _scan_signed_real(value, MalformedPercentage, "percentage")
    if value[end:] != "%":
        raise MalformedPercentage(f"expected '%' in percentage {value!r}", value=value, value_offset=end)
    return Percentage(number, signed)


def decode_decibel(value):
    """Decode ``[+|-]N[.N]dB``; exponents are not part of the grammar."""
    number, _, end = _scan_signed_real(value, MalformedDecibel, "decibel value")
    if value[end:] != "dB":
        raise MalformedDecibel(f"expected 'dB' in decibel value {value!r}", value=value, value_offset=end)
    return number


def decode_pitch(value):
    """Decode a prosody pitch or range value.

    Keywords map to ``PitchKeyword``. An unsigned ``NHz`` is an absolute
    ``Frequency``; a signed ``Hz`` value and any ``%`` or ``st`` value is a
    ``RelativeChange``.
    """
    if not value or value[0] not in _NUMERIC_START:
        return decode_enum(value, PitchKeyword)
    number, signed, end = _scan_signed_real(value, MalformedPitch, "pitch")
    suffix = value[end:]
    if suffix == "Hz":
        if signed:
            return RelativeChange(number, PitchUnit.HZ)
        return Frequency(number)
    if suffix == "%":
        return RelativeChange(number, PitchUnit.PERCENT)
    if suffix == "st":
        return RelativeChange(number, PitchUnit.SEMITONE)
    raise MalformedPitch(f"expected 'Hz', 'st' or '%' in pitch {value!r}", value=value, value_offset=end)


def decode_contour(value):
    """Decode ``(0%,+20Hz) (50%,x-high)`` into a tuple of ContourPoint.

    An empty or whitespace-only contour is an empty tuple.
    """
    points = []
    pos = 0
    length = len(value)
    while True:
        while pos < length and value[pos] in _WHITESPACE:
            pos += 1
        if pos >= length:
            break
        if value[pos] != "(":
            raise MalformedContour(f"expected '(' in contour {value!r}", value=value, value_offset=pos)
        close = value.find(")", pos)
        if close == -1:
            raise MalformedContour(f"unterminated contour point in {value!r}", value=value, value_offset=pos)
        inner = value[pos + 1 : close]
        comma = inner.find(",")
        if comma == -1:
            raise MalformedContour(f"expected ',' in contour point {inner!r}", value=value, value_offset=close)

        position_base = pos + 1
        try:
            position = decode_percentage(inner[:comma], sign=SignPolicy.UNSIGNED)
        except AttributeParseError as exc:
            raise _shift(exc, value, position_base) from None
        if position.value > 100:
            raise MalformedContour(
                f"contour position {inner[:comma]!r} is beyond 100%", value=value, value_offset=position_base
            )

        pitch_base = position_base + comma + 1
        try:
            pitch = decode_pitch(inner[comma + 1 :])
        except AttributeParseError as exc:
            raise _shift(exc, value, pitch_base) from None

        points.append(ContourPoint(position, pitch))
        pos = close + 1
        if pos < length and value[pos] not in _WHITESPACE:
            raise MalformedContour(
                f"contour points must be separated by whitespace in {value!r}", value=value, value_offset=pos
            )
    return tuple(points)


def decode_rate(value):
    if value and value[0] in _NUMERIC_START:
        return decode_percentage(value, sign=SignPolicy.NON_NEGATIVE)
    return decode_enum(value, RateKeyword)


def decode_volume(value):
    if value and value[0] in _NUMERIC_START:
        return decode_decibel(value)
    return decode_enum(value, VolumeKeyword)


# ---------------------
# Enumerations
# ---------------------


def decode_enum(value, enum_cls):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = tuple(member.value for member in enum_cls)
        raise UnknownEnumerationValue(
            f"{value!r} is not one of {', '.join(allowed)}", allowed=allowed, value=value, value_offset=0
        ) from None


def decode_interpret_as(value):
    """Accept a say-as interpretation, or a vendor interpretation written ``prefix:name``."""
    if value in SAY_AS_INTERPRETATIONS:
        return value
    prefix, sep, name = value.partition(":")
    if sep and prefix and name:
        return value
    allowed = tuple(sorted(SAY_AS_INTERPRETATIONS))
    raise UnknownEnumerationValue(
        f"{value!r} is not a known say-as interpretation", allowed=allowed, value=value, value_offset=0
    )


def decode_say_as_format(value, interpret_as):
    formats = SAY_AS_FORMATS.get(interpret_as)
    if formats is None or value in formats:
        return value
    allowed = tuple(sorted(formats))
    raise UnknownEnumerationValue(
        f"{value!r} is not a {interpret_as} format", allowed=allowed, value=value, value_offset=0
    )


_ALPHABET_PATTERN = re.compile(r"[A-Za-z0-9][-A-Za-z0-9._]*\Z")


def decode_alphabet(value):
    """Accept ``ipa``, a private ``x-`` alphabet, or a registered alphabet name."""
    if _ALPHABET_PATTERN.match(value):
        return value
    raise UnknownEnumerationValue(
        f"{value!r} is not a phonetic alphabet name", allowed=("ipa", "x-*"), value=value, value_offset=0
    )


def decode_voice_features(value):
    return tuple(decode_enum(item, VoiceFeature) for item in value.split())


# ---------------------
# Numbers, languages, media types, URIs
# ---------------------


def decode_non_negative_integer(value):
    start = 1 if value[:1] == "+" else 0
    end = _scan_digits(value, start)
    if end == start or end != len(value):
        raise MalformedNumber(f"expected a non-negative integer, got {value!r}", value=value, value_offset=end)
    return int(value[start:])


def decode_positive_integer(value):
    number = decode_non_negative_integer(value)
    if number == 0:
        raise MalformedNumber(f"expected a positive integer, got {value!r}", value=value, value_offset=0)
    return number


_LANGUAGE_RANGE_PATTERN = re.compile(r"(?:[A-Za-z]{1,8}|\*)(?:-(?:[A-Za-z0-9]{1,8}|\*))*\Z")


def decode_language_accent(value):
    """Decode ``language`` or ``language:accent``; ``und`` and ``zxx`` are not languages."""
    language, sep, accent = value.partition(":")
    if language in ("und", "zxx"):
        raise AttributeParseError(
            f"language {language!r} is not allowed", code="malformed-language", value=value, value_offset=0
        )
    if not _LANGUAGE_RANGE_PATTERN.match(language):
        raise AttributeParseError(
            f"invalid language {language!r}", code="malformed-language", value=value, value_offset=0
        )
    if not sep:
        return LanguageAccentPair(language)
    if not _LANGUAGE_RANGE_PATTERN.match(accent):
        raise AttributeParseError(
            f"invalid accent {accent!r}", code="malformed-language", value=value, value_offset=len(language) + 1
        )
    return LanguageAccentPair(language, accent)


def decode_languages(value):
    pairs = []
    pos = 0
    for item in value.split(" "):
        if item:
            try:
                pairs.append(decode_language_accent(item))
            except AttributeParseError as exc:
                raise _shift(exc, value, pos) from None
        pos += len(item) + 1
    return tuple(pairs)


_MEDIA_TOKEN = r"[A-Za-z0-9!#$&^_.+-]+"
_MEDIA_TYPE_PATTERN = re.compile(
    rf"({_MEDIA_TOKEN})/({_MEDIA_TOKEN})((?:\s*;\s*{_MEDIA_TOKEN}=(?:{_MEDIA_TOKEN}|\"[^\"]*\"))*)\s*\Z"
)


def decode_media_type(value=None):
    """Validate a ``type/subtype[; param=value]`` media type; absent means a PLS lexicon."""
    if value is None:
        return DEFAULT_LEXICON_TYPE
    match = _MEDIA_TYPE_PATTERN.match(value)
    if match is None:
        offset = value.find("/")
        raise MalformedMediaType(
            f"invalid media type {value!r}", value=value, value_offset=0 if offset == -1 else offset
        )
    return f"{match.group(1).lower()}/{match.group(2).lower()}{match.group(3)}"


_SCHEME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*\Z")
_URI_FORBIDDEN = frozenset('<>"{}|\\^`')
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def decode_uri(value):
    """Check ``value`` is a well-formed RFC 3986 URI reference and return it unchanged."""
    if not value:
        raise MalformedUri("empty URI", value=value, value_offset=0)
    for index, char in enumerate(value):
        if char.isspace() or ord(char) < 0x20 or ord(char) == 0x7F:
            raise MalformedUri(f"whitespace or control character in URI {value!r}", value=value, value_offset=index)
        if char in _URI_FORBIDDEN:
            raise MalformedUri(f"{char!r} is not allowed in URI {value!r}", value=value, value_offset=index)
        if char == "%" and not (value[index + 1 : index + 2] in _HEX_DIGITS and value[index + 2 : index + 3] in _HEX_DIGITS):
            raise MalformedUri(f"invalid percent-encoding in URI {value!r}", value=value, value_offset=index)

    delimiter = min((i for i in (value.find(c) for c in ":/?#") if i != -1), default=-1)
    if delimiter != -1 and value[delimiter] == ":" and not _SCHEME_PATTERN.match(value[:delimiter]):
        raise MalformedUri(f"invalid scheme in URI {value!r}", value=value, value_offset=0)

    try:
        parts = urlsplit(value)
        parts.port  # noqa: B018
    except ValueError as exc:
        offset = value.find("//")
        raise MalformedUri(
            f"malformed authority in URI {value!r}: {exc}", value=value, value_offset=max(offset, 0)
        ) from None
    return value
