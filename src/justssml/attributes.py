"""Typed attribute sets, one per standard element.

``decode_attributes(kind, raw)`` looks the element up in ``DECODERS`` and
returns its frozen attribute dataclass. Required attributes raise
``MissingAttribute``; unknown attributes on standard elements are vendor
extensions and are ignored. Custom elements keep their raw mapping.
"""

from dataclasses import dataclass
from datetime import timedelta

from . import decoders as d
from .elements import Custom, ElementKind
from .errors import AttributeParseError, MissingAttribute, UnknownEnumerationValue

SSML_VERSIONS = ("1.0", "1.1")


@dataclass(frozen=True, slots=True)
class SpeakAttributes:
    version: str = "1.1"
    lang: str | None = None
    base: str | None = None
    on_lang_failure: d.OnLanguageFailure | None = None
    # Every other root attribute (namespace declarations, schema locations) as (name, value) pairs.
    extra: tuple = ()


@dataclass(frozen=True, slots=True)
class LexiconAttributes:
    uri: str
    xml_id: str
    type: str = d.DEFAULT_LEXICON_TYPE
    fetch_timeout: timedelta = d.DEFAULT_FETCH_TIMEOUT
    fetch_hint: d.FetchHint = d.FetchHint.PREFETCH
    max_age: int | None = None
    max_stale: int | None = None


@dataclass(frozen=True, slots=True)
class LookupAttributes:
    ref: str


@dataclass(frozen=True, slots=True)
class MetaAttributes:
    content: str
    name: str | None = None
    http_equiv: str | None = None


@dataclass(frozen=True, slots=True)
class MetadataAttributes:
    pass


@dataclass(frozen=True, slots=True)
class ParagraphAttributes:
    lang: str | None = None


@dataclass(frozen=True, slots=True)
class SentenceAttributes:
    lang: str | None = None


@dataclass(frozen=True, slots=True)
class TokenAttributes:
    role: str | None = None


@dataclass(frozen=True, slots=True)
class WordAttributes:
    role: str | None = None


@dataclass(frozen=True, slots=True)
class SayAsAttributes:
    interpret_as: str
    format: str | None = None
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class PhonemeAttributes:
    ph: str
    alphabet: str | None = None


@dataclass(frozen=True, slots=True)
class SubAttributes:
    alias: str


@dataclass(frozen=True, slots=True)
class LangAttributes:
    lang: str
    on_lang_failure: d.OnLanguageFailure | None = None


@dataclass(frozen=True, slots=True)
class VoiceAttributes:
    gender: d.Gender | None = None
    age: int | None = None
    variant: int | None = None
    names: tuple = ()
    languages: tuple = ()
    required: tuple = ()
    ordering: tuple = ()
    on_voice_failure: d.OnVoiceFailure | None = None


@dataclass(frozen=True, slots=True)
class EmphasisAttributes:
    level: d.EmphasisLevel = d.EmphasisLevel.MODERATE


@dataclass(frozen=True, slots=True)
class BreakAttributes:
    strength: d.BreakStrength | None = None
    time: timedelta | None = None


@dataclass(frozen=True, slots=True)
class ProsodyAttributes:
    pitch: object = None
    contour: tuple | None = None
    range: object = None
    rate: object = None
    duration: timedelta | None = None
    volume: object = None


@dataclass(frozen=True, slots=True)
class AudioAttributes:
    src: str | None = None
    fetch_timeout: timedelta = d.DEFAULT_FETCH_TIMEOUT
    fetch_hint: d.FetchHint = d.FetchHint.PREFETCH
    max_age: int | None = None
    max_stale: int | None = None
    clip_begin: timedelta = timedelta(0)
    clip_end: timedelta | None = None
    repeat_count: int = 1
    repeat_dur: timedelta | None = None
    sound_level: float = 0.0
    speed: d.Percentage = d.Percentage(100.0)


@dataclass(frozen=True, slots=True)
class MarkAttributes:
    name: str


@dataclass(frozen=True, slots=True)
class DescAttributes:
    lang: str | None = None


@dataclass(frozen=True, slots=True)
class CustomAttributes:
    """Raw attributes of a custom element, as (name, value) pairs in document order."""

    raw: tuple = ()

    def get(self, name, default=None):
        for key, value in self.raw:
            if key == name:
                return value
        return default

    def as_dict(self):
        return dict(self.raw)


# ---------------------
# Lookup helpers
# ---------------------


def _optional(raw, element, name, decoder=None, *args, default=None):
    value = raw.get(name)
    if value is None:
        return default
    if decoder is None:
        return value
    try:
        return decoder(value, *args)
    except AttributeParseError as exc:
        exc.annotate(element, name)
        raise


def _required(raw, element, name, decoder=None, *args):
    if name not in raw:
        msg = f"<{element}> requires the {name} attribute"
        raise MissingAttribute(msg, element=element, attribute=name)
    return _optional(raw, element, name, decoder, *args)


def _optional_feature(raw, element, name, decoder, *args):
    """Voice feature attributes treat the empty string as unspecified."""
    if raw.get(name) == "":
        return None
    return _optional(raw, element, name, decoder, *args)


# ---------------------
# Per-element decoders
# ---------------------


def _decode_version(value):
    if value not in SSML_VERSIONS:
        raise UnknownEnumerationValue(
            f"unsupported SSML version {value!r}", allowed=SSML_VERSIONS, value=value, value_offset=0
        )
    return value


_SPEAK_KNOWN = frozenset({"version", "xml:lang", "xml:base", "onlangfailure"})


def decode_speak(raw):
    return SpeakAttributes(
        version=_optional(raw, "speak", "version", _decode_version, default="1.1"),
        lang=_optional(raw, "speak", "xml:lang"),
        base=_optional(raw, "speak", "xml:base", d.decode_uri),
        on_lang_failure=_optional(raw, "speak", "onlangfailure", d.decode_enum, d.OnLanguageFailure),
        extra=tuple((name, value) for name, value in raw.items() if name not in _SPEAK_KNOWN),
    )


def decode_lexicon(raw):
    return LexiconAttributes(
        uri=_required(raw, "lexicon", "uri", d.decode_uri),
        xml_id=_required(raw, "lexicon", "xml:id"),
        type=_optional(raw, "lexicon", "type", d.decode_media_type, default=d.DEFAULT_LEXICON_TYPE),
        fetch_timeout=_optional(raw, "lexicon", "fetchtimeout", d.decode_fetch_timeout, default=d.DEFAULT_FETCH_TIMEOUT),
        fetch_hint=_optional(raw, "lexicon", "fetchhint", d.decode_enum, d.FetchHint, default=d.FetchHint.PREFETCH),
        max_age=_optional(raw, "lexicon", "maxage", d.decode_non_negative_integer),
        max_stale=_optional(raw, "lexicon", "maxstale", d.decode_non_negative_integer),
    )


def decode_lookup(raw):
    return LookupAttributes(ref=_required(raw, "lookup", "ref"))


def decode_meta(raw):
    content = _required(raw, "meta", "content")
    name = raw.get("name")
    http_equiv = raw.get("http-equiv")
    if name is None and http_equiv is None:
        msg = "<meta> requires either a name or an http-equiv attribute"
        raise MissingAttribute(msg, element="meta", attribute="name")
    if name is not None and http_equiv is not None:
        msg = "<meta> cannot have both name and http-equiv attributes"
        raise AttributeParseError(
            msg, code="conflicting-attributes", element="meta", attribute="http-equiv", value=http_equiv
        )
    return MetaAttributes(content=content, name=name, http_equiv=http_equiv)


def decode_metadata(raw):
    return MetadataAttributes()


def decode_paragraph(raw):
    return ParagraphAttributes(lang=raw.get("xml:lang"))


def decode_sentence(raw):
    return SentenceAttributes(lang=raw.get("xml:lang"))


def decode_token(raw):
    return TokenAttributes(role=raw.get("role"))


def decode_word(raw):
    return WordAttributes(role=raw.get("role"))


def decode_say_as(raw):
    interpret_as = _required(raw, "say-as", "interpret-as", d.decode_interpret_as)
    return SayAsAttributes(
        interpret_as=interpret_as,
        format=_optional(raw, "say-as", "format", d.decode_say_as_format, interpret_as),
        detail=raw.get("detail"),
    )


def decode_phoneme(raw):
    return PhonemeAttributes(
        ph=_required(raw, "phoneme", "ph"),
        alphabet=_optional(raw, "phoneme", "alphabet", d.decode_alphabet),
    )


def decode_sub(raw):
    return SubAttributes(alias=_required(raw, "sub", "alias"))


def decode_lang(raw):
    return LangAttributes(
        lang=_required(raw, "lang", "xml:lang"),
        on_lang_failure=_optional(raw, "lang", "onlangfailure", d.decode_enum, d.OnLanguageFailure),
    )


def decode_voice(raw):
    return VoiceAttributes(
        gender=_optional_feature(raw, "voice", "gender", d.decode_enum, d.Gender),
        age=_optional_feature(raw, "voice", "age", d.decode_non_negative_integer),
        variant=_optional_feature(raw, "voice", "variant", d.decode_positive_integer),
        names=tuple(raw.get("name", "").split()),
        languages=_optional(raw, "voice", "languages", d.decode_languages, default=()),
        required=_optional(raw, "voice", "required", d.decode_voice_features, default=()),
        ordering=_optional(raw, "voice", "ordering", d.decode_voice_features, default=()),
        on_voice_failure=_optional(raw, "voice", "onvoicefailure", d.decode_enum, d.OnVoiceFailure),
    )


def decode_emphasis(raw):
    return EmphasisAttributes(
        level=_optional(raw, "emphasis", "level", d.decode_enum, d.EmphasisLevel, default=d.EmphasisLevel.MODERATE)
    )


def decode_break(raw):
    return BreakAttributes(
        strength=_optional(raw, "break", "strength", d.decode_enum, d.BreakStrength),
        time=_optional(raw, "break", "time", d.decode_duration),
    )


def decode_prosody(raw):
    return ProsodyAttributes(
        pitch=_optional(raw, "prosody", "pitch", d.decode_pitch),
        contour=_optional(raw, "prosody", "contour", d.decode_contour),
        range=_optional(raw, "prosody", "range", d.decode_pitch),
        rate=_optional(raw, "prosody", "rate", d.decode_rate),
        duration=_optional(raw, "prosody", "duration", d.decode_duration),
        volume=_optional(raw, "prosody", "volume", d.decode_volume),
    )


def decode_audio(raw):
    return AudioAttributes(
        src=_optional(raw, "audio", "src", d.decode_uri),
        fetch_timeout=_optional(raw, "audio", "fetchtimeout", d.decode_fetch_timeout, default=d.DEFAULT_FETCH_TIMEOUT),
        fetch_hint=_optional(raw, "audio", "fetchhint", d.decode_enum, d.FetchHint, default=d.FetchHint.PREFETCH),
        max_age=_optional(raw, "audio", "maxage", d.decode_non_negative_integer),
        max_stale=_optional(raw, "audio", "maxstale", d.decode_non_negative_integer),
        clip_begin=_optional(raw, "audio", "clipBegin", d.decode_duration, default=timedelta(0)),
        clip_end=_optional(raw, "audio", "clipEnd", d.decode_duration),
        repeat_count=_optional(raw, "audio", "repeatCount", d.decode_positive_integer, default=1),
        repeat_dur=_optional(raw, "audio", "repeatDur", d.decode_duration),
        sound_level=_optional(raw, "audio", "soundLevel", d.decode_decibel, default=0.0),
        speed=_optional(
            raw, "audio", "speed", d.decode_percentage, d.SignPolicy.NON_NEGATIVE, default=d.Percentage(100.0)
        ),
    )


def decode_mark(raw):
    return MarkAttributes(name=_required(raw, "mark", "name"))


def decode_desc(raw):
    return DescAttributes(lang=raw.get("xml:lang"))


DECODERS = {
    ElementKind.SPEAK: decode_speak,
    ElementKind.LEXICON: decode_lexicon,
    ElementKind.LOOKUP: decode_lookup,
    ElementKind.META: decode_meta,
    ElementKind.METADATA: decode_metadata,
    ElementKind.P: decode_paragraph,
    ElementKind.S: decode_sentence,
    ElementKind.TOKEN: decode_token,
    ElementKind.W: decode_word,
    ElementKind.SAY_AS: decode_say_as,
    ElementKind.PHONEME: decode_phoneme,
    ElementKind.SUB: decode_sub,
    ElementKind.LANG: decode_lang,
    ElementKind.VOICE: decode_voice,
    ElementKind.EMPHASIS: decode_emphasis,
    ElementKind.BREAK: decode_break,
    ElementKind.PROSODY: decode_prosody,
    ElementKind.AUDIO: decode_audio,
    ElementKind.MARK: decode_mark,
    ElementKind.DESC: decode_desc,
}


def decode_attributes(kind, raw):
    if isinstance(kind, Custom):
        return CustomAttributes(tuple(raw.items()))
    return DECODERS[kind](raw)


# Elements whose extracted text is computed from their attributes and literal text.
EXPANSIONS = {
    ElementKind.SUB: lambda attributes, original_text: attributes.alias,
}
