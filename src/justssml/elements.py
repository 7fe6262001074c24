"""The SSML element vocabulary and its content model.

Standard elements are members of ``ElementKind``; every other tag name is a
``Custom`` element. ``can_nest`` answers whether one element may appear as a
direct child of another, and ``content_model`` says how an element treats text.
"""

from dataclasses import dataclass
from enum import Enum

SSML_NAMESPACE = "http://www.w3.org/2001/10/synthesis"
TEXT_NODE = "#text"


class ElementKind(Enum):
    SPEAK = "speak"
    LEXICON = "lexicon"
    LOOKUP = "lookup"
    META = "meta"
    METADATA = "metadata"
    P = "p"
    S = "s"
    TOKEN = "token"
    W = "w"
    SAY_AS = "say-as"
    PHONEME = "phoneme"
    SUB = "sub"
    LANG = "lang"
    VOICE = "voice"
    EMPHASIS = "emphasis"
    BREAK = "break"
    PROSODY = "prosody"
    AUDIO = "audio"
    MARK = "mark"
    DESC = "desc"

    def __str__(self):
        return self.value

    @property
    def tag_name(self):
        return self.value


@dataclass(frozen=True, slots=True)
class Custom:
    """An element outside the SSML vocabulary, named as written (prefix included)."""

    name: str

    def __str__(self):
        return self.name

    @property
    def tag_name(self):
        return self.name


_BY_NAME = {kind.value: kind for kind in ElementKind}


def element_kind(name, namespace=None):
    """Classify a qualified tag name.

    ``namespace`` is the namespace URI the name resolved to, or None when no
    namespace applies. Only names in the SSML namespace (or in no namespace
    at all, unprefixed) are standard elements.
    """
    prefix, _, local = name.rpartition(":")
    if namespace is None:
        if prefix:
            return Custom(name)
    elif namespace != SSML_NAMESPACE:
        return Custom(name)
    kind = _BY_NAME.get(local)
    if kind is None:
        return Custom(name)
    return kind


# Content models
MIXED = "mixed"
TEXT_ONLY = "text-only"
EMPTY = "empty"

_CONTENT_MODELS = {
    ElementKind.SAY_AS: TEXT_ONLY,
    ElementKind.PHONEME: TEXT_ONLY,
    ElementKind.SUB: TEXT_ONLY,
    ElementKind.DESC: TEXT_ONLY,
    ElementKind.BREAK: EMPTY,
    ElementKind.MARK: EMPTY,
    ElementKind.LEXICON: EMPTY,
    ElementKind.META: EMPTY,
}

_E = ElementKind

_SENTENCE_CONTENT = frozenset(
    {
        _E.AUDIO,
        _E.BREAK,
        _E.EMPHASIS,
        _E.LANG,
        _E.LOOKUP,
        _E.MARK,
        _E.PHONEME,
        _E.PROSODY,
        _E.SAY_AS,
        _E.SUB,
        _E.TOKEN,
        _E.VOICE,
        _E.W,
    }
)
_WORD_CONTENT = frozenset(
    {
        _E.AUDIO,
        _E.BREAK,
        _E.EMPHASIS,
        _E.MARK,
        _E.PHONEME,
        _E.PROSODY,
        _E.SAY_AS,
        _E.SUB,
    }
)
_FLOW_CONTENT = frozenset(kind for kind in ElementKind if kind not in (_E.SPEAK, _E.DESC))

# Standard children each element accepts. Custom children are accepted by
# every element whose content model is mixed.
LEGAL_CHILDREN = {
    _E.SPEAK: _FLOW_CONTENT,
    _E.VOICE: _FLOW_CONTENT,
    _E.LANG: _FLOW_CONTENT,
    _E.PROSODY: _FLOW_CONTENT,
    _E.LOOKUP: _FLOW_CONTENT,
    _E.AUDIO: _FLOW_CONTENT | {_E.DESC},
    _E.P: _SENTENCE_CONTENT | {_E.S},
    _E.S: _SENTENCE_CONTENT,
    _E.EMPHASIS: _SENTENCE_CONTENT,
    _E.TOKEN: _WORD_CONTENT,
    _E.W: _WORD_CONTENT,
    _E.METADATA: frozenset(),
    _E.SAY_AS: frozenset(),
    _E.PHONEME: frozenset(),
    _E.SUB: frozenset(),
    _E.DESC: frozenset(),
    _E.BREAK: frozenset(),
    _E.MARK: frozenset(),
    _E.LEXICON: frozenset(),
    _E.META: frozenset(),
}

del _E


def content_model(kind):
    """Return MIXED, TEXT_ONLY or EMPTY for an element kind."""
    if isinstance(kind, Custom):
        return MIXED
    return _CONTENT_MODELS.get(kind, MIXED)


def can_nest(parent, child):
    """Return True when ``child`` may appear as a direct child of ``parent``.

    Both arguments are ``ElementKind`` or ``Custom`` values. ``speak`` is never
    a legal child: it is only valid as the document root.
    """
    if child is ElementKind.SPEAK:
        return False
    if isinstance(parent, Custom):
        return child is not ElementKind.DESC
    if isinstance(child, Custom):
        return content_model(parent) == MIXED
    return child in LEGAL_CHILDREN[parent]


def accepts_text(kind):
    return content_model(kind) != EMPTY
