import logging

from .attributes import CustomAttributes
from .decoders import DEFAULT_FETCH_TIMEOUT, Percentage, SignPolicy
from .document import Document, EnterTag, EventLog, ExitTag, Span, Tag, TextRun
from .elements import SSML_NAMESPACE, Custom, ElementKind, can_nest, element_kind
from .errors import (
    AttributeParseError,
    InvalidNesting,
    MalformedContour,
    MalformedDecibel,
    MalformedDuration,
    MalformedMarkup,
    MalformedMediaType,
    MalformedNumber,
    MalformedPercentage,
    MalformedPitch,
    MalformedUri,
    MismatchedClose,
    MissingAttribute,
    ParseError,
    UnknownEnumerationValue,
    UnterminatedElement,
)
from .parser import JustSSML, parse_ssml
from .policy import CustomTagPolicy, ParseConfig, Synthesizability
from .scanner import scan
from .serialize import TransformedSsml, WriterEvent, to_ssml, transform_ssml

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_FETCH_TIMEOUT",
    "SSML_NAMESPACE",
    "AttributeParseError",
    "Custom",
    "CustomAttributes",
    "CustomTagPolicy",
    "Document",
    "ElementKind",
    "EnterTag",
    "EventLog",
    "ExitTag",
    "InvalidNesting",
    "JustSSML",
    "MalformedContour",
    "MalformedDecibel",
    "MalformedDuration",
    "MalformedMarkup",
    "MalformedMediaType",
    "MalformedNumber",
    "MalformedPercentage",
    "MalformedPitch",
    "MalformedUri",
    "MismatchedClose",
    "MissingAttribute",
    "ParseConfig",
    "ParseError",
    "Percentage",
    "SignPolicy",
    "Span",
    "Synthesizability",
    "Tag",
    "TextRun",
    "TransformedSsml",
    "UnknownEnumerationValue",
    "UnterminatedElement",
    "WriterEvent",
    "can_nest",
    "element_kind",
    "parse_ssml",
    "scan",
    "to_ssml",
    "transform_ssml",
]
