"""Write a parsed document back out as SSML markup.

The output keeps the structural skeleton: tag names, raw attributes and text.
Text of excluded or expanded elements is written from the literal text the
parser kept on the tag, so re-parsing the output gives the same document.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from .document import Document, Tag

OPEN = "open"
CLOSE = "close"
EMPTY = "empty"
TEXT = "text"


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _choose_attr_quote(value: str) -> str:
    if '"' in value and "'" not in value:
        return "'"
    return '"'


def _escape_attr_value(value: str, quote_char: str) -> str:
    value = value.replace("&", "&amp;").replace("<", "&lt;")
    if quote_char == '"':
        return value.replace('"', "&quot;")
    return value.replace("'", "&apos;")


def serialize_start_tag(name: str, attrs, *, empty: bool = False) -> str:
    parts: list[str] = ["<", name]
    for key, value in attrs:
        quote = _choose_attr_quote(value)
        parts.extend([" ", key, "=", quote, _escape_attr_value(value, quote), quote])
    parts.append("/>" if empty else ">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


@dataclass(frozen=True, slots=True)
class WriterEvent:
    """One step of writing a document: an open, close or empty tag, or a text run.

    ``spoken`` is what a text event contributes to the synthesizable text when
    that differs from ``text`` (the alias of an expanded element, nothing for
    excluded text). ``None`` means the text is spoken as written.
    """

    kind: str
    tag: Tag | None = None
    text: str | None = None
    spoken: str | None = None

    @property
    def spoken_text(self) -> str:
        if self.kind != TEXT:
            return ""
        if self.spoken is not None:
            return self.spoken
        return self.text or ""

    def to_markup(self) -> str:
        kind = self.kind
        if kind == TEXT:
            return _escape_text(self.text)
        if self.tag is None:
            msg = f"{kind} event without a tag"
            raise ValueError(msg)
        if kind == OPEN:
            return serialize_start_tag(self.tag.name, self.tag.raw_attributes)
        if kind == EMPTY:
            return serialize_start_tag(self.tag.name, self.tag.raw_attributes, empty=True)
        if kind == CLOSE:
            return serialize_end_tag(self.tag.name)
        msg = f"Unknown writer event kind {kind!r}"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class TransformedSsml:
    ssml_string: str
    synthesizable_text: str


def _is_empty(tag: Tag) -> bool:
    return not tag.children and tag.span.is_empty and not tag.original_text


def _start(tag: Tag) -> int:
    return 0 if tag.original_text is not None else tag.span.start


def iter_writer_events(document: Document) -> Iterator[WriterEvent]:
    """Yield the writer events for ``document`` in document order."""
    text = document.get_text()
    root = document.root
    if _is_empty(root):
        yield WriterEvent(EMPTY, root)
        return

    yield WriterEvent(OPEN, root)
    # Frames are (tag, next child position, position reached so far). The
    # position indexes the extracted text, or the tag's own original_text
    # when it has one.
    stack = [(root, 0, _start(root))]
    while stack:
        tag, child_pos, pos = stack.pop()
        literal = tag.original_text
        if child_pos < len(tag.children):
            child = tag.children[child_pos]
            if literal is None:
                if child.span.start > pos:
                    yield WriterEvent(TEXT, text=text[pos : child.span.start])
                resume = child.span.end
            else:
                if child.literal_offset > pos:
                    yield WriterEvent(TEXT, tag, literal[pos : child.literal_offset], "")
                resume = child.literal_offset + len(child.original_text or "")
            stack.append((tag, child_pos + 1, resume))
            if _is_empty(child):
                yield WriterEvent(EMPTY, child)
                continue
            yield WriterEvent(OPEN, child)
            stack.append((child, 0, _start(child)))
            continue
        if literal is None:
            if tag.span.end > pos:
                yield WriterEvent(TEXT, text=text[pos : tag.span.end])
        elif not tag.children:
            yield WriterEvent(TEXT, tag, literal, document.text_of(tag))
        elif len(literal) > pos:
            yield WriterEvent(TEXT, tag, literal[pos:], "")
        yield WriterEvent(CLOSE, tag)


def to_ssml(document: Document) -> str:
    return "".join(event.to_markup() for event in iter_writer_events(document))


def transform_ssml(document: Document, fn: Callable[[WriterEvent], WriterEvent | None]) -> TransformedSsml:
    """Write ``document`` through a filter-map over its writer events.

    ``fn`` returns the event to write (the same one or a replacement) or None
    to drop it. Dropping an open tag without its close tag is the caller's
    problem: the output would no longer parse.
    """
    markup: list[str] = []
    spoken: list[str] = []
    for event in iter_writer_events(document):
        new_event = fn(event)
        if new_event is None:
            continue
        markup.append(new_event.to_markup())
        if new_event.kind == TEXT:
            spoken.append(new_event.spoken_text)
    return TransformedSsml("".join(markup), "".join(spoken))
