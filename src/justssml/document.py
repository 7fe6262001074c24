"""The parsed document model.

A ``Document`` owns the extracted text and the root ``Tag``. Tags own their
children as tuples; the upward ``parent`` relation is a pre-order index into
``Document.tags()``, never a reference, so the tree has no cycles. Nothing
here can be mutated after parsing.
"""

from dataclasses import dataclass

from .elements import Custom, ElementKind, can_nest


@dataclass(frozen=True, slots=True, order=True)
class Span:
    """Half-open range ``[start, end)`` of code point indices into the extracted text."""

    start: int
    end: int

    def __len__(self):
        return self.end - self.start

    @property
    def is_empty(self):
        return self.start == self.end

    def contains(self, other):
        return self.start <= other.start and other.end <= self.end


@dataclass(frozen=True, slots=True)
class Tag:
    kind: ElementKind | Custom
    name: str
    attributes: object
    span: Span
    children: tuple = ()
    index: int = 0
    parent: int | None = None
    raw_attributes: tuple = ()
    # Literal child text of an excluded or expanded element.
    original_text: str | None = None
    # Where this tag starts inside its parent's original_text, when the parent has one.
    literal_offset: int | None = None

    def __repr__(self):
        return f"<Tag {self.name} #{self.index} [{self.span.start}:{self.span.end}]>"

    def iter(self):
        """Yield this tag and its descendants in document order."""
        stack = [self]
        while stack:
            tag = stack.pop()
            yield tag
            stack.extend(reversed(tag.children))


@dataclass(frozen=True, slots=True)
class EnterTag:
    index: int


@dataclass(frozen=True, slots=True)
class ExitTag:
    index: int


@dataclass(frozen=True, slots=True)
class TextRun:
    span: Span


class EventLog:
    """Restartable view of a document as enter/exit/text events.

    Every iteration walks the tag tree afresh; nothing is cached.
    """

    __slots__ = ("_document",)

    def __init__(self, document):
        self._document = document

    def __iter__(self):
        root = self._document.root
        yield EnterTag(root.index)
        # Each frame is (tag, next child position, text position reached so far).
        stack = [(root, 0, root.span.start)]
        while stack:
            tag, child_pos, pos = stack.pop()
            if child_pos < len(tag.children):
                child = tag.children[child_pos]
                if child.span.start > pos:
                    yield TextRun(Span(pos, child.span.start))
                stack.append((tag, child_pos + 1, child.span.end))
                yield EnterTag(child.index)
                stack.append((child, 0, child.span.start))
                continue
            if tag.span.end > pos:
                yield TextRun(Span(pos, tag.span.end))
            yield ExitTag(tag.index)

    def __repr__(self):
        return f"EventLog({self._document!r})"


class Document:
    __slots__ = ("_root", "_tags", "_text")

    def __init__(self, text, root, tags):
        self._text = text
        self._root = root
        self._tags = tuple(tags)

    def __eq__(self, other):
        if not isinstance(other, Document):
            return NotImplemented
        return self._text == other._text and self._root == other._root

    def __hash__(self):
        return hash((self._text, self._root.span, len(self._tags)))

    def __repr__(self):
        return f"<Document {len(self._text)} chars, {len(self._tags)} tags>"

    @property
    def root(self):
        return self._root

    @property
    def text(self):
        return self._text

    def get_text(self):
        return self._text

    def tags(self):
        """All tags in pre-order; ``tags()[i].index == i``."""
        return self._tags

    def events(self):
        return EventLog(self)

    @staticmethod
    def can_nest(parent, child):
        return can_nest(parent, child)

    def text_of(self, span_or_tag):
        """Return the extracted text covered by a span or a tag."""
        span = getattr(span_or_tag, "span", span_or_tag)
        return self._text[span.start : span.end]

    def tag_at(self, index):
        return self._tags[index]

    def parent_of(self, tag):
        if tag.parent is None:
            return None
        return self._tags[tag.parent]

    def ancestors(self, tag):
        """Ancestors of ``tag``, nearest first."""
        result = []
        parent = tag.parent
        while parent is not None:
            ancestor = self._tags[parent]
            result.append(ancestor)
            parent = ancestor.parent
        return tuple(result)

    def find_all(self, kind):
        """Tags of ``kind``: an ElementKind, a Custom, or a tag name."""
        if isinstance(kind, str):
            return tuple(tag for tag in self._tags if tag.name == kind or str(tag.kind) == kind)
        return tuple(tag for tag in self._tags if tag.kind == kind)

    def to_ssml(self):
        from .serialize import to_ssml

        return to_ssml(self)
