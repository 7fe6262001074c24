from .attributes import EXPANSIONS, decode_attributes
from .document import Document, Span
from .document import Tag as DocumentTag
from .elements import TEXT_NODE, Custom, ElementKind, accepts_text, can_nest, element_kind
from .errors import InvalidNesting, MalformedMarkup, MismatchedClose, ParseError, UnterminatedElement
from .policy import DEFAULT_CONFIG
from .text import TextAccumulator
from .tokens import CharacterTokens, CommentToken, Tag

_XML_WHITESPACE = " \t\r\n"

# Elements whose text is never spoken, whatever they contain.
EXCLUDED_ELEMENTS = frozenset(
    {
        ElementKind.DESC,
        ElementKind.METADATA,
        ElementKind.META,
        ElementKind.LEXICON,
    }
)

# Opening one of these starts a new word even without whitespace in the markup.
SEPARATING_ELEMENTS = frozenset({ElementKind.P, ElementKind.S})

_NO_NAMESPACES = {"xml": "http://www.w3.org/XML/1998/namespace"}


def _is_all_whitespace(data):
    return not data.strip(_XML_WHITESPACE)


class OpenElement:
    """An element whose close tag has not been seen yet."""

    __slots__ = (
        "attributes",
        "capture",
        "captured",
        "children",
        "excluded",
        "expanding",
        "index",
        "kind",
        "literal_offset",
        "name",
        "namespaces",
        "parent",
        "raw_attributes",
        "start",
        "token",
    )

    def __init__(self, token, kind, attributes, index, parent, start, namespaces):
        self.token = token
        self.kind = kind
        self.name = token.name
        self.attributes = attributes
        self.raw_attributes = tuple(token.attrs.items())
        self.index = index
        self.parent = parent
        self.start = start
        self.namespaces = namespaces
        self.children = []
        self.excluded = False
        self.expanding = False
        # Literal text collected for excluded or expanded elements.
        self.capture = None
        self.captured = 0
        self.literal_offset = None

    def __repr__(self):
        return f"<OpenElement {self.name} #{self.index}@{self.start}>"


class TreeBuilder:
    """Validates the token stream against the SSML content model and builds the tag tree.

    Feed tokens to ``process_token`` and call ``finish`` for the Document.
    """

    __slots__ = ("config", "open_elements", "policy", "root", "tags", "text")

    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG
        self.policy = self.config.policy
        self.open_elements = []
        self.tags = []
        self.text = TextAccumulator()
        self.root = None

    def process_token(self, token):
        if isinstance(token, CharacterTokens):
            self._handle_characters(token)
        elif isinstance(token, CommentToken):
            return
        elif token.kind == Tag.START:
            self._handle_start_tag(token)
            if token.self_closing:
                self._close_current(token)
        else:
            self._handle_end_tag(token)

    def finish(self):
        if self.open_elements:
            self._check_root(self.open_elements[0])
            innermost = self.open_elements[-1]
            raise UnterminatedElement([element.name for element in self.open_elements]).locate(innermost.token)
        if self.root is None:
            msg = "document has no <speak> root element"
            raise MalformedMarkup(msg)
        return Document(self.text.getvalue(), self.root, self.tags)

    # ---------------------
    # Token handlers
    # ---------------------

    def _handle_characters(self, token):
        data = token.data
        if not self.open_elements:
            if not _is_all_whitespace(data):
                raise InvalidNesting(None, TEXT_NODE).locate(token)
            return

        current = self.open_elements[-1]
        if not accepts_text(current.kind) and not _is_all_whitespace(data):
            raise InvalidNesting(current.kind, TEXT_NODE).locate(token)

        for element in reversed(self.open_elements):
            if element.capture is None:
                break
            element.capture.append(data)
            element.captured += len(data)

        if current.excluded or current.expanding:
            return
        self.text.append_text(data)

    def _handle_start_tag(self, token):
        parent = self.open_elements[-1] if self.open_elements else None
        namespaces = self._namespaces_for(token, parent)
        kind = element_kind(token.name, self._namespace_of(token.name, namespaces))

        if parent is None:
            # A stray top-level element is reported when it closes, after any error inside it.
            if self.root is not None:
                raise InvalidNesting(None, kind).locate(token)
        elif not can_nest(parent.kind, kind):
            raise InvalidNesting(parent.kind, kind).locate(token)

        try:
            attributes = decode_attributes(kind, token.attrs)
        except ParseError as exc:
            exc.locate(token)
            raise

        excluded = (parent is not None and parent.excluded) or self._excludes_text(kind)
        expanding = not excluded and self.config.expand_substitutions and kind in EXPANSIONS

        if not excluded and kind in SEPARATING_ELEMENTS:
            self.text.separate()

        index = len(self.tags)
        self.tags.append(None)
        element = OpenElement(
            token,
            kind,
            attributes,
            index,
            None if parent is None else parent.index,
            self.text.position,
            namespaces,
        )
        element.excluded = excluded
        element.expanding = expanding
        if excluded or expanding:
            element.capture = []
        if parent is not None and parent.capture is not None:
            element.literal_offset = parent.captured
        self.open_elements.append(element)

    def _handle_end_tag(self, token):
        if not self.open_elements:
            raise MismatchedClose(None, token.name).locate(token)
        current = self.open_elements[-1]
        if current.name != token.name:
            raise MismatchedClose(current.name, token.name).locate(token)
        self._close_current(token)

    def _close_current(self, token):
        element = self.open_elements.pop()
        if not self.open_elements:
            self._check_root(element)
        original_text = None
        if element.capture is not None:
            original_text = "".join(element.capture)
        if element.expanding:
            self.text.append_expansion(EXPANSIONS[element.kind](element.attributes, original_text))

        tag = DocumentTag(
            kind=element.kind,
            name=element.name,
            attributes=element.attributes,
            span=Span(element.start, self.text.position),
            children=tuple(element.children),
            index=element.index,
            parent=element.parent,
            raw_attributes=element.raw_attributes,
            original_text=original_text,
            literal_offset=element.literal_offset,
        )
        self.tags[element.index] = tag
        if self.open_elements:
            self.open_elements[-1].children.append(tag)
        else:
            self.root = tag

    # ---------------------
    # Helpers
    # ---------------------

    @staticmethod
    def _check_root(element):
        if element.kind is not ElementKind.SPEAK:
            raise InvalidNesting(None, element.kind).locate(element.token)

    def _excludes_text(self, kind):
        if isinstance(kind, Custom):
            return not self.policy.is_synthesizable(kind.name)
        return kind in EXCLUDED_ELEMENTS

    @staticmethod
    def _namespaces_for(token, parent):
        inherited = _NO_NAMESPACES if parent is None else parent.namespaces
        declared = {}
        for name, value in token.attrs.items():
            if name == "xmlns":
                declared[""] = value
            elif name.startswith("xmlns:"):
                declared[name[6:]] = value
        if not declared:
            return inherited
        namespaces = dict(inherited)
        namespaces.update(declared)
        return namespaces

    @staticmethod
    def _namespace_of(name, namespaces):
        prefix, sep, _ = name.partition(":")
        if sep:
            return namespaces.get(prefix)
        return namespaces.get("") or None
