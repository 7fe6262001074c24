import re

from .entities import EntityDecodeError, decode_entities_in_text
from .errors import MalformedMarkup
from .tokens import CharacterTokens, CommentToken, Tag

_WHITESPACE = " \t\r\n"
_NAME_TERMINATORS = " \t\r\n/>=\"'<&"
_NAME_TERMINATOR_PATTERN = re.compile(f"[{re.escape(_NAME_TERMINATORS)}]")
_NAME_PATTERN = re.compile(r"(?:[^\W\d]|:)[-.\w:\u00b7]*\Z")
_ATTR_WHITESPACE_TABLE = str.maketrans({"\t": " ", "\n": " ", "\r": " "})


def scan(markup):
    """Lazily scan ``markup`` into tokens.

    The returned iterator is single-use; call ``scan`` again to restart.
    """
    return iter(Scanner(markup))


class Scanner:
    DATA = 0
    TAG_OPEN = 1
    END_TAG_OPEN = 2
    TAG_NAME = 3
    BEFORE_ATTRIBUTE_NAME = 4
    ATTRIBUTE_NAME = 5
    AFTER_ATTRIBUTE_NAME = 6
    BEFORE_ATTRIBUTE_VALUE = 7
    ATTRIBUTE_VALUE_DOUBLE = 8
    ATTRIBUTE_VALUE_SINGLE = 9
    AFTER_ATTRIBUTE_VALUE = 10
    SELF_CLOSING_START_TAG = 11
    END_TAG_NAME = 12
    MARKUP_DECLARATION_OPEN = 13
    COMMENT = 14
    CDATA_SECTION = 15
    PROCESSING_INSTRUCTION = 16
    DOCTYPE = 17

    __slots__ = (
        "_byte_mark",
        "_byte_mark_pos",
        "_line_mark",
        "_line_mark_pos",
        "_line_start",
        "buffer",
        "current_attr_name",
        "current_tag_attrs",
        "current_tag_kind",
        "current_tag_name",
        "length",
        "pending",
        "pos",
        "state",
        "tag_start",
    )

    def __init__(self, markup):
        if markup and markup[0] == "\ufeff":
            markup = markup[1:]
        self.buffer = markup or ""
        self.length = len(self.buffer)
        self.pos = 0
        self.state = self.DATA
        self.pending = []
        self.tag_start = 0
        self.current_tag_kind = Tag.START
        self.current_tag_name = ""
        self.current_tag_attrs = {}
        self.current_attr_name = ""
        self._byte_mark = 0
        self._byte_mark_pos = 0
        self._line_mark = 1
        self._line_mark_pos = 0
        self._line_start = 0

    def __iter__(self):
        while True:
            state = self.state
            if state == self.DATA:
                done = self._state_data()
            elif state == self.TAG_OPEN:
                done = self._state_tag_open()
            elif state == self.END_TAG_OPEN:
                done = self._state_end_tag_open()
            elif state == self.TAG_NAME:
                done = self._state_tag_name()
            elif state == self.BEFORE_ATTRIBUTE_NAME:
                done = self._state_before_attribute_name()
            elif state == self.ATTRIBUTE_NAME:
                done = self._state_attribute_name()
            elif state == self.AFTER_ATTRIBUTE_NAME:
                done = self._state_after_attribute_name()
            elif state == self.BEFORE_ATTRIBUTE_VALUE:
                done = self._state_before_attribute_value()
            elif state == self.ATTRIBUTE_VALUE_DOUBLE:
                done = self._state_attribute_value('"')
            elif state == self.ATTRIBUTE_VALUE_SINGLE:
                done = self._state_attribute_value("'")
            elif state == self.AFTER_ATTRIBUTE_VALUE:
                done = self._state_after_attribute_value()
            elif state == self.SELF_CLOSING_START_TAG:
                done = self._state_self_closing_start_tag()
            elif state == self.END_TAG_NAME:
                done = self._state_end_tag_name()
            elif state == self.MARKUP_DECLARATION_OPEN:
                done = self._state_markup_declaration_open()
            elif state == self.COMMENT:
                done = self._state_comment()
            elif state == self.CDATA_SECTION:
                done = self._state_cdata_section()
            elif state == self.PROCESSING_INSTRUCTION:
                done = self._state_processing_instruction()
            elif state == self.DOCTYPE:
                done = self._state_doctype()
            else:
                msg = f"Unknown scanner state {state}"
                raise RuntimeError(msg)

            if self.pending:
                tokens = self.pending
                self.pending = []
                yield from tokens
            if done:
                return

    # ---------------------
    # Position bookkeeping
    # ---------------------

    def _location(self, pos):
        """Return (byte_offset, line, column) for a character index."""
        buffer = self.buffer
        if pos < self._byte_mark_pos:
            self._byte_mark = 0
            self._byte_mark_pos = 0
            self._line_mark = 1
            self._line_mark_pos = 0
            self._line_start = 0
        self._byte_mark += len(buffer[self._byte_mark_pos : pos].encode("utf-8", "surrogatepass"))
        self._byte_mark_pos = pos
        newline = buffer.rfind("\n", self._line_mark_pos, pos)
        if newline != -1:
            self._line_mark += buffer.count("\n", self._line_mark_pos, pos)
            self._line_start = newline + 1
        self._line_mark_pos = pos
        column = pos - self._line_start + 1
        return self._byte_mark, self._line_mark, column

    def _error(self, message, pos=None):
        if pos is None:
            pos = self.pos
        pos = min(pos, self.length)
        byte_offset, line, column = self._location(pos)
        return MalformedMarkup(message, byte_offset=byte_offset, char_offset=pos, line=line, column=column)

    def _peek_char(self, offset=0):
        peek_pos = self.pos + offset
        if peek_pos < self.length:
            return self.buffer[peek_pos]
        return None

    def _get_char(self):
        if self.pos >= self.length:
            return None
        c = self.buffer[self.pos]
        self.pos += 1
        return c

    def _skip_whitespace(self):
        buffer = self.buffer
        pos = self.pos
        while pos < self.length and buffer[pos] in _WHITESPACE:
            pos += 1
        self.pos = pos

    def _read_name(self, what):
        match = _NAME_TERMINATOR_PATTERN.search(self.buffer, self.pos)
        if match is None:
            raise self._error(f"EOF in {what}", self.tag_start)
        name = self.buffer[self.pos : match.start()]
        if not _NAME_PATTERN.match(name):
            raise self._error(f"Invalid {what} {name!r}", self.pos)
        self.pos = match.start()
        return name

    def _decode(self, raw, start):
        try:
            return decode_entities_in_text(raw)
        except EntityDecodeError as exc:
            raise self._error(str(exc), start + exc.offset) from None

    # ---------------------
    # Emitters
    # ---------------------

    def _emit_text(self, data, start):
        byte_offset, line, column = self._location(start)
        self.pending.append(CharacterTokens(data, byte_offset, start, line, column))

    def _emit_comment(self, data, start):
        byte_offset, line, column = self._location(start)
        self.pending.append(CommentToken(data, byte_offset, start, line, column))

    def _start_tag(self, kind):
        self.current_tag_kind = kind
        self.current_tag_name = ""
        self.current_tag_attrs = {}
        self.current_attr_name = ""

    def _emit_current_tag(self, self_closing=False):
        byte_offset, line, column = self._location(self.tag_start)
        self.pending.append(
            Tag(
                self.current_tag_kind,
                self.current_tag_name,
                self.current_tag_attrs,
                self_closing,
                byte_offset,
                self.tag_start,
                line,
                column,
            )
        )
        self.state = self.DATA

    # ---------------------
    # State handlers
    # ---------------------

    def _state_data(self):
        start = self.pos
        lt = self.buffer.find("<", start)
        end = self.length if lt == -1 else lt
        if end > start:
            self._emit_text(self._decode(self.buffer[start:end], start), start)
        if lt == -1:
            self.pos = self.length
            return True
        self.tag_start = lt
        self.pos = lt + 1
        self.state = self.TAG_OPEN
        return False

    def _state_tag_open(self):
        c = self._peek_char()
        if c is None:
            raise self._error("EOF after <", self.tag_start)
        if c == "!":
            self.pos += 1
            self.state = self.MARKUP_DECLARATION_OPEN
            return False
        if c == "/":
            self.pos += 1
            self.state = self.END_TAG_OPEN
            return False
        if c == "?":
            self.pos += 1
            self.state = self.PROCESSING_INSTRUCTION
            return False
        if c.isalpha() or c in "_:":
            self._start_tag(Tag.START)
            self.state = self.TAG_NAME
            return False
        raise self._error("Invalid first character of tag name")

    def _state_tag_name(self):
        self.current_tag_name = self._read_name("tag name")
        c = self._get_char()
        if c in _WHITESPACE:
            self.state = self.BEFORE_ATTRIBUTE_NAME
            return False
        if c == "/":
            self.state = self.SELF_CLOSING_START_TAG
            return False
        if c == ">":
            self._emit_current_tag()
            return False
        raise self._error(f"Unexpected {c!r} in tag name", self.pos - 1)

    def _state_before_attribute_name(self):
        self._skip_whitespace()
        c = self._peek_char()
        if c is None:
            raise self._error("EOF in tag", self.tag_start)
        if c == "/":
            self.pos += 1
            self.state = self.SELF_CLOSING_START_TAG
            return False
        if c == ">":
            self.pos += 1
            self._emit_current_tag()
            return False
        if c.isalpha() or c in "_:":
            self.state = self.ATTRIBUTE_NAME
            return False
        raise self._error(f"Unexpected {c!r} before attribute name")

    def _state_attribute_name(self):
        name_start = self.pos
        name = self._read_name("attribute name")
        if name in self.current_tag_attrs:
            raise self._error(f"Duplicate attribute {name!r}", name_start)
        self.current_attr_name = name
        self.state = self.AFTER_ATTRIBUTE_NAME
        return False

    def _state_after_attribute_name(self):
        self._skip_whitespace()
        c = self._get_char()
        if c is None:
            raise self._error("EOF in tag", self.tag_start)
        if c != "=":
            raise self._error(f"Attribute {self.current_attr_name!r} has no value", self.pos - 1)
        self.state = self.BEFORE_ATTRIBUTE_VALUE
        return False

    def _state_before_attribute_value(self):
        self._skip_whitespace()
        c = self._get_char()
        if c is None:
            raise self._error("EOF in tag", self.tag_start)
        if c == '"':
            self.state = self.ATTRIBUTE_VALUE_DOUBLE
            return False
        if c == "'":
            self.state = self.ATTRIBUTE_VALUE_SINGLE
            return False
        raise self._error(f"Unquoted value for attribute {self.current_attr_name!r}", self.pos - 1)

    def _state_attribute_value(self, quote):
        start = self.pos
        end = self.buffer.find(quote, start)
        if end == -1:
            raise self._error("EOF in attribute value", start - 1)
        raw = self.buffer[start:end]
        lt = raw.find("<")
        if lt != -1:
            raise self._error("'<' is not allowed in attribute values", start + lt)
        value = self._decode(raw.translate(_ATTR_WHITESPACE_TABLE), start)
        self.current_tag_attrs[self.current_attr_name] = value
        self.pos = end + 1
        self.state = self.AFTER_ATTRIBUTE_VALUE
        return False

    def _state_after_attribute_value(self):
        c = self._peek_char()
        if c is None:
            raise self._error("EOF in tag", self.tag_start)
        if c in _WHITESPACE:
            self.state = self.BEFORE_ATTRIBUTE_NAME
            return False
        if c == "/":
            self.pos += 1
            self.state = self.SELF_CLOSING_START_TAG
            return False
        if c == ">":
            self.pos += 1
            self._emit_current_tag()
            return False
        raise self._error("Missing whitespace between attributes")

    def _state_self_closing_start_tag(self):
        c = self._get_char()
        if c is None:
            raise self._error("EOF in tag", self.tag_start)
        if c != ">":
            raise self._error("Expected '>' after '/' in tag", self.pos - 1)
        self._emit_current_tag(self_closing=True)
        return False

    def _state_end_tag_open(self):
        c = self._peek_char()
        if c is None:
            raise self._error("EOF after </", self.tag_start)
        if c.isalpha() or c in "_:":
            self._start_tag(Tag.END)
            self.current_tag_name = self._read_name("tag name")
            self.state = self.END_TAG_NAME
            return False
        if c == ">":
            raise self._error("Empty end tag", self.tag_start)
        raise self._error("Invalid character after </")

    def _state_end_tag_name(self):
        self._skip_whitespace()
        c = self._get_char()
        if c is None:
            raise self._error("EOF in end tag", self.tag_start)
        if c != ">":
            raise self._error(f"Unexpected {c!r} in end tag", self.pos - 1)
        self._emit_current_tag()
        return False

    def _state_markup_declaration_open(self):
        buffer = self.buffer
        if buffer.startswith("--", self.pos):
            self.pos += 2
            self.state = self.COMMENT
            return False
        if buffer.startswith("[CDATA[", self.pos):
            self.pos += 7
            self.state = self.CDATA_SECTION
            return False
        if buffer.startswith("DOCTYPE", self.pos):
            self.pos += 7
            self.state = self.DOCTYPE
            return False
        raise self._error("Invalid markup declaration", self.tag_start)

    def _state_comment(self):
        start = self.pos
        end = self.buffer.find("-->", start)
        if end == -1:
            raise self._error("EOF in comment", self.tag_start)
        data = self.buffer[start:end]
        double_dash = data.find("--")
        if double_dash != -1 or data.endswith("-"):
            raise self._error("'--' is not allowed inside comments", start + (double_dash if double_dash != -1 else len(data) - 1))
        self._emit_comment(data, self.tag_start)
        self.pos = end + 3
        self.state = self.DATA
        return False

    def _state_cdata_section(self):
        start = self.pos
        end = self.buffer.find("]]>", start)
        if end == -1:
            raise self._error("EOF in CDATA section", self.tag_start)
        if end > start:
            self._emit_text(self.buffer[start:end], self.tag_start)
        self.pos = end + 3
        self.state = self.DATA
        return False

    def _state_processing_instruction(self):
        # The XML declaration and any other processing instruction carry nothing to synthesize.
        end = self.buffer.find("?>", self.pos)
        if end == -1:
            raise self._error("EOF in processing instruction", self.tag_start)
        self.pos = end + 2
        self.state = self.DATA
        return False

    def _state_doctype(self):
        buffer = self.buffer
        pos = self.pos
        quote = None
        while pos < self.length:
            c = buffer[pos]
            if quote is not None:
                if c == quote:
                    quote = None
            elif c in "\"'":
                quote = c
            elif c == "[":
                raise self._error("DOCTYPE internal subsets are not supported", pos)
            elif c == ">":
                self.pos = pos + 1
                self.state = self.DATA
                return False
            pos += 1
        raise self._error("EOF in DOCTYPE", self.tag_start)
