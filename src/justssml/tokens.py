class Tag:
    __slots__ = ("attrs", "byte_offset", "char_offset", "column", "kind", "line", "name", "self_closing")

    START = 0
    END = 1

    def __init__(self, kind, name, attrs, self_closing=False, byte_offset=0, char_offset=0, line=1, column=1):
        self.kind = kind
        self.name = name
        self.attrs = attrs if attrs is not None else {}
        self.self_closing = bool(self_closing)
        self.byte_offset = byte_offset
        self.char_offset = char_offset
        self.line = line
        self.column = column

    @property
    def is_open(self):
        return self.kind == self.START and not self.self_closing

    @property
    def is_close(self):
        return self.kind == self.END

    @property
    def is_self_closing(self):
        return self.kind == self.START and self.self_closing

    def __repr__(self):
        attrs = " ".join(f"{name}={value!r}" for name, value in self.attrs.items())
        closing = " /" if self.self_closing else ""
        kind_str = "start" if self.kind == self.START else "end"
        return f"<{kind_str}:{self.name}{closing} {attrs}@{self.char_offset}>"


class CharacterTokens:
    __slots__ = ("byte_offset", "char_offset", "column", "data", "line")

    def __init__(self, data, byte_offset=0, char_offset=0, line=1, column=1):
        self.data = data
        self.byte_offset = byte_offset
        self.char_offset = char_offset
        self.line = line
        self.column = column

    def __repr__(self):
        return f"CharacterTokens({self.data!r}@{self.char_offset})"


class CommentToken:
    __slots__ = ("byte_offset", "char_offset", "column", "data", "line")

    def __init__(self, data, byte_offset=0, char_offset=0, line=1, column=1):
        self.data = data
        self.byte_offset = byte_offset
        self.char_offset = char_offset
        self.line = line
        self.column = column

    def __repr__(self):
        return f"CommentToken({self.data!r}@{self.char_offset})"
