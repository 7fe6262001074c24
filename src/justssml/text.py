class TextAccumulator:
    """Collects the extracted text and reports positions in code points.

    Markup whitespace is formatting, not content: runs of whitespace collapse
    to a single space, and a text run that starts or ends with whitespace
    keeps one separating space unless the text already ends with one.
    """

    __slots__ = ("_ends_in_whitespace", "_length", "_parts")

    def __init__(self):
        self._parts = []
        self._length = 0
        self._ends_in_whitespace = False

    @property
    def position(self):
        return self._length

    def __len__(self):
        return self._length

    def _push(self, text):
        if text:
            self._parts.append(text)
            self._length += len(text)
            self._ends_in_whitespace = text[-1].isspace()

    def separate(self):
        """Ensure the text ends with a word boundary, unless it is still empty."""
        if self._length and not self._ends_in_whitespace:
            self._push(" ")

    def append_text(self, text):
        """Append a literal text run with whitespace collapsing."""
        if not text:
            return
        words = text.split()
        if not words:
            self.separate()
            return
        if text[0].isspace():
            self.separate()
        self._push(" ".join(words))
        if text[-1].isspace():
            self._push(" ")

    def append_expansion(self, text):
        """Append text computed by an expansion; only its inner whitespace is normalised."""
        self._push(" ".join(text.split()))

    def getvalue(self):
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""
