"""Character scanner that tells code apart from string literals and comments.

The scanner walks a text once, left to right. At every position it is in
exactly one mode:

    Normal                  ordinary SQL text
    InString(quote, triple) inside a '...', "...", `...` or triple-quoted literal
    InComment(marker)       inside a "# ", "--" or "/* */" comment

Only characters consumed in Normal mode are code; everything else is shielded
content. Unterminated strings and comments are not errors: the scanner simply
stays in that mode until the text runs out.
"""

from __future__ import annotations

from dataclasses import dataclass

_QUOTES = frozenset("'\"`")
_ESCAPE = "\\"

# First character of a comment marker -> the character that must follow it.
_COMMENT_OPENERS = {"#": " ", "-": "-", "/": "*"}


@dataclass(frozen=True)
class Normal:
    pass


@dataclass(frozen=True)
class InString:
    quote: str
    triple: bool = False


@dataclass(frozen=True)
class InComment:
    marker: str  # "#", "-" or "/"


ScanMode = Normal | InString | InComment

NORMAL = Normal()


class Scanner:
    """Stateful cursor over ``text``.

    With ``strings=False`` quote characters are treated as code; only comments
    are recognized. The classifier scans this way.
    """

    def __init__(self, text: str, *, strings: bool = True) -> None:
        self.text = text
        self.pos = 0
        self.mode: ScanMode = NORMAL
        self._strings = strings

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    @property
    def in_code(self) -> bool:
        return isinstance(self.mode, Normal)

    def _peek(self, offset: int) -> str | None:
        index = self.pos + offset
        if 0 <= index < len(self.text):
            return self.text[index]
        return None

    def advance(self) -> str | None:
        """Consume the next character, or marker, and return it if it is code.

        Returns None for shielded content, for quote and comment markers, and
        at end of text.
        """
        char = self._peek(0)
        if char is None:
            return None
        prev = self._peek(-1)
        nxt = self._peek(1)
        mode = self.mode

        if isinstance(mode, Normal):
            if self._strings and char in _QUOTES and prev != _ESCAPE:
                triple = nxt == char and self._peek(2) == char
                self.mode = InString(char, triple)
                self.pos += 3 if triple else 1
                return None
            if char in _COMMENT_OPENERS and nxt == _COMMENT_OPENERS[char]:
                self.mode = InComment(char)
                self.pos += 2
                return None
            self.pos += 1
            return char

        if isinstance(mode, InComment):
            if mode.marker == "/":
                if char == "*" and nxt == "/":
                    self.mode = NORMAL
                    self.pos += 2
                    return None
            elif char == "\n":
                self.mode = NORMAL
            self.pos += 1
            return None

        # InString: a lone quote inside a triple-quoted string is content.
        if char == mode.quote and prev != _ESCAPE:
            if not mode.triple:
                self.mode = NORMAL
                self.pos += 1
                return None
            if nxt == char and self._peek(2) == char:
                self.mode = NORMAL
                self.pos += 3
                return None
        self.pos += 1
        return None
