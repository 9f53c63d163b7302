from __future__ import annotations

import bisect
import re

from .. import t
from .errors import ScannerError
from .stream import DEFAULT_PARSE_CONFIG, ParseConfig
from .tokens import TokenKind


class TokenSource(t.Protocol):
    """
    Anything that can feed the tag grammar:
    one TokenKind at a time, plus where the current match sits in the input.
    """

    def nextTokenKind(self) -> TokenKind: ...

    def currentMatchedText(self) -> str: ...

    def currentPosition(self) -> int: ...

    def currentLength(self) -> int: ...

    def currentLine(self) -> int: ...

    def currentColumn(self) -> int: ...

    def loc(self) -> str: ...


# Constructs that start with "<" but are never tags.
# Order matters: the more specific openers have to be tried first.
DECLARATIONS = (
    ("<!--", "-->", "comment"),
    ("<![CDATA[", "]]>", "CDATA section"),
    ("<!", ">", "declaration"),
    ("<?", ">", "processing instruction"),
)

TAG_TOKENS = re.compile(
    r"""
    (?P<whitespace>\s+)
    |(?P<quoted>"[^"]*"|'[^']*')
    |(?P<quote>["'])
    |(?P<slash>/)
    |(?P<equals>=)
    |(?P<lt><)
    |(?P<gt>>)
    |(?P<word>[^\s"'<>/=]+)
    """,
    re.VERBOSE,
)


class Lexer:
    """
    Splits a string into the primitive tokens the tag grammar works on.

    Outside of a tag, everything up to the next "<" is a single TEXT token
    (comments, CDATA and <!...>/<?...> declarations are folded into TEXT too).
    A "<" switches into tag mode, where the input is chopped into
    slashes, whitespace, equals signs, quoted strings, words and a closing ">".

    Problems that don't stop the scan (an unterminated comment, a stray quote)
    go to `reportError`; the grammar decides whether they're fatal.
    """

    def __init__(
        self,
        chars: str,
        config: ParseConfig = DEFAULT_PARSE_CONFIG,
        reportError: t.ErrorReporterT | None = None,
    ) -> None:
        self._chars = chars
        self._len = len(chars)
        self._lineBreaks: list[int] = []
        self.config = config
        self.reportError = reportError
        self._start = 0
        self._end = 0
        self._inTag = False
        self._exhausted = False
        for i, char in enumerate(chars):
            if char == "\n":
                self._lineBreaks.append(i)

    def __len__(self) -> int:
        return self._len

    def nextTokenKind(self) -> TokenKind:
        if self._exhausted:
            msg = "Asked for another token after the end of input."
            raise ScannerError(msg, self.currentLine(), self.currentColumn())
        start = self._end
        self._start = start
        if start >= self._len:
            self._exhausted = True
            return TokenKind.END_OF_INPUT
        if self._inTag:
            return self._lexTag(start)
        return self._lexData(start)

    def _lexData(self, start: int) -> TokenKind:
        chars = self._chars
        if chars.startswith("<", start):
            if self.config.declarationsAsText:
                for opener, closer, what in DECLARATIONS:
                    if not chars.startswith(opener, start):
                        continue
                    end = chars.find(closer, start + len(opener))
                    if end == -1:
                        self._report(f"Unterminated {what}; treating the rest of the input as text.")
                        return self._match(TokenKind.TEXT, self._len)
                    return self._match(TokenKind.TEXT, end + len(closer))
            self._inTag = True
            return self._match(TokenKind.LT, start + 1)
        end = chars.find("<", start)
        if end == -1:
            end = self._len
        return self._match(TokenKind.TEXT, end)

    def _lexTag(self, start: int) -> TokenKind:
        match = TAG_TOKENS.match(self._chars, start)
        # Every character is covered by one of the alternatives.
        assert match is not None and match.lastgroup is not None
        kind = TokenKind[match.lastgroup.upper()]
        if kind == TokenKind.GT:
            self._inTag = False
        elif kind == TokenKind.QUOTE:
            self._report(f"Unterminated quoted string starting with {match.group()}.")
        return self._match(kind, match.end())

    def _match(self, kind: TokenKind, end: int) -> TokenKind:
        self._end = end
        return kind

    def _report(self, message: str) -> None:
        if self.reportError is not None:
            self.reportError(message, self.currentLine(), self.currentColumn())

    def currentMatchedText(self) -> str:
        return self._chars[self._start : self._end]

    def currentPosition(self) -> int:
        return self._start

    def currentLength(self) -> int:
        return self._end - self._start

    def currentLine(self) -> int:
        return self.line(self._start)

    def currentColumn(self) -> int:
        return self.col(self._start)

    def line(self, index: int) -> int:
        # Zero-based line index
        lineIndex = bisect.bisect_left(self._lineBreaks, index)
        return lineIndex + self.config.startLine

    def col(self, index: int) -> int:
        lineIndex = bisect.bisect_left(self._lineBreaks, index)
        if lineIndex == 0:
            return index + 1
        startOfCol = self._lineBreaks[lineIndex - 1]
        return index - startOfCol

    def loc(self) -> str:
        rc = f"{self.currentLine()}:{self.currentColumn()}"
        if self.config.context is None:
            return rc
        return f"{rc} of {self.config.context}"
