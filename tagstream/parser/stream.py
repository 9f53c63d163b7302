from __future__ import annotations

from dataclasses import dataclass

from .. import t
from .errors import PushbackError, ScannerError
from .tokens import Pushback, TokenKind

if t.TYPE_CHECKING:
    from .lexer import TokenSource


@dataclass
class ParseConfig:
    # Line number of the first line of the input, for error locations.
    startLine: int = 1
    # Appended to locations ("3:10 of index.html").
    context: str | None = None
    # Fold comments, CDATA, <!...> and <?...> into text instead of lexing them as tags.
    declarationsAsText: bool = True


DEFAULT_PARSE_CONFIG = ParseConfig()


class TokenStream:
    """
    Wraps a TokenSource with one token of lookahead.

    The grammar takes tokens, and can hand back the one it just took;
    that token is redelivered by the next takeNext().
    At most one token is ever held back.
    """

    def __init__(self, source: TokenSource) -> None:
        self.source = source
        self._pushback: Pushback | None = None

    @property
    def hasPushback(self) -> bool:
        return self._pushback is not None

    def takeNext(self) -> TokenKind:
        if self._pushback is not None:
            kind = self._pushback.kind
            self._pushback = None
            return kind
        kind = self.source.nextTokenKind()
        if not isinstance(kind, TokenKind):
            msg = f"Token source produced {kind!r} instead of a token."
            raise ScannerError(msg, self.line(), self.column())
        return kind

    def pushBack(self, kind: TokenKind) -> None:
        if self._pushback is not None:
            msg = f"Cannot push back {kind!r}, already holding {self._pushback.kind!r}."
            raise PushbackError(msg, self.line(), self.column())
        self._pushback = Pushback(kind, self.source.currentMatchedText())

    def peek(self) -> TokenKind:
        kind = self.takeNext()
        self.pushBack(kind)
        return kind

    def skipWhitespace(self) -> None:
        while True:
            kind = self.takeNext()
            if kind != TokenKind.WHITESPACE:
                self.pushBack(kind)
                break

    def currentText(self) -> str:
        if self._pushback is not None and self._pushback.text is not None:
            return self._pushback.text
        return self.source.currentMatchedText()

    # A held-back token is always the source's latest match,
    # so positions can come straight from the source.

    def position(self) -> int:
        return self.source.currentPosition()

    def length(self) -> int:
        return self.source.currentLength()

    def end(self) -> int:
        return self.position() + self.length()

    def line(self) -> int:
        return self.source.currentLine()

    def column(self) -> int:
        return self.source.currentColumn()

    def loc(self) -> str:
        return self.source.loc()
