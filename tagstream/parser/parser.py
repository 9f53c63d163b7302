from __future__ import annotations

from .. import t
from .errors import GrammarError, TokenizerError
from .lexer import Lexer
from .nodes import Attribute, TagKind, TagView, TextView
from .stream import DEFAULT_PARSE_CONFIG, ParseConfig, TokenStream
from .tokens import TokenKind

if t.TYPE_CHECKING:
    from .handler import TokenHandler
    from .lexer import TokenSource


# Tokens an unquoted attribute value keeps absorbing,
# so href=/a/b=c comes out whole.
UNQUOTED_VALUE_TOKENS = (TokenKind.WORD, TokenKind.EQUALS, TokenKind.SLASH)


class Parser:
    """
    Looks for patterns of tokens in a TokenSource
    and turns them into calls on a TokenHandler.

    One Parser handles one buffer, in one pass.
    The first grammar violation is reported to the handler
    and then aborts the pass by raising;
    whatever was emitted before it stands.
    """

    def __init__(
        self,
        chars: str,
        handler: TokenHandler,
        config: ParseConfig = DEFAULT_PARSE_CONFIG,
        source: TokenSource | None = None,
    ) -> None:
        self._chars = chars
        self.handler = handler
        self.config = config
        if source is None:
            reportWarning = getattr(handler, "onWarning", handler.onError)
            source = Lexer(chars, config=config, reportError=reportWarning)
        self.tokens = TokenStream(source)
        # Reused for every tag; copied into the TagView on emission.
        self.attributes: list[Attribute] = []
        self.attributeBuffer: list[str] = []
        self._started = False

    def start(self) -> None:
        if self._started:
            msg = "A Parser only makes one pass; construct a new one for each parse."
            raise RuntimeError(msg)
        self._started = True
        try:
            self.parseDocument()
        except TokenizerError as e:
            self.handler.onError(e.message, e.line, e.column)
            raise

    def parseDocument(self) -> None:
        while True:
            token = self.tokens.takeNext()
            if token == TokenKind.END_OF_INPUT:
                return
            elif token == TokenKind.TEXT:
                self.parsedText(self.tokens.position(), self.tokens.length())
            elif token == TokenKind.LT:
                self.parseTag()
            else:
                self.fatal("Unexpected token from lexer, was expecting TEXT or LT")

    def parseTag(self) -> None:
        start = self.tokens.position()
        self.tokens.skipWhitespace()
        token = self.tokens.takeNext()
        kind = TagKind.OPEN

        if token == TokenKind.SLASH:
            kind = TagKind.CLOSE
            token = self.tokens.takeNext()

        if token == TokenKind.WORD:
            name = self.tokens.currentText()
            if self.handler.caresAboutTag(name):
                self.parseFullTag(kind, name, start)
            else:
                self.parseOpaqueTag(start)
        elif token == TokenKind.GT:
            # <>, < > or </>, which isn't a tag at all. Drop it.
            return
        else:
            self.fatal("Could not recognise tag")

    def parseOpaqueTag(self, start: int) -> None:
        # Nobody cares about this tag,
        # so just find its end and pass the whole thing on as text.
        while True:
            token = self.tokens.takeNext()
            if token == TokenKind.GT:
                self.parsedText(start, self.tokens.end() - start)
                return
            if token == TokenKind.END_OF_INPUT:
                self.fatal("Unterminated tag")

    def parseFullTag(self, kind: TagKind, name: str, start: int) -> None:
        while True:
            self.tokens.skipWhitespace()
            token = self.tokens.peek()
            if token in (TokenKind.SLASH, TokenKind.GT):
                break
            elif token == TokenKind.WORD:
                self.parseAttribute()
            else:
                self.fatal("Expected attribute or end of tag")

        token = self.tokens.takeNext()
        if token == TokenKind.SLASH:
            # </foo/> stays a close tag.
            if kind != TagKind.CLOSE:
                kind = TagKind.EMPTY
            token = self.tokens.takeNext()

        if token == TokenKind.GT:
            self.parsedTag(kind, name, start, self.tokens.end() - start)
        else:
            self.fatal("Expected end of tag")

    def parseAttribute(self) -> None:
        self.tokens.takeNext()
        attributeName = self.tokens.currentText()
        self.tokens.skipWhitespace()
        token = self.tokens.takeNext()

        if token == TokenKind.EQUALS:
            self.tokens.skipWhitespace()
            token = self.tokens.takeNext()
            if token == TokenKind.QUOTED:
                self.parsedAttribute(attributeName, self.tokens.currentText(), quoted=True)
            elif token in (TokenKind.WORD, TokenKind.SLASH):
                self.attributeBuffer.clear()
                self.attributeBuffer.append(self.tokens.currentText())
                while True:
                    token = self.tokens.takeNext()
                    if token in UNQUOTED_VALUE_TOKENS:
                        # TODO: <a x=c/> reads as x="c/" on an open tag, not an empty tag.
                        self.attributeBuffer.append(self.tokens.currentText())
                    else:
                        self.tokens.pushBack(token)
                        break
                self.parsedAttribute(attributeName, "".join(self.attributeBuffer))
            elif token == TokenKind.GT:
                # <a href=>: no value, and no attribute either.
                self.tokens.pushBack(token)
            else:
                self.fatal("Illegal attribute value")
        elif token in (TokenKind.SLASH, TokenKind.GT, TokenKind.WORD):
            # Valueless HTML-style attribute, like <input disabled>
            self.parsedAttribute(attributeName, None)
            self.tokens.pushBack(token)
        else:
            self.fatal("Illegal attribute name")

    def parsedText(self, position: int, length: int) -> None:
        self.handler.onText(TextView(buffer=self._chars, offset=position, length=length))

    def parsedTag(self, kind: TagKind, name: str, start: int, length: int) -> None:
        tag = TagView(
            buffer=self._chars,
            offset=start,
            length=length,
            kind=kind,
            name=name,
            attributes=tuple(self.attributes),
        )
        self.handler.onTag(tag)
        self.attributes.clear()

    def parsedAttribute(self, name: str, value: str | None, quoted: bool = False) -> None:
        if quoted and value is not None:
            value = value[1:-1]
        self.attributes.append(Attribute(name, value))

    def fatal(self, message: str) -> t.NoReturn:
        raise GrammarError(message, self.tokens.line(), self.tokens.column())
