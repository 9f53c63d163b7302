from __future__ import annotations


class TokenizerError(Exception):
    """
    Base for every condition that aborts a parse pass.
    The handler has already been told about it via onError()
    by the time this is raised.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.message} (line {self.line}, column {self.column})"


class ScannerError(TokenizerError):
    # The token source ran dry or handed back something that isn't a TokenKind.
    pass


class GrammarError(TokenizerError):
    # An expected token kind didn't show up where the tag grammar needs it.
    pass


class PushbackError(TokenizerError):
    # Pushback while the slot is already occupied; a parser bug, not bad input.
    pass
