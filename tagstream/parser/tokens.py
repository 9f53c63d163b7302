from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    SLASH = "slash"
    WHITESPACE = "whitespace"
    EQUALS = "equals"
    QUOTE = "quote"
    WORD = "word"
    TEXT = "text"
    QUOTED = "quoted"
    LT = "lt"
    GT = "gt"
    END_OF_INPUT = "end-of-input"

    def __repr__(self) -> str:
        return f"TokenKind.{self.name}"


@dataclass(frozen=True)
class Pushback:
    # A token taken from the source but handed back to the grammar.
    kind: TokenKind
    text: str | None
