from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .. import t


class TagKind(Enum):
    OPEN = "open"
    CLOSE = "close"
    EMPTY = "empty"


@dataclass(frozen=True)
class Attribute:
    name: str
    # None for valueless attributes, like <input disabled>
    value: str | None


@dataclass(frozen=True)
class SpanView:
    # A stretch of the original input.
    # The text isn't sliced out until someone asks for it.
    buffer: str = field(repr=False)
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def text(self) -> str:
        return self.buffer[self.offset : self.end]

    def writeTo(self, out: t.WritableT) -> None:
        out.write(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class TextView(SpanView):
    pass


@dataclass(frozen=True)
class TagView(SpanView):
    """
    One <...> occurrence the handler asked about.
    The span covers the whole tag, delimiters included.
    Attributes keep their source order and their source spelling;
    lookups by name ignore case.
    """

    kind: TagKind
    name: str
    attributes: tuple[Attribute, ...] = ()

    @property
    def attributeCount(self) -> int:
        return len(self.attributes)

    def getAttributeName(self, index: int) -> str:
        return self.attributes[index].name

    @t.overload
    def getAttributeValue(self, key: int) -> str | None: ...

    @t.overload
    def getAttributeValue(self, key: str) -> str | None: ...

    def getAttributeValue(self, key: int | str) -> str | None:
        if isinstance(key, int):
            return self.attributes[key].value
        key = key.lower()
        for attr in self.attributes:
            if attr.name.lower() == key:
                return attr.value
        return None

    def hasAttribute(self, name: str) -> bool:
        # Valueless attributes look exactly like missing ones here.
        return self.getAttributeValue(name) is not None
