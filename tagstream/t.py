# pylint: skip-file
# Module for holding types, for easy importing into the rest of the codebase
from __future__ import annotations

# The only things that should be available during runtime.
from typing import TYPE_CHECKING, cast, overload

from typing_extensions import Protocol

if TYPE_CHECKING:
    from typing import (
        Any,
        Callable,
        Generator,
        Iterable,
        NoReturn,
    )

    from typing_extensions import TypeAlias

    from .parser.nodes import TagView, TextView

    # Anything the views can write their span into.
    class WritableT(Protocol):
        def write(self, s: str, /) -> Any: ...

    EventT: TypeAlias = "TextView | TagView"

    # (message, line, column)
    ErrorReporterT: TypeAlias = Callable[[str, int, int], None]
