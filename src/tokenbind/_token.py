from __future__ import annotations

from typing import Any, Generic, TypeVar


T = TypeVar("T")


class Token(Generic[T]):
    """Named identifier for dependencies that have no class of their own.

    The type parameter only informs type checkers about what `inject` returns.
    Tokens compare and hash by identity, so two tokens sharing a name are
    still different identifiers.
    """

    __slots__ = ("name",)

    name: str

    def __init__(self, name: str) -> None:
        object.__setattr__(self, "name", name)

    def __setattr__(self, key: str, value: Any) -> None:
        msg = f"Token attribute {key!r} is read-only"
        raise AttributeError(msg)

    def __repr__(self) -> str:
        return f"Token({self.name!r})"

    # copies must stay the same registry key
    def __copy__(self) -> Token[T]:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Token[T]:
        return self

    def __reduce__(self) -> Any:
        msg = f"Token {self.name!r} cannot be pickled: its identity does not survive a process boundary"
        raise TypeError(msg)


def create_token(name: str) -> Token[Any]:
    """Create a new token. Each call returns a distinct identifier."""
    return Token(name)


def identifier_name(identifier: object) -> str:
    if isinstance(identifier, Token):
        return identifier.name

    # classes, protocols and plain callables
    name = getattr(identifier, "__name__", None)
    if isinstance(name, str):
        return name

    return repr(identifier)
