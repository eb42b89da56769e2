from __future__ import annotations

import inspect
import logging
import threading
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Literal,
    Protocol,
    TypeVar,
    cast,
    overload,
)

from ._token import Token, create_token, identifier_name


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    T = TypeVar("T")

    # Callable covers protocols and abstract classes, which type[T] rejects
    Identifier = Token[T] | type[T] | Callable[..., T]


class Lifetime(Enum):
    SINGLETON = "singleton"
    TRANSIENT = "transient"


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Any = _Missing()


class _LazyName:
    """Defers `identifier_name` until a log record is actually formatted."""

    __slots__ = ("identifier",)

    def __init__(self, identifier: object) -> None:
        self.identifier = identifier

    def __str__(self) -> str:
        return identifier_name(self.identifier)


@dataclass
class Entry:
    factory: Callable[[], object]
    lifetime: Lifetime
    instance: object = field(default=_MISSING)  # cached singleton

    @property
    def singleton(self) -> bool:
        return self.lifetime is Lifetime.SINGLETON

    @property
    def has_instance(self) -> bool:
        return self.instance is not _MISSING


class ResolutionError(RuntimeError):
    def __init__(self, identifier: object) -> None:
        self.identifier = identifier
        super().__init__(f"Dependency with name '{identifier_name(identifier)}' could not be resolved.")


class Container:
    """Minimal DI container.

    - register classes or factories under a class, protocol or `Token`
    - lifetimes: singleton (lazy, cached) / transient (new per inject)
    - registration is chainable and last write wins.
    """

    def __init__(self) -> None:
        self._registry: dict[Any, Entry] = {}
        self._lock = threading.RLock()

    create_token = staticmethod(create_token)

    def register(
        self,
        identifier: Identifier[T],
        factory: Callable[[], T] | None = None,
        *,
        lifetime: Lifetime = Lifetime.SINGLETON,
    ) -> Container:
        """Bind `identifier` to a factory with the given lifetime.

        Without a factory, `identifier` must be a concrete class; it is then
        instantiated with no arguments whenever the factory runs.
        Nothing is instantiated here.

        Example:
          container.register(Clock)
          container.register(DB_URL, lambda: "sqlite://", lifetime=Lifetime.SINGLETON)

        """
        if factory is None:
            self._validate_constructable(identifier)
            factory = cast("Callable[[], T]", identifier)
        elif not callable(factory):
            msg = f"Factory for '{identifier_name(identifier)}' must be callable, got {type(factory).__name__}"
            raise TypeError(msg)

        with self._lock:
            if identifier in self._registry:
                logger.debug("Replacing registration for '%s'", _LazyName(identifier))
            self._registry[identifier] = Entry(factory=factory, lifetime=lifetime)

        logger.debug("Registered '%s' as %s", _LazyName(identifier), lifetime.value)
        return self

    @overload
    def singleton(self, identifier: type[T]) -> Container: ...

    @overload
    def singleton(self, identifier: Identifier[T], factory: Callable[[], T]) -> Container: ...

    def singleton(self, identifier: Identifier[T], factory: Callable[[], T] | None = None) -> Container:
        """Register `identifier` so every inject returns one shared instance."""
        return self.register(identifier, factory, lifetime=Lifetime.SINGLETON)

    @overload
    def transient(self, identifier: type[T]) -> Container: ...

    @overload
    def transient(self, identifier: Identifier[T], factory: Callable[[], T]) -> Container: ...

    def transient(self, identifier: Identifier[T], factory: Callable[[], T] | None = None) -> Container:
        """Register `identifier` so every inject runs the factory again."""
        return self.register(identifier, factory, lifetime=Lifetime.TRANSIENT)

    @overload
    def inject(self, identifier: Identifier[T]) -> T: ...

    @overload
    def inject(self, identifier: Identifier[T], must: Literal[True]) -> T: ...

    @overload
    def inject(self, identifier: Identifier[T], must: Literal[False]) -> T | None: ...

    @overload
    def inject(self, identifier: Identifier[T], must: bool) -> T | None: ...

    def inject(self, identifier: Identifier[T], must: bool = True) -> T | None:
        """Resolve `identifier` to an instance.

        - singleton: factory runs on the first inject only, its result is cached.
        - transient: factory runs on every inject.
        - not registered: raise `ResolutionError`, or return None when `must` is False.

        The lookup, the factory call and the caching happen under the container
        lock, so concurrent injects of one singleton construct it once.
        """
        with self._lock:
            entry = self._registry.get(identifier)

            if entry is None:
                if must:
                    logger.debug("No registration found for '%s'", _LazyName(identifier))
                    raise ResolutionError(identifier)
                return None

            if not entry.singleton:
                return cast("T", entry.factory())

            if not entry.has_instance:
                entry.instance = entry.factory()
                logger.debug("Created singleton '%s'", _LazyName(identifier))

            return cast("T", entry.instance)

    def is_registered(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._registry

    def __contains__(self, identifier: object) -> bool:
        return self.is_registered(identifier)

    def _is_protocol(self, tp: type) -> bool:
        """Detect whether 'tp' is a typing.Protocol subclass (safe)."""
        raise NotImplementedError

    def _validate_constructable(self, identifier: object) -> None:
        """Reject identifiers that cannot be called with no arguments to build an instance.

        Tokens, protocols and abstract classes only mark a dependency; they need an
        explicit factory.
        """
        if not inspect.isclass(identifier):
            msg = f"'{identifier_name(identifier)}' is not a class; register it with a factory"
            raise ValueError(msg)

        if self._is_protocol(identifier):
            msg = f"Protocol '{identifier.__name__}' cannot be instantiated; register it with a factory"
            raise ValueError(msg)

        if inspect.isabstract(identifier):
            msg = f"Abstract class '{identifier.__name__}' cannot be instantiated; register it with a factory"
            raise ValueError(msg)


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def _is_protocol_3_13(self: Any, tp: type) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

    Container._is_protocol = _is_protocol_3_13  # type: ignore[method-assign] # noqa: SLF001
else:

    def _is_protocol_legacy(self: Any, tp: type) -> bool:
        """Detect whether 'tp' is a typing.Protocol subclass (safe)."""
        return inspect.isclass(tp) and bool(getattr(tp, "_is_protocol", False)) and issubclass(tp, cast("type", Protocol))

    Container._is_protocol = _is_protocol_legacy  # type: ignore[method-assign] # noqa: SLF001


default_container = Container()
"""Process-wide container behind the module-level `inject`, `singleton`, `transient` and `register`."""

inject = default_container.inject
singleton = default_container.singleton
transient = default_container.transient
register = default_container.register
