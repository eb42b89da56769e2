"""Minimal dependency injection library.

This package provides a small dependency injection container binding classes,
protocols or named tokens to factories, with singleton or transient lifetimes.

Exports:
- `Container`: DI container with `singleton`, `transient`, `register` and `inject`.
- `Token` / `create_token`: named identifiers for dependencies without a class of their own.
- `Lifetime`: Enum for controlling object lifetimes (singleton or transient).
- `ResolutionError`: raised when a mandatory dependency is not registered.
- `default_container` and the module-level `inject`, `singleton`, `transient`,
  `register`: the process-wide container and its bound methods.
"""

from ._container import (
    Container,
    Lifetime,
    ResolutionError,
    default_container,
    inject,
    register,
    singleton,
    transient,
)
from ._token import Token, create_token


__all__ = [
    "Container",
    "Lifetime",
    "ResolutionError",
    "Token",
    "create_token",
    "default_container",
    "inject",
    "register",
    "singleton",
    "transient",
]
