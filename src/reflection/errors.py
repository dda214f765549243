"""Reflection errors."""

from __future__ import annotations

from .kinds import Kind


class ReflectionError(RuntimeError):
    """Base error for handle and descriptor accessors."""


class KindMismatchError(ReflectionError):
    def __init__(self, *, method: str, kind: Kind) -> None:
        self.method = method
        self.kind = kind
        super().__init__(f"{method} called on {kind.label} value")


class SealedValueError(ReflectionError):
    """Raised when generic conversion is requested on a sealed handle."""

    def __init__(self, *, method: str) -> None:
        self.method = method
        super().__init__(f"{method}: cannot return value obtained through a sealed path")


class InvalidValueError(ReflectionError):
    """Raised when an accessor needs data from the invalid handle."""

    def __init__(self, *, method: str) -> None:
        self.method = method
        super().__init__(f"{method} called on invalid value")
