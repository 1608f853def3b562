from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import Instrumenter

_instrumenters: dict[str, type[Instrumenter]] = {}


def register(cls):
    """Class decorator: registers an Instrumenter subclass by its name."""
    _instrumenters[cls.name] = cls
    return cls


def get_instrumenter(name: str, **options) -> Instrumenter | None:
    cls = _instrumenters.get(name)
    if cls is None:
        return None
    return cls(**options)


def available_instrumenters() -> set[str]:
    return set(_instrumenters.keys())
