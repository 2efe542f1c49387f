# range_core/errors.py
from __future__ import annotations


class RangeBuilderError(Exception):
    pass


class InvalidNameError(RangeBuilderError, ValueError):
    """Range name is empty or whitespace only."""

    def __init__(self, name: str) -> None:
        super().__init__(f"range name must not be blank: {name!r}")
        self.name = name


class NotFoundError(RangeBuilderError, KeyError):
    """No saved range under this name."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"saved range not found: {self.name!r}"
