"""Catalog construction errors.

These are the only fatal conditions in the engine. They are raised while a
catalog is being built and propagate to the operator; ``scan()`` itself never
raises.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog construction failures."""


class DuplicateKeyError(CatalogError):
    """A Detector key collides with one already registered in the catalog."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Detector key {key!r} is already registered")


class InvalidPatternError(CatalogError):
    """A Detector pattern failed to compile under google-re2.

    Attributes:
        key:     Key of the offending Detector.
        pattern: The pattern source that was rejected.
        reason:  Compiler error text.
    """

    def __init__(self, key: str, pattern: str, reason: str) -> None:
        self.key = key
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Detector {key!r} has an invalid pattern: {reason}")


class CatalogFrozenError(CatalogError):
    """register() was called after the registration phase ended."""
