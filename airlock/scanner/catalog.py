"""Pattern catalog: the ordered, validated set of Detectors used by a scan.

Lifecycle:
  1. Registration phase: ``register()`` compiles each Detector's pattern with
     google-re2 and appends it. A bad pattern or a duplicate key aborts with
     ``InvalidPatternError`` / ``DuplicateKeyError``.
  2. ``freeze()`` ends registration. From then on the catalog is read-only and
     can be shared freely across threads.

Catalog order is a priority order: ``scan()`` reports the first Detector that
matches, so more specific rules must be registered before broad ones.

IMPORT RULES:
  - ``import re2`` ONLY. ``import re`` is PROHIBITED in any airlock/scanner/ file.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, Iterator, Optional

import re2  # google-re2, NOT stdlib re

from airlock.models.scan import Detector
from airlock.scanner.errors import (
    CatalogFrozenError,
    DuplicateKeyError,
    InvalidPatternError,
)


def compile_detector(detector: Detector) -> Detector:
    """Return a copy of ``detector`` with its re2 pattern compiled.

    Raises:
        InvalidPatternError: the pattern is not a string or re2 rejects it.
    """
    if not isinstance(detector.pattern, str) or not detector.pattern:
        raise InvalidPatternError(
            detector.key, str(detector.pattern), "pattern must be a non-empty string"
        )
    try:
        regex = re2.compile(detector.pattern)
    except re2.error as exc:
        raise InvalidPatternError(detector.key, detector.pattern, str(exc)) from exc
    return dataclasses.replace(detector, regex=regex)


class Catalog:
    """Ordered collection of Detectors with unique keys.

    Usage:
        catalog = Catalog()
        catalog.register(Detector(key="ssn", ...))
        catalog.freeze()

        # or, in one step:
        catalog = Catalog.from_detectors([...])
    """

    def __init__(self) -> None:
        self._detectors: list[Detector] = []
        self._by_key: dict[str, Detector] = {}
        self._frozen = False

    @classmethod
    def from_detectors(cls, detectors: Iterable[Detector]) -> "Catalog":
        """Register every Detector in order, then freeze.

        Any failure propagates, so a partially valid catalog is never returned.
        """
        catalog = cls()
        for detector in detectors:
            catalog.register(detector)
        catalog.freeze()
        return catalog

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, detector: Detector) -> Detector:
        """Validate, compile and append ``detector``.

        Returns:
            The registered (compiled) Detector.

        Raises:
            CatalogFrozenError:  the catalog has already been frozen.
            DuplicateKeyError:   ``detector.key`` is already registered.
            InvalidPatternError: the pattern does not compile.
        """
        if self._frozen:
            raise CatalogFrozenError(
                f"Cannot register {detector.key!r}: catalog is frozen"
            )
        if detector.key in self._by_key:
            raise DuplicateKeyError(detector.key)

        compiled = compile_detector(detector)
        self._detectors.append(compiled)
        self._by_key[compiled.key] = compiled
        return compiled

    def freeze(self) -> "Catalog":
        """End the registration phase. Idempotent."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ── Read API ──────────────────────────────────────────────────────────────

    def all(self) -> tuple[Detector, ...]:
        """Detectors in registration order. Same order on every call."""
        return tuple(self._detectors)

    def keys(self) -> list[str]:
        return [d.key for d in self._detectors]

    def get(self, key: str) -> Optional[Detector]:
        return self._by_key.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[Detector]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._detectors)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"<Catalog {state} detectors={self.keys()!r}>"
