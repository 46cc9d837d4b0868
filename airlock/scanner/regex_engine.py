"""Regex engine: first-match-wins classification of text against a catalog.

Provides:
  - ``scan()``:                classify one text value; ``Finding`` or ``None``.
  - ``list_detector_names()``: display names of the catalog, in catalog order.

INVARIANTS:
  - Synchronous and pure: no I/O, no logging, no shared-state mutation.
  - Never raises for any input. ``None``, ``""`` and non-``str`` values are
    "no finding".
  - The returned Finding holds metadata only, never matched text.
  - Safe to call concurrently: compiled re2 patterns are stateless and a
    frozen catalog is read-only.

IMPORT RULES:
  - ``import re2`` ONLY. ``import re`` is PROHIBITED in any airlock/scanner/ file.
"""

from __future__ import annotations

from typing import Any, Optional

import re2  # noqa: F401  google-re2, NOT stdlib re

from airlock.models.scan import Detector, Finding
from airlock.scanner.catalog import Catalog
from airlock.scanner.definitions import DEFAULT_CATALOG


def count_matches(detector: Detector, text: str) -> int:
    """Count non-overlapping, non-empty matches of ``detector`` in ``text``.

    Zero-width matches are not occurrences of sensitive content and are ignored.
    """
    return sum(1 for m in detector.regex.finditer(text) if m.end() > m.start())


def _scan_catalog(text: str, catalog: Catalog) -> Optional[Finding]:
    for detector in catalog.all():
        count = count_matches(detector, text)
        if count:
            return Finding.from_detector(detector, count)
    return None


def scan(text: Any, catalog: Optional[Catalog] = None) -> Optional[Finding]:
    """Classify ``text`` against ``catalog`` (``DEFAULT_CATALOG`` when omitted).

    Detectors are evaluated in catalog order. The first one with at least one
    match produces the Finding and later Detectors are not evaluated.

    Args:
        text:    Text to classify. Anything that is not a non-empty ``str`` is clean.
        catalog: Alternate or extended catalog.

    Returns:
        ``Finding`` for the first matching Detector, or ``None`` when nothing matches.
    """
    if not text or not isinstance(text, str):
        return None
    if catalog is None:
        catalog = DEFAULT_CATALOG

    try:
        return _scan_catalog(text, catalog)
    except UnicodeEncodeError:
        # Lone surrogates (e.g. from a clipboard) cannot be handed to re2 as UTF-8.
        cleaned = text.encode("utf-8", "replace").decode("utf-8")
        return _scan_catalog(cleaned, catalog)


def list_detector_names(catalog: Optional[Catalog] = None) -> list[str]:
    """Display names of every Detector, in catalog order."""
    if catalog is None:
        catalog = DEFAULT_CATALOG
    return [d.display_name for d in catalog.all()]
