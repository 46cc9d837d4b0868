"""Airlock: sensitive-data detection for text leaving the user's control.

Public engine surface:

  - ``scan(text, catalog=None)``            -> ``Finding`` or ``None``
  - ``list_detector_names(catalog=None)``   -> display names in catalog order

Everything else (transfer gate, alerts, CLI) is built on those two calls.
"""

from airlock.models.scan import Confidence, Detector, Finding
from airlock.scanner.catalog import Catalog
from airlock.scanner.definitions import DEFAULT_CATALOG
from airlock.scanner.errors import (
    CatalogError,
    CatalogFrozenError,
    DuplicateKeyError,
    InvalidPatternError,
)
from airlock.scanner.regex_engine import list_detector_names, scan

__version__ = "1.0.0"

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogFrozenError",
    "Confidence",
    "DEFAULT_CATALOG",
    "Detector",
    "DuplicateKeyError",
    "Finding",
    "InvalidPatternError",
    "list_detector_names",
    "scan",
]
