"""Airlock scanner package.

Provides the detection engine: the pattern catalog (catalog.py), the default
detector definitions (definitions.py), the first-match-wins scanner
(regex_engine.py), and the fail-open transfer gate built on it (safe_scan.py).
"""
