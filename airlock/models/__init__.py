"""Airlock models package.

Shared data contracts between the detection engine and its integrations:

  - scan.py  - Detector, Finding, Confidence, Action, GateDecision, DetectionEvent

Findings and events carry metadata only. No model in this package ever holds
the text that was scanned or the substrings that matched.
"""
