"""Detection data models: Detector, Finding, and the transfer-gate contracts.

Provides:
  - ``Confidence``:     str Enum separating structural detectors from broad heuristics.
  - ``Detector``:       frozen dataclass, one named rule of the pattern catalog.
  - ``Finding``:        frozen dataclass, metadata about the first matching Detector.
  - ``Action``:         str Enum, transfer gate decision (ALLOW / BLOCK).
  - ``DetectionEvent``: frozen dataclass relayed to a monitoring collaborator.
  - ``GateDecision``:   frozen dataclass returned by the transfer gate.

SAFETY CONTRACT:
  ``Finding``, ``DetectionEvent`` and ``GateDecision`` never hold the scanned text
  or any matched substring. ``to_dict()`` output is safe to log or transmit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from airlock.constants import DETECTION_EVENT_TYPE
from airlock.utils.ulid import generate_ulid


class Confidence(str, Enum):
    """How much a positive match from a Detector should be trusted.

    HIGH:      the pattern describes a specific structure (key prefix, PEM header,
               JWT shape, SSN layout).
    HEURISTIC: the pattern is a broad catch-all that also fires on hashes, random
               ids and similar high-entropy strings.

    Informational only. Confidence never affects catalog order or membership.
    """

    HIGH = "HIGH"
    HEURISTIC = "HEURISTIC"


class Action(str, Enum):
    """Transfer gate decision."""

    ALLOW = "ALLOW"
    BLOCK = "BLOCK"


# ─── Detector ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Detector:
    """A named rule pairing a matching pattern with human-readable metadata.

    Fields:
        key:          Stable identifier, unique within a catalog. Never shown to users.
        display_name: Human-readable label for user-facing messages.
        description:  What was found and why it matters.
        pattern:      google-re2 pattern source. Case-insensitivity is expressed
                      inline with ``(?i)``.
        confidence:   ``Confidence.HIGH`` unless the pattern is a broad heuristic.
        regex:        Compiled re2 pattern, attached by ``Catalog.register()``.
                      ``None`` until the Detector has been registered.

    Compiled re2 patterns keep no match cursor between calls, so a registered
    Detector can be shared by any number of concurrent scans.
    """

    key: str
    display_name: str
    description: str
    pattern: str
    confidence: Confidence = Confidence.HIGH
    regex: Any = field(default=None, compare=False, repr=False)

    @property
    def is_compiled(self) -> bool:
        return self.regex is not None


# ─── Finding ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Finding:
    """Result of a positive scan. Built fresh for every ``scan()`` call.

    Carries no back-reference to the Detector and no matched text, so it is
    safe to hand across threads, log, or serialize.
    """

    detector_key: str
    display_name: str
    description: str
    match_count: int
    confidence: Confidence = Confidence.HIGH

    @classmethod
    def from_detector(cls, detector: Detector, match_count: int) -> "Finding":
        return cls(
            detector_key=detector.key,
            display_name=detector.display_name,
            description=detector.description,
            match_count=match_count,
            confidence=detector.confidence,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "detector_key": self.detector_key,
            "display_name": self.display_name,
            "description": self.description,
            "match_count": self.match_count,
            "confidence": self.confidence.value,
        }


# ─── DetectionEvent ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DetectionEvent:
    """Metadata message relayed to a monitoring collaborator after a BLOCK.

    Fields:
        detector_key:  Key of the Detector that fired.
        display_name:  Display name of the Detector that fired.
        match_count:   Number of non-overlapping matches.
        text_length:   Length of the blocked text in characters (length only).
        context_id:    Page / window / session identifier supplied by the caller.
        event_type:    Always ``"SENSITIVE_DATA_DETECTED"``.
        event_id:      ULID, unique per event.
        timestamp:     UTC time the event was created.
    """

    detector_key: str
    display_name: str
    match_count: int
    text_length: int
    context_id: Optional[str] = None
    event_type: str = DETECTION_EVENT_TYPE
    event_id: str = field(default_factory=generate_ulid)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_finding(
        cls,
        finding: Finding,
        text_length: int,
        context_id: Optional[str] = None,
    ) -> "DetectionEvent":
        return cls(
            detector_key=finding.detector_key,
            display_name=finding.display_name,
            match_count=finding.match_count,
            text_length=text_length,
            context_id=context_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.event_type,
            "event_id": self.event_id,
            "detector_key": self.detector_key,
            "display_name": self.display_name,
            "match_count": self.match_count,
            "text_length": self.text_length,
            "context_id": self.context_id,
            "timestamp": self.timestamp.isoformat(),
        }


# ─── GateDecision ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GateDecision:
    """Outcome of one pass through the transfer gate.

    Fields:
        action:      ``Action.BLOCK`` only when a Finding was produced.
        finding:     The Finding behind a BLOCK; ``None`` on ALLOW.
        alert:       User-facing alert text for a BLOCK; ``None`` on ALLOW.
        event:       DetectionEvent for the monitoring collaborator; ``None`` on ALLOW.
        failed_open: True when the gate hit an internal error or deadline and
                     allowed the transfer instead of blocking it.
    """

    action: Action
    finding: Optional[Finding] = None
    alert: Optional[str] = None
    event: Optional[DetectionEvent] = None
    failed_open: bool = False

    @property
    def blocked(self) -> bool:
        return self.action == Action.BLOCK

    @classmethod
    def allow(cls, failed_open: bool = False) -> "GateDecision":
        return cls(action=Action.ALLOW, failed_open=failed_open)
