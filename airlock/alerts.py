"""User-facing message builders.

Provides:
  - ``build_block_alert()``:      text shown when a transfer is blocked.
  - ``build_selection_notice()``: title / message / severity for an on-demand scan.

Messages name the Detector and the match count. They never quote the text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from airlock.models.scan import Finding
from airlock.scanner.catalog import Catalog
from airlock.scanner.regex_engine import scan


class Severity(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Notice:
    """A notification for the on-demand scan surface.

    ``sticky`` notices should stay on screen until the user dismisses them.
    """

    title: str
    message: str
    severity: Severity
    finding: Optional[Finding] = None

    @property
    def sticky(self) -> bool:
        return self.severity == Severity.DANGER


def build_block_alert(finding: Finding) -> str:
    """Multi-line alert for a blocked transfer."""
    return (
        "AIRLOCK SECURITY ALERT\n\n"
        f"Blocked: {finding.display_name}\n"
        f"Reason: {finding.description}\n\n"
        "This content contains sensitive data and cannot be pasted "
        "into AI chat interfaces.\n\n"
        f"Detected {finding.match_count} match(es)."
    )


def build_selection_notice(text: Any, catalog: Optional[Catalog] = None) -> Notice:
    """Scan a user selection and describe the outcome.

    Blank selections produce a warning without scanning.
    """
    if not isinstance(text, str) or not text.strip():
        return Notice(
            title="No Text Selected",
            message="Please select some text to scan.",
            severity=Severity.WARNING,
        )

    finding = scan(text, catalog)
    if finding is None:
        return Notice(
            title="Text is Safe",
            message="No sensitive data patterns detected. This text appears safe to share.",
            severity=Severity.SAFE,
        )

    return Notice(
        title="SENSITIVE DATA DETECTED!",
        message=(
            f"Found: {finding.display_name}\n{finding.description}\n\n"
            "Do NOT share this text with AI chat interfaces!"
        ),
        severity=Severity.DANGER,
        finding=finding,
    )
