"""Default detector definitions and the built-in catalog.

All default patterns are compiled once, at module load, when ``DEFAULT_CATALOG``
is built. NO pattern compilation happens per scan.

ORDER IS PRIORITY. ``scan()`` reports the first Detector that matches, so:
  - ``secretAssignment`` precedes ``genericApiKey`` so a keyword assignment is
    reported instead of the long-token catch-all covering the same value.
  - ``awsSecretKey`` precedes ``genericApiKey``; both fire on 40-char tokens.
  - ``genericApiKey`` and ``awsSecretKey`` are intentionally broad (recall over
    precision) and carry ``Confidence.HEURISTIC``.
Do not reorder or drop entries without treating it as a behaviour change.

IMPORT RULES:
  - ``import re2`` ONLY. ``import re`` is PROHIBITED in any airlock/scanner/ file.
"""

from __future__ import annotations

from airlock.models.scan import Confidence, Detector
from airlock.scanner.catalog import Catalog

# Shared by ipv4: one octet, 0-255.
_OCTET = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"

# Whitespace as JavaScript's \s sees it. re2 \s is ASCII-only, so the Unicode
# space separators (NBSP, thin space, ...) and the BOM are added explicitly.
_WS_CHARS = r"\s\pZ\x{FEFF}"
_WS = f"[{_WS_CHARS}]"


DEFAULT_DETECTORS: tuple[Detector, ...] = (
    # ─── Network ──────────────────────────────────────────────────────────
    Detector(
        # All four octets required, each 0-255; "1.0.2" and "2.0" never match.
        key="ipv4",
        display_name="IPv4 Address",
        description="Internal IP address detected",
        pattern=rf"\b(?:{_OCTET}\.){{3}}{_OCTET}\b",
    ),
    # ─── AWS ──────────────────────────────────────────────────────────────
    Detector(
        key="awsAccessKey",
        display_name="AWS Access Key",
        description="AWS Access Key ID detected",
        pattern=r"\bAKIA[0-9A-Z]{16}\b",
    ),
    Detector(
        key="awsSecretKey",
        display_name="AWS Secret Key",
        description="Possible AWS Secret Access Key detected",
        pattern=r"\b[A-Za-z0-9/+=]{40}\b",
        confidence=Confidence.HEURISTIC,
    ),
    # ─── PEM private keys (header only) ───────────────────────────────────
    Detector(
        key="privateKey",
        display_name="Private Key",
        description="Private cryptographic key detected",
        pattern=r"-----BEGIN (?:RSA |EC |OPENSSH )?PRIVATE KEY-----",
    ),
    # ─── PII: email ───────────────────────────────────────────────────────
    Detector(
        key="email",
        display_name="Email Address",
        description="Email address detected (may contain PII)",
        pattern=r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b",
    ),
    # ─── Keyword assignments: password=..., api_key: "...", etc. ─────────
    Detector(
        key="secretAssignment",
        display_name="Secret Assignment",
        description="Credential or secret assignment detected",
        pattern=(
            r"(?i)\b(?:password|passwd|pwd|secret|api[_-]?key|auth[_-]?token"
            r"|access[_-]?token|private[_-]?key)"
            rf"{_WS}*[:=]{_WS}*[\"']?[^{_WS_CHARS}\"']+[\"']?"
        ),
    ),
    # ─── Catch-all long tokens ────────────────────────────────────────────
    Detector(
        key="genericApiKey",
        display_name="API Key",
        description="Possible API key or token detected",
        pattern=r"\b[A-Za-z0-9_-]{32,}\b",
        confidence=Confidence.HEURISTIC,
    ),
    Detector(
        # Header and payload segments both start with base64('{"').
        key="jwtToken",
        display_name="JWT Token",
        description="JSON Web Token detected",
        pattern=r"\beyJ[A-Za-z0-9_-]*\.eyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+\b",
    ),
    # ─── Connection strings ───────────────────────────────────────────────
    Detector(
        key="databaseUrl",
        display_name="Database Connection String",
        description="Database connection URL detected",
        pattern=rf"(?i)\b(?:mongodb|postgresql|mysql|postgres|redis)://[^{_WS_CHARS}]+",
    ),
    # ─── PII: format-only, no checksums ───────────────────────────────────
    Detector(
        key="ssn",
        display_name="Social Security Number",
        description="US Social Security Number detected (PII)",
        pattern=r"\b\d{3}-\d{2}-\d{4}\b",
    ),
    Detector(
        key="creditCard",
        display_name="Credit Card Number",
        description="Credit card number detected (PII)",
        pattern=rf"\b\d{{4}}[{_WS_CHARS}-]?\d{{4}}[{_WS_CHARS}-]?\d{{4}}[{_WS_CHARS}-]?\d{{4}}\b",
    ),
)


# Built once at import; an invalid default pattern fails the import.
DEFAULT_CATALOG: Catalog = Catalog.from_detectors(DEFAULT_DETECTORS)
