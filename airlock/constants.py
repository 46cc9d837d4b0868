"""Shared constants for Airlock.

Numeric limits and wire-level strings used across modules live here.
"""

# ─── Detection events ─────────────────────────────────────────────────────────

# Message type relayed to the monitoring collaborator after a blocked transfer.
DETECTION_EVENT_TYPE: str = "SENSITIVE_DATA_DETECTED"

# ─── Transfer gate ────────────────────────────────────────────────────────────

# Default external deadline for guard_transfer_async(). The engine has no
# timeout of its own; past this deadline the gate fails open (ALLOW).
SCAN_DEADLINE_S: float = 0.250  # 250ms

# ─── Configuration ────────────────────────────────────────────────────────────

# Current supported config file version.
SUPPORTED_CONFIG_VERSION: int = 1

# Valid values for logging.format.
VALID_LOG_FORMATS: frozenset[str] = frozenset({"json", "console"})
