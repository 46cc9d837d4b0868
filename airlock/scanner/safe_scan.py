"""Transfer gate: decide whether text about to leave the user's control may pass.

Provides:
  - ``guard_transfer()``:       synchronous gate for paste / send interceptors.
  - ``guard_transfer_async()``: same gate under an external deadline, for async hosts.

FAIL-OPEN INVARIANTS:
  - Both gates ALWAYS return a ``GateDecision``. They NEVER raise.
  - Any internal failure (exception, deadline exceeded) returns ``Action.ALLOW``
    with ``failed_open=True``. A fault in Airlock must never hang or break the
    host; a missed detection is preferred over a blocked user.
  - A failing ``notify`` callback is logged and ignored. The BLOCK still stands.
  - Log lines carry detector key, match count, text length and context id.
    Never the text.

IMPORT RULES:
  - ``import re2`` ONLY. ``import re`` is PROHIBITED in any airlock/scanner/ file.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from airlock.alerts import build_block_alert
from airlock.constants import SCAN_DEADLINE_S
from airlock.models.scan import Action, DetectionEvent, Finding, GateDecision
from airlock.scanner.catalog import Catalog
from airlock.scanner.regex_engine import scan
from airlock.utils.logger import get_logger

logger = get_logger(__name__)

#: Callback that relays a DetectionEvent to a monitoring collaborator.
Notifier = Callable[[DetectionEvent], Any]


def _is_blank(text: Any) -> bool:
    return not isinstance(text, str) or not text.strip()


def _block(
    text: str,
    finding: Finding,
    context_id: Optional[str],
    notify: Optional[Notifier],
) -> GateDecision:
    event = DetectionEvent.from_finding(finding, text_length=len(text), context_id=context_id)
    logger.warning(
        "Transfer blocked",
        detector_key=finding.detector_key,
        match_count=finding.match_count,
        text_length=len(text),
        context_id=context_id,
        event_id=event.event_id,
    )

    if notify is not None:
        try:
            notify(event)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Failed to notify monitor",
                event_id=event.event_id,
                error=f"{type(exc).__name__}: {exc}",
            )

    return GateDecision(
        action=Action.BLOCK,
        finding=finding,
        alert=build_block_alert(finding),
        event=event,
    )


def guard_transfer(
    text: Any,
    catalog: Optional[Catalog] = None,
    *,
    context_id: Optional[str] = None,
    notify: Optional[Notifier] = None,
) -> GateDecision:
    """Scan ``text`` and decide BLOCK or ALLOW.

    Args:
        text:       Text captured at the transfer boundary (e.g. clipboard paste).
        catalog:    Catalog override; ``DEFAULT_CATALOG`` when omitted.
        context_id: Page / window identifier copied into the DetectionEvent.
        notify:     Optional callback receiving the DetectionEvent on BLOCK.

    Returns:
        GateDecision. Never raises.
    """
    if _is_blank(text):
        logger.debug("Empty transfer, allowing", context_id=context_id)
        return GateDecision.allow()

    try:
        finding = scan(text, catalog)
        if finding is None:
            logger.debug("No sensitive data detected", text_length=len(text), context_id=context_id)
            return GateDecision.allow()
        return _block(text, finding, context_id, notify)

    except Exception as exc:  # noqa: BLE001
        logger.error(
            "Error during transfer scan, allowing (fail-open)",
            context_id=context_id,
            error=f"{type(exc).__name__}: {exc}",
            exc_info=True,
        )
        return GateDecision.allow(failed_open=True)


async def guard_transfer_async(
    text: Any,
    catalog: Optional[Catalog] = None,
    *,
    context_id: Optional[str] = None,
    notify: Optional[Notifier] = None,
    timeout_s: float = SCAN_DEADLINE_S,
) -> GateDecision:
    """``guard_transfer()`` with the scan run in a worker thread under a deadline.

    The scan itself has no cancellation; past ``timeout_s`` the gate stops
    waiting and fails open. ``notify`` runs on the event loop thread, only
    once the scan has finished within the deadline.

    Returns:
        GateDecision. Never raises.
    """
    if _is_blank(text):
        return GateDecision.allow()

    loop = asyncio.get_running_loop()
    try:
        finding = await asyncio.wait_for(
            loop.run_in_executor(None, scan, text, catalog),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError:
        logger.error(
            "Transfer scan deadline exceeded, allowing (fail-open)",
            deadline_ms=round(timeout_s * 1000),
            text_length=len(text),
            context_id=context_id,
        )
        return GateDecision.allow(failed_open=True)
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "Error during transfer scan, allowing (fail-open)",
            context_id=context_id,
            error=f"{type(exc).__name__}: {exc}",
            exc_info=True,
        )
        return GateDecision.allow(failed_open=True)

    if finding is None:
        return GateDecision.allow()

    try:
        return _block(text, finding, context_id, notify)
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "Error while building block decision, allowing (fail-open)",
            context_id=context_id,
            error=f"{type(exc).__name__}: {exc}",
            exc_info=True,
        )
        return GateDecision.allow(failed_open=True)
