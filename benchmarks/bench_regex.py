"""Scanner benchmark.

Measures p99 latency of scan() against the default catalog across clean and
flagged inputs of increasing size. A clean input is the worst case: every
detector runs to the end of the text before scan() gives up.

Usage (from project root, with the package installed):
    python benchmarks/bench_regex.py

The transfer gate allows a scan 250ms before failing open; these budgets keep
interactive pastes far inside that deadline.
"""

from __future__ import annotations

import statistics
import time
from typing import Any

from airlock.scanner.regex_engine import scan

# ---------------------------------------------------------------------------
# Test inputs
# ---------------------------------------------------------------------------

CLEAN_SHORT = "Hello, how do I install Python on Ubuntu?"
CLEAN_MEDIUM = "Please summarize the financial report for the third quarter. " * 40
CLEAN_LONG = "The quick brown fox jumped over the lazy dog. " * 1_000
CLEAN_CODE = "def handler(event, context):\n    return {'status': 200}\n" * 500

# First detector in order: exits after one pattern
IPV4_BLOCK = "ssh into 10.20.30.40 and restart"

# Last detector in order: every earlier pattern runs first
CARD_BLOCK = CLEAN_LONG + " card 4111 1111 1111 1111"

# (name, text, p99 budget in ms)
SCENARIOS = [
    ("Clean short (41 chars)", CLEAN_SHORT, 1.0),
    ("Clean medium (~2.5k chars)", CLEAN_MEDIUM, 2.0),
    ("Clean long (~46k chars)", CLEAN_LONG, 25.0),
    ("Clean code (~28k chars)", CLEAN_CODE, 25.0),
    ("IPv4 BLOCK (first in order)", IPV4_BLOCK, 1.0),
    ("Credit card BLOCK (last in order)", CARD_BLOCK, 25.0),
]


# ---------------------------------------------------------------------------
# Benchmark runner
# ---------------------------------------------------------------------------


def measure_p99(fn: Any, *args: Any, n: int = 1_000) -> tuple[float, float, float]:
    """Run fn(*args) n times and return (p50, p99, max) in milliseconds."""
    latencies: list[float] = []
    for _ in range(n):
        start = time.perf_counter()
        fn(*args)
        latencies.append((time.perf_counter() - start) * 1_000)
    latencies.sort()
    p50 = statistics.median(latencies)
    p99 = latencies[int(0.99 * n)]
    return p50, p99, latencies[-1]


def run_benchmarks() -> bool:
    """Run all benchmarks. Returns True if every scenario is within budget."""
    WARMUP = 50
    N = 500

    print("=" * 70)
    print("Airlock scan() benchmark")
    print(f"Warmup: {WARMUP} calls | Measurement: {N} calls each")
    print("=" * 70)

    all_pass = True
    for name, text, budget_ms in SCENARIOS:
        for _ in range(WARMUP):
            scan(text)

        p50, p99, worst = measure_p99(scan, text, n=N)
        passed = p99 <= budget_ms
        all_pass = all_pass and passed
        status = "PASS" if passed else "FAIL"
        print(f"  [{status}] {name} (budget {budget_ms:.1f}ms)")
        print(f"          p50={p50:.3f}ms  p99={p99:.3f}ms  worst={worst:.3f}ms")

    print("=" * 70)
    if all_pass:
        print("RESULT: ALL BENCHMARKS PASSED")
    else:
        print("RESULT: SOME BENCHMARKS FAILED")
        print("        Check recently added patterns or runner contention.")
    print("=" * 70)

    return all_pass


if __name__ == "__main__":
    import sys

    passed = run_benchmarks()
    sys.exit(0 if passed else 1)
