"""ULID generation for detection event ids.

Returns 26-character Crockford Base32 ULIDs: lexicographically sortable by
creation time and unique within the same millisecond.

Uses the ``python-ulid`` library (see pyproject.toml).
"""

from __future__ import annotations

from ulid import ULID


def generate_ulid() -> str:
    """Generate a new ULID as a 26-character uppercase string.

    Example::

        event_id = generate_ulid()
        # "01KJ0JRVHYA7KX32VPN5ZSCTMV"
        assert len(event_id) == 26
    """
    return str(ULID())
