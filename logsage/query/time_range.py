"""
Relative time tokens ("1h", "24h", "7d", "5m").

A token is a positive integer amount followed by one unit character. Anything
that does not fit resolves to one hour rather than failing.
"""

import re
import time
from typing import Optional

_TOKEN_RE = re.compile(r"^(\d+)([hdm])$")

UNIT_TO_MS: dict[str, int] = {
    "m": 60 * 1000,
    "h": 3600 * 1000,
    "d": 86400 * 1000,
}

DEFAULT_AMOUNT = 1
DEFAULT_UNIT = "h"


def parse_time_range(token: Optional[str]) -> tuple[int, str]:
    """Split a token into (amount, unit), defaulting to (1, "h")."""
    match = _TOKEN_RE.match((token or "").strip())
    if not match:
        return DEFAULT_AMOUNT, DEFAULT_UNIT
    amount = int(match.group(1))
    if amount <= 0:
        return DEFAULT_AMOUNT, DEFAULT_UNIT
    return amount, match.group(2)


def time_range_to_ms(token: Optional[str]) -> int:
    amount, unit = parse_time_range(token)
    return amount * UNIT_TO_MS[unit]


def resolve_time_range(token: Optional[str], now_ms: Optional[int] = None) -> int:
    """Absolute epoch-millisecond lower bound for "from now, going back <token>"."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return now_ms - time_range_to_ms(token)
