from __future__ import annotations

import math
import re
from typing import Any

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)")

_SUFFIXES = {
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
}


def parse_money(value: Any) -> float:
    """
    Parse a free-form money figure such as "$1,200,000", "15m" or "2.5B".

    Returns NaN for anything empty or unparseable so threshold checks fail.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return math.nan

    s = re.sub(r"[$,\s]", "", value.lower())
    multiplier = 1
    if s and s[-1] in _SUFFIXES:
        multiplier = _SUFFIXES[s[-1]]
        s = s[:-1]

    m = _NUMBER_RE.match(s)
    if not m:
        return math.nan
    return float(m.group(0)) * multiplier
