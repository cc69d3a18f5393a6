"""
core/coerce.py
────────────────────────────────────────────────────────────────────────
Total helpers for turning whatever the caller hands us into numbers and
strings the engine can trust.  Nothing in here raises on bad data:
garbage, None, NaN and ±inf all collapse to 0 / empty.
"""

from __future__ import annotations

import math
from typing import Any, Iterable


def to_number(value: Any) -> float:
    try:
        n = float(value)
    except (TypeError, ValueError):
        return 0.0
    return n if math.isfinite(n) else 0.0


def non_negative(value: Any) -> float:
    return max(0.0, to_number(value))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp01(value: Any) -> float:
    return clamp(to_number(value), 0.0, 1.0)


def round_half_up(value: float) -> int:
    """Round like JS `Math.round` (ties go up), not banker's rounding."""
    return int(math.floor(value + 0.5))


def clean_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def uniq_normalized(values: Iterable[Any] | None) -> list[str]:
    """Trim, drop blanks, dedupe case-insensitively (first spelling wins)."""
    seen: set[str] = set()
    out: list[str] = []
    for raw in values or []:
        v = clean_str(raw)
        if not v:
            continue
        key = v.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(v)
    return out


def clamp_text(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[: max(0, max_chars - 1)].rstrip() + "…"
