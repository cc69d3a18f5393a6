"""
core/cuisine.py
────────────────────────────────────────────────────────────────────────
Deterministic cuisine rotation.

No randomness anywhere: "variety" comes from hashing stable inputs.  The
hash is 32-bit FNV-1a over UTF-16 code units, so a JS client that runs the
same inputs through the same function lands on the same cuisine.

  fingerprint = fnv1a("|".join(lowercased candidates))
  seed        = "user|member|intent|utc-day|fingerprint"
  pick        = candidates[fnv1a(seed) % len(candidates)]

Editing the cuisine list changes the fingerprint, so the pick reacts the
same day instead of waiting for tomorrow.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from core.coerce import clean_str, uniq_normalized

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
_MASK32 = 0xFFFFFFFF


def fnv1a_32(text: str) -> int:
    h = FNV_OFFSET_BASIS
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * FNV_PRIME) & _MASK32
    return h


def normalize_cuisines(cuisines: Iterable[object] | None) -> list[str]:
    return uniq_normalized(cuisines)


def utc_day(now: datetime) -> str:
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date().isoformat()


def pick_cuisine_hint(
    profile_cuisines: Iterable[object] | None,
    behavior_cuisine: str | None,
    now: datetime,
    user_id: str | None = None,
    member_id: str | None = None,
    intent_id: str | None = None,
) -> str | None:
    candidates = normalize_cuisines(profile_cuisines)
    behavior = clean_str(behavior_cuisine) or None

    if not candidates:
        return behavior

    if behavior:
        candidates = [behavior] + [c for c in candidates if c.lower() != behavior.lower()]

    fingerprint = fnv1a_32("|".join(c.lower() for c in candidates))
    seed = f"{user_id or ''}|{member_id or ''}|{intent_id or ''}|{utc_day(now)}|{fingerprint}"
    return candidates[fnv1a_32(seed) % len(candidates)]
