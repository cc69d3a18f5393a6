"""
core/behavior.py
────────────────────────────────────────────────────────────────────────
Summaries computed from raw meal-log rows, outside the pure engine:

  • compute_14day_behavior   rolling per-day averages + trend shares
  • compute_today_totals     today's running DailyConsumed
  • merge_into_daily_consumed additive merge of one logged meal

Rows are mappings (or `MealLogEntry` models) with a `captured_at`
timestamp and macro fields, either flat or nested under "estimates".
Rows without a readable timestamp are ignored.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from core.coerce import clean_str, non_negative, round_half_up
from core.intelligence_config import IntelligenceConfig
from core.intent import infer_time_window
from core.models.nutrition import MACRO_FIELDS, Behavior14Day, DailyConsumed

_LOG = logging.getLogger(__name__)

# ──────────────── constants ──────────────────
MIN_LOGS = 3
MAX_ROWS = 800
LOW_INTAKE_RATIO = 0.8          # ≤80 % of target counts as a "low" day
LATE_EATING_HOUR = 21
_WINDOWS = ("breakfast", "lunch", "snack", "dinner")


def compute_14day_behavior(
    rows: Iterable[Mapping[str, Any] | Any],
    sodium_max_mg: float = 2300,
    protein_target_g: float = 110,
    sugar_max_g: float = 40,
    fiber_min_g: float = 28,
    config: IntelligenceConfig | None = None,
) -> Behavior14Day | None:
    """
    Per-day totals → averages and "share of days" signals.

    Returns None when fewer than three usable logs exist; a couple of meals
    say nothing about a two-week trend.
    """
    records = [r for r in (_normalize_row(row, config) for row in list(rows)[:MAX_ROWS]) if r]
    if len(records) < MIN_LOGS:
        _LOG.debug("behavior: %d usable logs, need %d", len(records), MIN_LOGS)
        return None

    df = pd.DataFrame(records)
    daily = df.groupby("day")[list(MACRO_FIELDS)].sum()
    avg = daily.mean()

    late_days = df[df["hour"] >= LATE_EATING_HOUR]["day"].nunique()
    top3 = _most_common(df["cuisine"], 3)
    windows = _most_common(df["window"], 1)

    return Behavior14Day(
        avg_calories=round_half_up(avg["calories"]),
        avg_protein_g=_one_decimal(avg["protein_g"]),
        avg_sodium_mg=round_half_up(avg["sodium_mg"]),
        avg_sugar_g=_one_decimal(avg["sugar_g"]),
        avg_fiber_g=_one_decimal(avg["fiber_g"]),
        high_sodium_days_pct=float((daily["sodium_mg"] >= sodium_max_mg).mean()),
        low_protein_days_pct=float((daily["protein_g"] <= protein_target_g * LOW_INTAKE_RATIO).mean()),
        high_sugar_days_pct=float((daily["sugar_g"] >= sugar_max_g).mean()),
        low_fiber_days_pct=float((daily["fiber_g"] <= fiber_min_g * LOW_INTAKE_RATIO).mean()),
        late_eating_pct=late_days / len(daily),
        common_cuisine=top3[0] if top3 else None,
        cuisine_top3=top3,
        common_meal_window=windows[0] if windows else None,
    )


def compute_today_totals(
    rows: Iterable[Mapping[str, Any] | Any],
    now: datetime | None = None,
) -> DailyConsumed:
    now = now or datetime.now().astimezone()
    totals = {k: 0.0 for k in MACRO_FIELDS}
    for row in rows:
        data = _as_mapping(row)
        at = _parse_when(data.get("captured_at"))
        if at is None or not _same_day(at, now):
            continue
        values = _macro_source(data)
        for k in MACRO_FIELDS:
            totals[k] += non_negative(values.get(k))
    return DailyConsumed(**totals)


def merge_into_daily_consumed(
    current: DailyConsumed | Mapping[str, Any] | None,
    addition: DailyConsumed | Mapping[str, Any] | None,
) -> DailyConsumed:
    base = _as_mapping(current)
    extra = _as_mapping(addition)
    return DailyConsumed(**{
        k: non_negative(base.get(k)) + non_negative(extra.get(k)) for k in MACRO_FIELDS
    })


# ──────────────────────────────── Helpers ────────────────────────────────

def _normalize_row(row: Any, config: IntelligenceConfig | None) -> Dict[str, Any] | None:
    data = _as_mapping(row)
    at = _parse_when(data.get("captured_at"))
    if at is None:
        return None
    values = _macro_source(data)
    meal_type = clean_str(data.get("meal_type")).lower()
    record: Dict[str, Any] = {k: non_negative(values.get(k)) for k in MACRO_FIELDS}
    record.update(
        day=at.date().isoformat(),
        hour=at.hour,
        cuisine=clean_str(data.get("cuisine") or values.get("cuisine")),
        window=meal_type if meal_type in _WINDOWS else infer_time_window(at, config),
    )
    return record


def _most_common(series: pd.Series, n: int) -> List[str]:
    """Most frequent non-blank values, case-insensitive, first spelling wins."""
    s = series[series.astype(bool)]
    if s.empty:
        return []
    frame = pd.DataFrame({"value": s, "key": s.str.lower()})
    counts = frame.groupby("key", sort=False).size().sort_values(ascending=False, kind="stable")
    spelling = frame.drop_duplicates("key").set_index("key")["value"]
    return [spelling[k] for k in counts.index[:n]]


def _parse_when(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    text = clean_str(value)
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def _same_day(at: datetime, now: datetime) -> bool:
    if at.tzinfo is not None and now.tzinfo is not None:
        at = at.astimezone(now.tzinfo)
    return at.date() == now.date()


def _macro_source(data: Mapping[str, Any]) -> Mapping[str, Any]:
    nested = data.get("estimates")
    return nested if isinstance(nested, Mapping) else data


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if hasattr(raw, "model_dump"):
        return raw.model_dump()
    if isinstance(raw, Mapping):
        return raw
    return {}


def _one_decimal(value: float) -> float:
    return round_half_up(float(value) * 10) / 10
