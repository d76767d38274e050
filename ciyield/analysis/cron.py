"""
Cron-based run frequency estimation.

This is a deliberately coarse model: minute and hour fields are counted as
firing "slots" per active day, and the calendar fields only pick a baseline
cadence (daily, weekly or monthly). It never expands the full schedule.
"""

import math
from collections.abc import Mapping
from typing import Any, NamedTuple, Optional, Tuple

from ..core.config import DAYS_PER_MONTH
from ..core.logging import get_logger
from ..utils.helpers import as_list, safe_number

logger = get_logger(__name__)

WEEKS_PER_MONTH = 4
FALLBACK_RUNS_PER_MONTH = 4

MINUTE_SLOTS = 60
HOUR_SLOTS = 24


class CronExpression(NamedTuple):
    minute: str
    hour: str
    day_of_month: str
    month: str
    day_of_week: str

    @classmethod
    def parse(cls, text: Any) -> Optional["CronExpression"]:
        """Split a 5-field expression; anything else is unparseable."""
        if not isinstance(text, str):
            return None
        fields = text.split()
        if len(fields) != 5:
            return None
        return cls(*fields)

    @property
    def baseline_runs_per_month(self) -> int:
        if self.day_of_week != "*":
            return WEEKS_PER_MONTH
        if self.day_of_month != "*" or self.month != "*":
            return 1
        return DAYS_PER_MONTH


def _parse_range(text: str) -> Optional[Tuple[float, float]]:
    parts = text.split("-")
    # An empty bound such as "-5" is not a number, so the range counts as one slot.
    start, end = safe_number(parts[0]), safe_number(parts[1])
    if start is None or end is None or end < start:
        return None
    return start, end


def count_field_slots(field: str, max_slots: int) -> float:
    """
    Estimate how many values one cron field selects.

    `*` counts as a single slot: an unrestricted minute field still means the
    job is treated as firing once in that hour.
    """
    if not field or field == "*":
        return 1

    if "," in field:
        return sum(count_field_slots(part.strip(), max_slots) for part in field.split(","))

    if "/" in field:
        base, step_raw = field.split("/")[:2]
        step = safe_number(step_raw)
        if step is None or step <= 0:
            return 1

        if not base or base == "*":
            return max(1, math.ceil(max_slots / step))

        if "-" in base:
            bounds = _parse_range(base)
            if bounds is None:
                return 1
            start, end = bounds
            return max(1, math.ceil((end - start + 1) / step))

        return 1

    if "-" in field:
        bounds = _parse_range(field)
        if bounds is None:
            return 1
        start, end = bounds
        return max(1, end - start + 1)

    return 1


def _entry_runs_per_month(entry: Any) -> int:
    cron = entry.get("cron") if isinstance(entry, Mapping) else None
    expression = CronExpression.parse(cron)
    if expression is None:
        logger.debug(f"Unparseable cron expression {cron!r}, assuming {FALLBACK_RUNS_PER_MONTH} runs/month")
        return FALLBACK_RUNS_PER_MONTH

    time_slots = max(
        1,
        count_field_slots(expression.minute, MINUTE_SLOTS)
        * count_field_slots(expression.hour, HOUR_SLOTS),
    )
    return max(1, math.ceil(expression.baseline_runs_per_month * time_slots))


def estimate_runs_per_month(schedule_config: Any) -> int:
    """
    Estimate monthly runs for a workflow's `schedule` trigger.

    Accepts the list of `{cron: ...}` entries, a single entry, or nothing.
    """
    return sum(_entry_runs_per_month(entry) for entry in as_list(schedule_config))
