from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from pydantic import TypeAdapter
from devscope.models.profile import ContributionDay, ContributionStats

_DAYS_ADAPTER = TypeAdapter(List[ContributionDay])
_TOTALS_ADAPTER = TypeAdapter(Dict[str, int])


def parse_contributions(payload: Dict[str, Any]) -> Tuple[List[ContributionDay], Dict[str, int]]:
    """
    Splits the contributions API document into the daily series and the
    per-year totals map. Raises pydantic.ValidationError on a malformed payload.
    """
    days = _DAYS_ADAPTER.validate_python(payload.get("contributions") or [])
    totals = _TOTALS_ADAPTER.validate_python(payload.get("total") or {})
    return days, totals


def compute_streaks(
    days: List[ContributionDay],
    totals: Dict[str, int],
    today: Optional[date] = None,
) -> ContributionStats:
    """
    Computes total contributions plus the longest and current streaks.

    The total comes from the per-year map, not the daily series. When walking
    back for the current streak, a zero count dated today is skipped because
    the day is not over yet; any earlier zero ends the streak.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()

    ordered = sorted(days, key=lambda d: d.date)
    total = sum(totals.values())

    longest = 0
    running = 0
    for day in ordered:
        if day.count > 0:
            running += 1
        else:
            longest = max(longest, running)
            running = 0
    longest = max(longest, running)

    current = 0
    for day in reversed(ordered):
        if day.count > 0:
            current += 1
        elif day.date == today:
            continue
        else:
            break

    return ContributionStats(total=total, longest_streak=longest, current_streak=current)
