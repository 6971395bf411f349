"""Spaced repetition scheduling: remaining time and next-interval candidates.

The heuristic grows the interval by a factor interpolated between 1x (item
reviewed right after its last completion) and 2.5x (reviewed at or past its
due date), then offers a sooner / on-formula / later choice around it.
"""
import math
from datetime import date
from typing import Callable, Optional

from review_tracker.models import Item

Clock = Callable[[], date]

UNSCHEDULED = None
BOOTSTRAP_INTERVALS = [1, 3, 5]
MAX_GROWTH = 2.5
CANDIDATE_FACTORS = (0.7, 1.0, 1.2)


def today() -> date:
    """Production clock: the local calendar date."""
    return date.today()


def elapsed_days(item: Item, on: date) -> int:
    return (on - item.rep_info.last_completion).days


def remaining_time(item: Item, on: date) -> Optional[int]:
    """Days until the item is due again; negative when overdue.

    Returns UNSCHEDULED for items that were never completed.
    """
    if item.rep_info is None:
        return UNSCHEDULED
    return item.rep_info.interval - elapsed_days(item, on)


def progress(item: Item, on: date) -> float:
    """Fraction of the current interval that has elapsed, clamped to [0, 1]."""
    ratio = elapsed_days(item, on) / item.rep_info.interval
    return min(max(ratio, 0.0), 1.0)


def next_interval_candidates(item: Item, on: date) -> list[int]:
    if item.rep_info is None:
        return list(BOOTSTRAP_INTERVALS)
    p = progress(item, on)
    base = item.rep_info.interval * (1 - p + p * MAX_GROWTH)
    # round first so float noise (30.000000000000004) does not bump the ceiling
    return [max(1, math.ceil(round(base * factor, 9))) for factor in CANDIDATE_FACTORS]


def format_remaining_time(days: Optional[int]) -> str:
    """Compact label for a remaining-time value (blank when unscheduled)."""
    if days is UNSCHEDULED:
        return " "
    # months are 30 days and years start at 300; close enough for a badge
    if days >= 300:
        return f"{round(days / 365)}y"
    if days >= 30:
        return f"{days // 30}m"
    if days >= 7:
        return f"{days // 7}w"
    return f"{days}d"


def due_items(items: list[Item], on: date) -> list[Item]:
    """Scheduled items due on or before `on`, most overdue first."""
    due = [it for it in items if it.rep_info is not None and remaining_time(it, on) <= 0]
    return sorted(due, key=lambda it: remaining_time(it, on))
