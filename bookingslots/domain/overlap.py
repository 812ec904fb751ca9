"""
Interval overlap predicate used to filter candidate slots against busy times.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pendulum import DateTime

if TYPE_CHECKING:
    from .models import TimeRange


def overlaps(candidate_start: DateTime, candidate_end: DateTime, busy: "TimeRange") -> bool:
    """
    Check whether a candidate interval collides with a busy interval.

    The candidate collides when it starts inside the busy interval, ends
    inside it, or fully covers it. Intervals that only touch at a boundary
    do not collide, so back-to-back meetings are allowed.
    """
    starts_inside = busy.start <= candidate_start < busy.end
    ends_inside = busy.start < candidate_end <= busy.end
    covers = candidate_start <= busy.start and candidate_end >= busy.end

    return starts_inside or ends_inside or covers
