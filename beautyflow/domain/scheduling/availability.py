"""
Slot availability calculator.

The working day is divided into fixed-interval markers. Every existing
appointment occupies ceil(duration / interval) markers starting at its own
start time (which is not rounded to the grid). A candidate start is offered
when none of the markers it would need is occupied and the last one ends
inside the working window.
"""

import math
from typing import Iterable, Optional

from ... import config
from ...shared.clock import format_hhmm, parse_hhmm


class WorkingWindow:
    """Studio opening hours and grid interval, in minutes since midnight"""

    def __init__(
        self,
        start: Optional[str] = None,
        end: Optional[str] = None,
        interval: Optional[int] = None,
    ):
        self.start = parse_hhmm(start or config.WORKDAY_START)
        self.end = parse_hhmm(end or config.WORKDAY_END)
        self.interval = interval or config.SLOT_INTERVAL_MINUTES
        if self.start is None or self.end is None:
            raise ValueError("Working window bounds must use the HH:MM format")
        if self.interval <= 0:
            raise ValueError("Slot interval must be positive")

    def __repr__(self):
        return f"WorkingWindow({format_hhmm(self.start)}-{format_hhmm(self.end)}, {self.interval}m)"


def _marker_count(duration: int, interval: int) -> int:
    return math.ceil(duration / interval)


def occupied_markers(existing: Iterable[tuple[str, int]], interval: int) -> set[int]:
    """Minute markers taken by already booked (startTime, duration) pairs"""
    occupied = set()
    for start_time, duration in existing:
        start = parse_hhmm(start_time)
        if start is None:
            continue
        for i in range(_marker_count(duration or 0, interval)):
            occupied.add(start + i * interval)
    return occupied


def available_slots(
    requested_duration: Optional[int],
    existing: Iterable[tuple[str, int]],
    window: Optional[WorkingWindow] = None,
) -> list[str]:
    """
    Start times ("HH:MM", ascending) where a procedure of `requested_duration`
    minutes fits. A missing or zero duration counts as one interval.
    """
    window = window or WorkingWindow()
    interval = window.interval
    duration = requested_duration or interval
    needed = _marker_count(duration, interval)
    occupied = occupied_markers(existing, interval)

    slots = []
    for candidate in range(window.start, window.end, interval):
        markers = [candidate + i * interval for i in range(needed)]
        if any(m in occupied or m + interval > window.end for m in markers):
            continue
        slots.append(format_hhmm(candidate))
    return slots
