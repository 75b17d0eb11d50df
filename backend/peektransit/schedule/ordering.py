"""
Orderings for normalized arrivals.

Single-format output (normalize):
  1. "Due" entries, in encounter order
  2. countdowns, by signed minutes; equal minutes break OK < EARLY < LATE
  3. clock times, by minutes since midnight, inverted when the two times are
     more than 18 hours apart (the window crossed midnight)
  4. cancelled entries, in encounter order

Mixed-format output (normalize_mixed_format) sorts on a single integer
sort_value, then on route key (numeric when both keys are integers).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum
from functools import cmp_to_key
from typing import Iterable

from .types import ArrivalEntry, ArrivalState

DAY_WRAP_MINUTES = 18 * 60

CANCELLED_SORT_VALUE = sys.maxsize
DUE_SORT_VALUE = -1

_STATE_TIE_BREAK = {
    ArrivalState.OK: 0,
    ArrivalState.EARLY: 1,
    ArrivalState.LATE: 2,
    ArrivalState.CANCELLED: 3,
}


class DisplayKind(IntEnum):
    DUE = 0
    COUNTDOWN = 1
    CLOCK = 2
    CANCELLED = 3


@dataclass(frozen=True)
class RankedArrival:
    entry: ArrivalEntry
    kind: DisplayKind
    time_difference: int     # whole minutes until the estimated departure
    clock_minutes: int       # minutes since midnight of the estimated departure

    @property
    def sort_value(self) -> int:
        if self.kind is DisplayKind.CANCELLED:
            return CANCELLED_SORT_VALUE
        if self.kind is DisplayKind.DUE:
            return DUE_SORT_VALUE
        return self.time_difference


def _cmp(a: int, b: int) -> int:
    return (a > b) - (a < b)


def compare_clock_minutes(a: int, b: int) -> int:
    """Compare two minutes-since-midnight values, treating a gap over 18h as a day wrap."""
    if abs(a - b) > DAY_WRAP_MINUTES:
        return _cmp(b, a)
    return _cmp(a, b)


def compare_single_format(a: RankedArrival, b: RankedArrival) -> int:
    if a.kind != b.kind:
        return _cmp(a.kind, b.kind)

    if a.kind is DisplayKind.COUNTDOWN:
        by_minutes = _cmp(a.time_difference, b.time_difference)
        if by_minutes:
            return by_minutes
        return _cmp(_STATE_TIE_BREAK[a.entry.state], _STATE_TIE_BREAK[b.entry.state])

    if a.kind is DisplayKind.CLOCK:
        return compare_clock_minutes(a.clock_minutes, b.clock_minutes)

    # Due and cancelled keep encounter order
    return 0


def _as_int(value: str):
    try:
        return int(value)
    except ValueError:
        return None


def compare_route_keys(a: str, b: str) -> int:
    ia, ib = _as_int(a), _as_int(b)
    if ia is not None and ib is not None:
        return _cmp(ia, ib)
    return _cmp(a, b)


def compare_mixed_format(a: RankedArrival, b: RankedArrival) -> int:
    by_value = _cmp(a.sort_value, b.sort_value)
    if by_value:
        return by_value
    return compare_route_keys(a.entry.route_key, b.entry.route_key)


def order_single_format(items: Iterable[RankedArrival]) -> list[ArrivalEntry]:
    return [r.entry for r in sorted(items, key=cmp_to_key(compare_single_format))]


def order_mixed_format(items: Iterable[RankedArrival]) -> list[ArrivalEntry]:
    return [r.entry for r in sorted(items, key=cmp_to_key(compare_mixed_format))]
