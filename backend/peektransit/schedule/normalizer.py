"""
Schedule normalization: raw stop-schedule payload -> ordered ArrivalEntry list.

Both entry points are pure functions of (raw, now, config). "now" is always
passed in; nothing here reads the wall clock. Timestamps are naive local
wall-clock values and only their differences are used.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .config import DEFAULT_CONFIG, NormalizerConfig
from .decode import decode_schedule
from .ordering import DisplayKind, RankedArrival, order_mixed_format, order_single_format
from .types import ArrivalEntry, ArrivalState, ScheduledStop, TimeFormat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Timing:
    stop: ScheduledStop
    route_key: str
    time_difference: int
    delay: int


def minutes_until(estimated: datetime, now: datetime) -> int:
    return math.ceil((estimated - now).total_seconds() / 60.0)


def delay_minutes(estimated: datetime, scheduled: datetime) -> int:
    # Round half away from zero
    minutes = (estimated - scheduled).total_seconds() / 60.0
    return int(math.copysign(math.floor(abs(minutes) + 0.5), minutes))


def normalize_route_key(variant_key: str) -> str:
    """ "60-1-A" -> "60", "BLUE-1" -> "B" """
    head = next((part for part in variant_key.split("-") if part), variant_key)
    if "BLUE" in head:
        return "B"
    return head


def format_clock_time(moment: datetime, config: NormalizerConfig = DEFAULT_CONFIG) -> str:
    hour = moment.hour
    suffix = config.am_label if hour < 12 else config.pm_label
    if hour == 0:
        hour = 12
    elif hour > 12:
        hour -= 12
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_countdown(time_difference: int, config: NormalizerConfig = DEFAULT_CONFIG) -> str:
    if time_difference < 0:
        return f"{-time_difference} {config.minutes_label} {config.ago_label}"
    return f"{time_difference} {config.minutes_label}"


def _naive(moment: datetime) -> datetime:
    return moment.replace(tzinfo=None)


def _timings(raw: Any, now: datetime, config: NormalizerConfig) -> list[_Timing]:
    now = _naive(now)
    out: list[_Timing] = []
    dropped = 0

    for stop in decode_schedule(raw):
        time_difference = minutes_until(stop.estimated, now)
        if time_difference < -config.due_grace_minutes:
            dropped += 1
            continue

        out.append(
            _Timing(
                stop=stop,
                route_key=normalize_route_key(stop.variant_key),
                time_difference=time_difference,
                delay=delay_minutes(stop.estimated, stop.scheduled),
            )
        )

    if dropped:
        logger.debug("dropped %d departures older than %d min", dropped, config.due_grace_minutes)
    return out


def _rank(timing: _Timing, config: NormalizerConfig, *, countdown: bool) -> RankedArrival:
    """
    Build the ranked arrival for one departure.

    `countdown` says whether this departure may render as a minutes-remaining
    countdown; LATE/EARLY are only reported on countdown renderings.
    """
    stop = timing.stop
    td = timing.time_difference
    clock_minutes = stop.estimated.hour * 60 + stop.estimated.minute

    def ranked(state: ArrivalState, text: str, kind: DisplayKind) -> RankedArrival:
        entry = ArrivalEntry(
            route_key=timing.route_key,
            route_name=stop.variant_name,
            state=state,
            display_text=text,
        )
        return RankedArrival(entry=entry, kind=kind, time_difference=td, clock_minutes=clock_minutes)

    if stop.cancelled:
        return ranked(ArrivalState.CANCELLED, "", DisplayKind.CANCELLED)

    in_window = td <= config.next_bus_window_minutes

    if countdown and (td < 0 or in_window):
        text, kind = format_countdown(td, config), DisplayKind.COUNTDOWN
    else:
        text, kind = format_clock_time(stop.estimated, config), DisplayKind.CLOCK

    state = ArrivalState.OK
    if countdown and in_window and timing.delay != 0:
        state = ArrivalState.LATE if timing.delay > 0 else ArrivalState.EARLY
        text, kind = format_countdown(td, config), DisplayKind.COUNTDOWN

    if -config.due_grace_minutes <= td <= 0:
        text, kind = config.due_label, DisplayKind.DUE

    return ranked(state, text, kind)


def normalize(
    raw: Any,
    now: datetime,
    time_format: TimeFormat = TimeFormat.MINUTES_REMAINING,
    config: NormalizerConfig = DEFAULT_CONFIG,
) -> list[ArrivalEntry]:
    """
    Normalize a stop-schedule payload using a single time format.

    MINUTES_REMAINING renders departures inside the next-bus window as
    "N min." and later ones as clock times; CLOCK_TIME renders every
    departure as a clock time. Departures inside the due window read "Due"
    in both formats.
    """
    countdown = TimeFormat(time_format) is TimeFormat.MINUTES_REMAINING
    ranked = [_rank(t, config, countdown=countdown) for t in _timings(raw, now, config)]
    return order_single_format(ranked)


def normalize_mixed_format(
    raw: Any,
    now: datetime,
    config: NormalizerConfig = DEFAULT_CONFIG,
) -> list[ArrivalEntry]:
    """
    Normalize with clock times everywhere except the soonest in-window
    departure of each (route key, route name) variant, which gets the
    countdown instead. A "Due" departure uses up its variant's countdown.
    """
    timings = _timings(raw, now, config)

    # Stable by minutes so "first seen" is the soonest departure of each variant
    soonest_first = sorted(timings, key=lambda t: t.time_difference)

    counted: set[tuple[str, str]] = set()
    ranked: list[RankedArrival] = []
    for timing in soonest_first:
        variant = (timing.route_key, timing.stop.variant_name)
        item = _rank(timing, config, countdown=variant not in counted)
        if item.kind in (DisplayKind.COUNTDOWN, DisplayKind.DUE):
            counted.add(variant)
        ranked.append(item)

    return order_mixed_format(ranked)
