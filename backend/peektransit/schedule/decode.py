import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from .types import ScheduledStop

logger = logging.getLogger(__name__)


def parse_local_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse "YYYY-MM-DDTHH:MM:SS" as a naive local wall-clock datetime.
    An explicit offset, if present, is dropped so estimated/scheduled/now stay comparable.
    Returns None for anything unparseable.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def _parse_cancelled(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def decode_scheduled_stop(stop: Any) -> Optional[ScheduledStop]:
    if not isinstance(stop, Mapping):
        logger.debug("scheduled-stop skipped: not an object (%s)", type(stop).__name__)
        return None

    variant = stop.get("variant")
    if not isinstance(variant, Mapping):
        logger.debug("scheduled-stop skipped: missing variant")
        return None

    key = variant.get("key")
    name = variant.get("name")
    if not isinstance(key, str) or not isinstance(name, str):
        logger.debug("scheduled-stop skipped: variant key/name missing in %r", variant)
        return None

    cancelled = _parse_cancelled(stop.get("cancelled"))
    if cancelled is None:
        logger.debug("scheduled-stop %s skipped: bad cancelled flag %r", key, stop.get("cancelled"))
        return None

    times = stop.get("times")
    departure = times.get("departure") if isinstance(times, Mapping) else None
    if not isinstance(departure, Mapping):
        logger.debug("scheduled-stop %s skipped: missing times.departure", key)
        return None

    estimated = parse_local_timestamp(departure.get("estimated"))
    scheduled = parse_local_timestamp(departure.get("scheduled"))
    if estimated is None or scheduled is None:
        logger.debug(
            "scheduled-stop %s skipped: unparseable departure estimated=%r scheduled=%r",
            key,
            departure.get("estimated"),
            departure.get("scheduled"),
        )
        return None

    return ScheduledStop(
        variant_key=key,
        variant_name=name,
        cancelled=cancelled,
        estimated=estimated,
        scheduled=scheduled,
    )


def decode_schedule(raw: Any) -> list[ScheduledStop]:
    """
    Flatten a stop-schedule payload into ScheduledStops, in payload order.

    Malformed entries are skipped one at a time. A payload without a usable
    "stop-schedule" tree decodes to an empty list.
    """
    if not isinstance(raw, Mapping):
        logger.debug("schedule payload ignored: not an object (%s)", type(raw).__name__)
        return []

    stop_schedule = raw.get("stop-schedule")
    if not isinstance(stop_schedule, Mapping):
        logger.debug("schedule payload has no stop-schedule")
        return []

    route_schedules = stop_schedule.get("route-schedules") or []
    if not isinstance(route_schedules, list):
        return []

    out: list[ScheduledStop] = []
    skipped = 0
    for route_schedule in route_schedules:
        if not isinstance(route_schedule, Mapping):
            continue
        scheduled_stops = route_schedule.get("scheduled-stops") or []
        if not isinstance(scheduled_stops, list):
            continue

        for stop in scheduled_stops:
            decoded = decode_scheduled_stop(stop)
            if decoded is None:
                skipped += 1
                continue
            out.append(decoded)

    if skipped:
        logger.debug("decoded %d scheduled stops (skipped=%d)", len(out), skipped)
    return out
