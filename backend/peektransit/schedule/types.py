from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ArrivalState(str, Enum):
    OK = "ok"
    LATE = "late"
    EARLY = "early"
    CANCELLED = "cancelled"


class TimeFormat(str, Enum):
    MINUTES_REMAINING = "minutes"   # "4 min." inside the next-bus window, clock time after
    CLOCK_TIME = "clock"            # always "H:MM AM/PM"


@dataclass(frozen=True)
class ScheduledStop:
    # Decoded once from the API payload; see schedule.decode
    variant_key: str
    variant_name: str
    cancelled: bool
    estimated: datetime              # naive local wall clock
    scheduled: datetime              # naive local wall clock


@dataclass(frozen=True)
class ArrivalEntry:
    route_key: str                   # "60", "B"
    route_name: str                  # variant name, unchanged
    state: ArrivalState
    display_text: str                # "", "4 min.", "1 min. ago", "Due", "9:05 PM"
