import os
from dataclasses import dataclass

from .types import ArrivalState


@dataclass(frozen=True)
class NormalizerConfig:
    due_grace_minutes: int = 1
    next_bus_window_minutes: int = 15

    ok_label: str = "Ok"
    late_label: str = "Late"
    early_label: str = "Early"
    cancelled_label: str = "Cancelled"
    due_label: str = "Due"

    am_label: str = "AM"
    pm_label: str = "PM"
    minutes_label: str = "min."
    ago_label: str = "ago"

    separator: str = " ---- "

    # Placeholder rows for selected widget variants with nothing scheduled
    schedule_window_hours: int = 6

    def state_label(self, state: ArrivalState) -> str:
        return {
            ArrivalState.OK: self.ok_label,
            ArrivalState.LATE: self.late_label,
            ArrivalState.EARLY: self.early_label,
            ArrivalState.CANCELLED: self.cancelled_label,
        }[state]

    def state_for_label(self, label: str) -> ArrivalState:
        for state in ArrivalState:
            if self.state_label(state) == label:
                return state
        raise ValueError(f"Unknown arrival state label: {label!r}")


DEFAULT_CONFIG = NormalizerConfig()


def load_normalizer_config() -> NormalizerConfig:
    """
    Build a NormalizerConfig from SCHEDULE_* environment variables.
    Only the service layers call this; the normalizer itself takes the config as an argument.
    """
    return NormalizerConfig(
        due_grace_minutes=int(os.getenv("SCHEDULE_DUE_GRACE_MINUTES", "1")),
        next_bus_window_minutes=int(os.getenv("SCHEDULE_NEXT_BUS_WINDOW_MINUTES", "15")),
        separator=os.getenv("SCHEDULE_SEPARATOR", " ---- "),
        schedule_window_hours=int(os.getenv("TRANSIT_SCHEDULE_WINDOW_HOURS", "6")),
    )
