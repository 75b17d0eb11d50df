from pydantic import BaseModel, Field
from typing import Literal, Optional

from peektransit.schedule.types import ArrivalEntry


class ArrivalRow(BaseModel):
    route_key: str = Field(..., description="Short route key, e.g. 60 or B")
    route_name: str
    state: Literal["ok", "late", "early", "cancelled"]
    display_text: str = Field(..., description='"4 min.", "Due", "9:05 PM" or "" when cancelled')

    @classmethod
    def from_entry(cls, entry: ArrivalEntry) -> "ArrivalRow":
        return cls(
            route_key=entry.route_key,
            route_name=entry.route_name,
            state=entry.state.value,
            display_text=entry.display_text,
        )


class StopSchedule(BaseModel):
    stop_number: int
    generated_at: str = Field(..., description="Local wall-clock time the rows were computed for")
    time_format: Literal["minutes", "clock", "mixed"]
    arrivals: list[ArrivalRow]


class StopSummary(BaseModel):
    number: int
    name: str
    direction: Optional[str] = None
    distance_meters: Optional[float] = None


class StopVariant(BaseModel):
    key: str = Field(..., description="Variant key as the transit API reports it, e.g. 60-1-A")
    route_key: str
    name: str
