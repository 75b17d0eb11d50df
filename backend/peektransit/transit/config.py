import os
from dataclasses import dataclass

from .errors import TransitConfigError


@dataclass(frozen=True)
class TransitConfig:
    base_url: str
    api_key: str

    connect_timeout: float
    read_timeout: float
    write_timeout: float
    pool_timeout: float

    retries: int
    backoff_base: float

    schedule_window_hours: int
    timezone: str

    stops_distance_meters: int
    max_nearby_stops: int
    max_search_stops: int


def load_config() -> TransitConfig:
    api_key = os.getenv("TRANSIT_API_KEY")
    if not api_key:
        raise TransitConfigError("TRANSIT_API_KEY not set in backend/.env")

    return TransitConfig(
        base_url=os.getenv("TRANSIT_BASE_URL", "https://api.winnipegtransit.com/v3"),
        api_key=api_key,
        connect_timeout=float(os.getenv("TRANSIT_CONNECT_TIMEOUT_SECONDS", "10")),
        read_timeout=float(os.getenv("TRANSIT_READ_TIMEOUT_SECONDS", "20")),
        write_timeout=float(os.getenv("TRANSIT_WRITE_TIMEOUT_SECONDS", "10")),
        pool_timeout=float(os.getenv("TRANSIT_POOL_TIMEOUT_SECONDS", "10")),
        retries=int(os.getenv("TRANSIT_RETRIES", "3")),
        backoff_base=float(os.getenv("TRANSIT_BACKOFF_BASE_SECONDS", "0.5")),
        schedule_window_hours=int(os.getenv("TRANSIT_SCHEDULE_WINDOW_HOURS", "6")),
        timezone=os.getenv("TRANSIT_TIMEZONE", "America/Winnipeg"),
        stops_distance_meters=int(os.getenv("TRANSIT_STOPS_DISTANCE_METERS", "550")),
        max_nearby_stops=int(os.getenv("TRANSIT_MAX_NEARBY_STOPS", "25")),
        max_search_stops=int(os.getenv("TRANSIT_MAX_SEARCH_STOPS", "10")),
    )
