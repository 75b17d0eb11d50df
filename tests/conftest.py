from datetime import datetime, timedelta

import httpx
import pytest

from peektransit.transit.client import TransitClient
from peektransit.transit.config import TransitConfig

NOW = datetime(2025, 3, 14, 12, 0, 0)


def stamp(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%S")


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_stop():
    """Scheduled-stop dict; times are minute offsets from `base` (NOW by default)."""

    def _make(
        key="60-1-A",
        name="Downtown",
        *,
        eta=5,
        delay=0,
        cancelled=False,
        base=NOW,
    ) -> dict:
        estimated = base + timedelta(minutes=eta)
        scheduled = estimated - timedelta(minutes=delay)
        return {
            "key": "12345-1",
            "cancelled": "true" if cancelled else "false",
            "variant": {"key": key, "name": name},
            "times": {
                "departure": {"estimated": stamp(estimated), "scheduled": stamp(scheduled)},
                "arrival": {"estimated": stamp(estimated), "scheduled": stamp(scheduled)},
            },
        }

    return _make


@pytest.fixture
def make_payload():
    def _make(*stops: dict, split_routes: bool = False) -> dict:
        if split_routes:
            route_schedules = [{"scheduled-stops": [s]} for s in stops]
        else:
            route_schedules = [{"scheduled-stops": list(stops)}]
        return {
            "stop-schedule": {
                "stop": {"key": 10064, "name": "Portage@Main"},
                "route-schedules": route_schedules,
            },
            "query-time": stamp(NOW),
        }

    return _make


@pytest.fixture
def transit_config() -> TransitConfig:
    return TransitConfig(
        base_url="https://api.test/v3",
        api_key="test-key-123456",
        connect_timeout=1.0,
        read_timeout=1.0,
        write_timeout=1.0,
        pool_timeout=1.0,
        retries=3,
        backoff_base=0.0,
        schedule_window_hours=6,
        timezone="America/Winnipeg",
        stops_distance_meters=550,
        max_nearby_stops=25,
        max_search_stops=10,
    )


@pytest.fixture
def no_sleep(monkeypatch):
    slept: list[float] = []
    monkeypatch.setattr("peektransit.transit.http.time.sleep", slept.append)
    return slept


@pytest.fixture
def mock_client(transit_config):
    """Build a TransitClient whose HTTP calls go to `handler`."""
    clients: list[TransitClient] = []

    def _make(handler, cfg: TransitConfig | None = None) -> TransitClient:
        client = TransitClient(cfg or transit_config, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make

    for c in clients:
        c.close()
