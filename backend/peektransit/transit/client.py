import logging
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import quote

import httpx

from .config import TransitConfig, load_config
from .errors import TransitParseError
from .http import configure_logging_if_needed, get_with_retry, make_client

logger = logging.getLogger(__name__)

API_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_api_timestamp(moment: datetime) -> str:
    return moment.replace(tzinfo=None).strftime(API_TIMESTAMP_FORMAT)


def first_distance(stop: dict) -> float:
    distances = stop.get("distances") or {}
    if not isinstance(distances, dict) or not distances:
        return float("inf")
    try:
        return float(next(iter(distances.values())))
    except (TypeError, ValueError):
        return float("inf")


EXCLUDED_VARIANT_PREFIXES = ("S", "W")


def _is_excluded_variant(variant: dict) -> bool:
    key = variant.get("key")
    return isinstance(key, str) and key.startswith(EXCLUDED_VARIANT_PREFIXES)


def _widen_names(stops: list[dict]) -> list[dict]:
    out = []
    for stop in stops:
        name = stop.get("name")
        if isinstance(name, str):
            stop = {**stop, "name": name.replace("@", " @ ")}
        out.append(stop)
    return out


class TransitClient:
    """
    Winnipeg Transit v3 API:
      - GET /stops/{n}/schedule.json for a stop's departures in the next few hours
      - GET /stops.json for stops near a point
      - GET /stops:{query}.json for stop search
      - GET /variants.json for the variants serving a stop
    """

    def __init__(self, cfg: Optional[TransitConfig] = None, *, transport: Optional[httpx.BaseTransport] = None):
        configure_logging_if_needed()
        self.cfg = cfg or load_config()
        self._client = make_client(self.cfg, transport=transport)

        logger.info(
            "Transit API configured base_url=%s timeouts(connect=%.1f read=%.1f) retries=%d "
            "backoff_base=%.2f schedule_window_hours=%d",
            self.cfg.base_url,
            self.cfg.connect_timeout,
            self.cfg.read_timeout,
            self.cfg.retries,
            self.cfg.backoff_base,
            self.cfg.schedule_window_hours,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TransitClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _get_object(self, path: str, params: dict) -> dict:
        body = get_with_retry(self.cfg, self._client, path, params)
        if not isinstance(body, dict):
            raise TransitParseError(f"GET {path} returned {type(body).__name__}, expected an object")
        return body

    def get_stop_schedule(self, stop_number: int, now: datetime) -> dict:
        """
        Raw schedule payload for departures between `now` and now + schedule_window_hours.
        `now` is local wall-clock time at the transit agency.
        """
        end = now + timedelta(hours=self.cfg.schedule_window_hours)
        logger.info("Fetching schedule stop=%s window=%s..%s", stop_number, format_api_timestamp(now), format_api_timestamp(end))
        return self._get_object(
            f"/stops/{int(stop_number)}/schedule.json",
            {
                "start": format_api_timestamp(now),
                "end": format_api_timestamp(end),
                "usage": "short",
            },
        )

    def get_nearby_stops(self, lat: float, lon: float, *, short: bool = True) -> list[dict]:
        body = self._get_object(
            "/stops.json",
            {
                "lat": str(lat),
                "lon": str(lon),
                "distance": str(self.cfg.stops_distance_meters),
                "walking": "false",
                "usage": "short" if short else "long",
            },
        )
        stops = body.get("stops")
        if not isinstance(stops, list):
            raise TransitParseError("Invalid stops data format")

        stops = [s for s in stops if isinstance(s, dict)]
        if short:
            stops = _widen_names(stops)
        stops.sort(key=first_distance)
        return stops[: self.cfg.max_nearby_stops]

    def search_stops(self, query: str, *, short: bool = True) -> list[dict]:
        body = self._get_object(
            f"/stops:{quote(query, safe='')}.json",
            {"usage": "short" if short else "long"},
        )
        stops = body.get("stops")
        if not isinstance(stops, list):
            raise TransitParseError("Invalid stops data format")

        stops = [s for s in stops if isinstance(s, dict)]
        if short:
            stops = _widen_names(stops)
        return stops[: self.cfg.max_search_stops]

    def get_stop_variants(self, stop_number: int, now: datetime) -> list[dict]:
        """
        Variants serving a stop between `now` and now + schedule_window_hours.
        School ("S...") and special ("W...") variants are left out.
        """
        end = now + timedelta(hours=self.cfg.schedule_window_hours)
        body = self._get_object(
            "/variants.json",
            {
                "start": format_api_timestamp(now),
                "end": format_api_timestamp(end),
                "stop": str(int(stop_number)),
                "usage": "short",
            },
        )
        variants = body.get("variants")
        if not isinstance(variants, list):
            raise TransitParseError("Invalid variants data format")

        return [v for v in variants if isinstance(v, dict) and not _is_excluded_variant(v)]

    def get_variants_for_stops(self, stops: list[dict], now: datetime) -> list[dict]:
        """
        Copies of `stops` with a "variants" list added. Stops without a number
        or without any remaining variant are left out.
        """
        enriched = []
        for stop in stops:
            number = stop.get("number")
            if not isinstance(number, int):
                continue
            variants = self.get_stop_variants(number, now)
            if variants:
                enriched.append({**stop, "variants": variants})
        logger.info("Variants fetched for %d of %d stops", len(enriched), len(stops))
        return enriched
