from __future__ import annotations

import logging
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from peektransit.api.deps import get_normalizer_config, get_now, get_transit_client
from peektransit.api.v1.schemas.schedule import ArrivalRow, StopSchedule, StopSummary, StopVariant
from peektransit.schedule.config import NormalizerConfig
from peektransit.schedule.normalizer import normalize, normalize_mixed_format, normalize_route_key
from peektransit.schedule.types import TimeFormat
from peektransit.transit.client import TransitClient, first_distance
from peektransit.transit.errors import TransitError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/stops", tags=["stops"])


def to_summaries(stops: list[dict]) -> list[StopSummary]:
    out: list[StopSummary] = []
    for stop in stops:
        number = stop.get("number")
        name = stop.get("name")
        if not isinstance(number, int) or not isinstance(name, str):
            continue
        distance = first_distance(stop)
        out.append(
            StopSummary(
                number=number,
                name=name,
                direction=stop.get("direction"),
                distance_meters=None if distance == float("inf") else distance,
            )
        )
    return out


def upstream_error(e: TransitError) -> HTTPException:
    logger.warning("Transit API error: %r", e)
    return HTTPException(status_code=502, detail=f"Transit service error: {e}")


@router.get("/nearby", response_model=list[StopSummary])
def nearby_stops(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    client: TransitClient = Depends(get_transit_client),
):
    try:
        stops = client.get_nearby_stops(lat, lon)
    except TransitError as e:
        raise upstream_error(e)
    return to_summaries(stops)


@router.get("/search", response_model=list[StopSummary])
def search_stops(
    q: str = Query(..., min_length=1, max_length=100),
    client: TransitClient = Depends(get_transit_client),
):
    try:
        stops = client.search_stops(q)
    except TransitError as e:
        raise upstream_error(e)
    return to_summaries(stops)


@router.get("/{stop_number}/schedule", response_model=StopSchedule)
def stop_schedule(
    stop_number: int,
    time_format: Literal["minutes", "clock", "mixed"] = Query("minutes"),
    client: TransitClient = Depends(get_transit_client),
    config: NormalizerConfig = Depends(get_normalizer_config),
    now: datetime = Depends(get_now),
):
    if stop_number <= 0:
        raise HTTPException(status_code=400, detail="stop_number must be positive")

    try:
        raw = client.get_stop_schedule(stop_number, now)
    except TransitError as e:
        raise upstream_error(e)

    if time_format == "mixed":
        entries = normalize_mixed_format(raw, now, config)
    else:
        entries = normalize(raw, now, TimeFormat(time_format), config)

    return StopSchedule(
        stop_number=stop_number,
        generated_at=now.isoformat(timespec="seconds"),
        time_format=time_format,
        arrivals=[ArrivalRow.from_entry(e) for e in entries],
    )


@router.get("/{stop_number}/variants", response_model=list[StopVariant])
def stop_variants(
    stop_number: int,
    client: TransitClient = Depends(get_transit_client),
    now: datetime = Depends(get_now),
):
    if stop_number <= 0:
        raise HTTPException(status_code=400, detail="stop_number must be positive")

    try:
        variants = client.get_stop_variants(stop_number, now)
    except TransitError as e:
        raise upstream_error(e)

    out: list[StopVariant] = []
    for v in variants:
        key, name = v.get("key"), v.get("name")
        if not isinstance(key, str) or not isinstance(name, str):
            continue
        out.append(StopVariant(key=key, route_key=normalize_route_key(key), name=name))
    return out
