import logging
from datetime import datetime
from functools import lru_cache

from fastapi import Depends, HTTPException

from peektransit.core.time import local_now
from peektransit.schedule.config import NormalizerConfig, load_normalizer_config
from peektransit.transit.client import TransitClient
from peektransit.transit.errors import TransitConfigError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def shared_transit_client() -> TransitClient:
    # One pooled httpx client per process; closed by the app lifespan
    return TransitClient()


def close_shared_transit_client() -> None:
    if shared_transit_client.cache_info().currsize:
        shared_transit_client().close()
        shared_transit_client.cache_clear()


def get_transit_client() -> TransitClient:
    try:
        return shared_transit_client()
    except TransitConfigError as e:
        logger.error("Transit API not configured: %s", e)
        raise HTTPException(status_code=502, detail=f"Transit service error: {e}")


def get_normalizer_config() -> NormalizerConfig:
    return load_normalizer_config()


def get_now(client: TransitClient = Depends(get_transit_client)) -> datetime:
    return local_now(client.cfg.timezone)
