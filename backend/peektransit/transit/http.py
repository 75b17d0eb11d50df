import logging
import random
import re
import time
from typing import Any, Optional

import httpx

from .config import TransitConfig
from .errors import InvalidResponseError, ServiceUnavailableError, TransitParseError

logger = logging.getLogger(__name__)

RETRY_STATUSES = {429, 500, 502, 503, 504, 520, 522, 524}

_API_KEY_RE = re.compile(r"(api-key=)([^&]+)")


def mask_api_key(url: Optional[str]) -> Optional[str]:
    if not url:
        return url

    def _mask(m: re.Match) -> str:
        token = m.group(2)
        if len(token) <= 6:
            return f"{m.group(1)}****"
        return f"{m.group(1)}****{token[-4:]}"

    return _API_KEY_RE.sub(_mask, url)


def configure_logging_if_needed() -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level="INFO",
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def log_request(request: httpx.Request) -> None:
    logger.debug("HTTP %s %s", request.method, mask_api_key(str(request.url)))


def make_client(cfg: TransitConfig, *, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    timeout = httpx.Timeout(
        connect=cfg.connect_timeout,
        read=cfg.read_timeout,
        write=cfg.write_timeout,
        pool=cfg.pool_timeout,
    )
    return httpx.Client(
        base_url=cfg.base_url,
        params={"api-key": cfg.api_key},
        timeout=timeout,
        headers={"Accept": "application/json"},
        event_hooks={"request": [log_request]},
        transport=transport,
    )


def sleep_backoff(cfg: TransitConfig, *, attempt: int, path: str) -> None:
    sleep_s = cfg.backoff_base * (2 ** (attempt - 1))
    sleep_s += random.uniform(0, cfg.backoff_base)
    logger.info("Sleeping %.2fs before retrying %s", sleep_s, path)
    time.sleep(sleep_s)


def get_with_retry(cfg: TransitConfig, client: httpx.Client, path: str, params: Optional[dict] = None) -> Any:
    last_err: Exception | None = None
    attempts = max(cfg.retries, 1)

    for attempt in range(1, attempts + 1):
        t0 = time.perf_counter()
        try:
            r = client.get(path, params=params)
            elapsed = time.perf_counter() - t0

            if r.status_code in RETRY_STATUSES:
                snippet = (r.text or "")[:300]
                logger.warning(
                    "Retryable HTTP %d (attempt %d/%d) GET %s after %.2fs body_snippet=%r",
                    r.status_code,
                    attempt,
                    attempts,
                    path,
                    elapsed,
                    snippet,
                )
                raise httpx.HTTPStatusError("Retryable status", request=r.request, response=r)

            logger.debug("GET %s completed in %.2fs status=%d", path, elapsed, r.status_code)

            r.raise_for_status()
            try:
                return r.json()
            except ValueError as e:
                raise TransitParseError(f"GET {path} returned a non-JSON body") from e

        except (httpx.ReadTimeout, httpx.ConnectTimeout) as e:
            elapsed = time.perf_counter() - t0
            last_err = e
            logger.warning(
                "%s (attempt %d/%d) GET %s after %.2fs",
                e.__class__.__name__,
                attempt,
                attempts,
                path,
                elapsed,
            )

        except httpx.HTTPStatusError as e:
            elapsed = time.perf_counter() - t0
            last_err = e
            status = e.response.status_code
            if status not in RETRY_STATUSES:
                snippet = (e.response.text or "")[:300]
                logger.error(
                    "Non-retryable HTTP %s GET %s after %.2fs body_snippet=%r",
                    status,
                    path,
                    elapsed,
                    snippet,
                )
                raise InvalidResponseError(f"GET {path} failed with HTTP {status}", status_code=status) from e

        except httpx.TransportError as e:
            elapsed = time.perf_counter() - t0
            last_err = e
            logger.warning(
                "Request failed (attempt %d/%d) GET %s after %.2fs error=%r",
                attempt,
                attempts,
                path,
                elapsed,
                e,
            )

        if attempt < attempts:
            sleep_backoff(cfg, attempt=attempt, path=path)

    raise ServiceUnavailableError(f"GET {path} failed after {attempts} attempts") from last_err
