"""HTTP utilities for checking external links with retry logic and connection pooling."""

from __future__ import annotations

import asyncio
import logging
from typing import Final, Iterable

import httpx

from coursebook.config import (
    COURSEBOOK_FETCH_BACKOFF_S,
    COURSEBOOK_FETCH_CONCURRENCY,
    COURSEBOOK_FETCH_MAX_RETRIES,
    COURSEBOOK_FETCH_TIMEOUT_S,
    COURSEBOOK_USER_AGENT,
)
from coursebook.exceptions import FetchError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


def create_client() -> httpx.AsyncClient:
    """Create the shared client used for one link-checking run."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(COURSEBOOK_FETCH_TIMEOUT_S),
        headers={"User-Agent": COURSEBOOK_USER_AGENT},
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    )


async def fetch_status(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
) -> int:
    """Return the HTTP status code of ``url``, retrying transient failures.

    A ``HEAD`` request is tried first; servers that reject it with a client
    error are asked again with ``GET``.

    Args:
        url: The URL to check.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.

    Returns:
        The final status code. A retryable status that persists through all
        attempts is returned as is.

    Raises:
        FetchError: If every attempt fails with a transport error.
    """
    last_exc: Exception | None = None
    last_status: int | None = None

    async def do_fetch(http_client: httpx.AsyncClient) -> int:
        nonlocal last_exc, last_status

        for attempt in range(COURSEBOOK_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.head(url)
                if 400 <= response.status_code < 500 and response.status_code not in RETRY_STATUS_CODES:
                    response = await http_client.get(url)

                if response.status_code not in RETRY_STATUS_CODES:
                    return response.status_code
                last_status = response.status_code
                last_exc = FetchError(f"HTTP {response.status_code} from {url}")
            except httpx.RequestError as exc:
                last_exc = exc

            if attempt < COURSEBOOK_FETCH_MAX_RETRIES:
                backoff = COURSEBOOK_FETCH_BACKOFF_S * (2**attempt)
                await asyncio.sleep(backoff)

        if last_status is not None:
            return last_status
        raise FetchError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with create_client() as new_client:
        return await do_fetch(new_client)


async def check_urls(
    urls: Iterable[str],
    *,
    concurrency: int = COURSEBOOK_FETCH_CONCURRENCY,
) -> dict[str, int | str]:
    """Check many URLs concurrently over one pooled client.

    Returns:
        Mapping of URL to its status code, or to an error message when the
        URL could not be fetched at all.
    """
    unique_urls = list(dict.fromkeys(urls))
    if not unique_urls:
        return {}

    semaphore = asyncio.Semaphore(max(1, concurrency))

    async with create_client() as client:

        async def check(url: str) -> tuple[str, int | str]:
            async with semaphore:
                try:
                    return url, await fetch_status(url, client=client)
                except FetchError as exc:
                    logger.debug("Link check failed for %s: %s", url, exc)
                    return url, str(exc)

        results = await asyncio.gather(*(check(url) for url in unique_urls))

    return dict(results)
