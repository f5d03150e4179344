from __future__ import annotations

from typing import Any, Optional

import httpx

from .errors import FetchError
from .validator import parse_and_validate


DEFAULT_HEADERS = {
    "User-Agent": "internet-timeline/0.1",
    "Accept": "application/json,text/plain;q=0.9,*/*;q=0.8",
}

DEFAULT_TIMEOUT = httpx.Timeout(connect=10.0, read=20.0, write=10.0, pool=10.0)


def build_client(
    base_url: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: httpx.Timeout = DEFAULT_TIMEOUT,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        headers=DEFAULT_HEADERS,
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
    )


async def fetch_json(client: httpx.AsyncClient, identifier: str) -> Any:
    """
    One fetch + parse attempt.

    Raises FetchError for a non-success status or a body that is not valid
    JSON; network failures surface as httpx.HTTPError. Both are retryable.
    """
    r = await client.get(identifier)
    if not r.is_success:
        raise FetchError(f"HTTP {r.status_code}: {r.reason_phrase}")

    text = r.text
    # A leading byte-order mark is not part of the JSON text.
    if text.startswith("\ufeff"):
        text = text[1:]

    parsed = parse_and_validate(text)
    if not parsed.success:
        raise FetchError(parsed.error or "JSON parse error")
    return parsed.data
