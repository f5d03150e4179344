"""
Multi-document loading with bounded retries.

The mandatory document must load or the pass fails; optional documents that
never load are simply left out of the result.
"""

from __future__ import annotations

import asyncio
from pathlib import PurePosixPath
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from .errors import CriticalDataError, FetchError
from .fetcher import fetch_json
from .logging_setup import get_logger, log_context
from .models import LoadResult

log = get_logger(__name__)

RETRYABLE = (FetchError, httpx.HTTPError)

SleepFn = Callable[[float], Awaitable[None]]
MandatoryHook = Callable[[str, Any], None]


def document_key(identifier: str) -> str:
    """Logical key of a document: file name without directory or extension."""
    return PurePosixPath(identifier.split("?", 1)[0]).stem


class DataLoader:
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if retry_attempts < 1:
            raise ValueError("retry_attempts must be >= 1")
        self.client = client
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep

    def _retrying(self, identifier: str) -> AsyncRetrying:
        def before_sleep(state: RetryCallState) -> None:
            exc = state.outcome.exception() if state.outcome else None
            log.warning(
                "load_attempt_failed",
                identifier=identifier,
                attempt=state.attempt_number,
                error=str(exc),
                retry_in=state.next_action.sleep if state.next_action else None,
            )

        # delay after attempt n is retry_delay * n
        return AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            retry=retry_if_exception_type(RETRYABLE),
            before_sleep=before_sleep,
            sleep=self._sleep,
            reraise=True,
        )

    async def load_document(self, identifier: str, *, mandatory: bool = False) -> LoadResult:
        """
        Fetch and parse one document, retrying transport and syntax failures.

        Mandatory documents raise CriticalDataError once every attempt has
        failed. Optional ones come back as an absent LoadResult instead.
        """
        key = document_key(identifier)
        attempts = 0

        with log_context(identifier=identifier):
            try:
                async for attempt in self._retrying(identifier):
                    with attempt:
                        attempts = attempt.retry_state.attempt_number
                        log.info("load_attempt", attempt=attempts)
                        data = await fetch_json(self.client, identifier)
            except RETRYABLE as e:
                last_error = str(e) or e.__class__.__name__
                if mandatory:
                    log.error("critical_load_failed", attempts=attempts, error=last_error)
                    raise CriticalDataError(identifier, last_error) from e
                log.warning("optional_load_failed", attempts=attempts, error=last_error)
                return LoadResult(identifier=identifier, key=key, error=last_error, attempts=attempts)

        log.info("loaded", key=key, attempts=attempts)
        return LoadResult(identifier=identifier, key=key, data=data, attempts=attempts)

    async def load_all(
        self,
        mandatory_id: str,
        optional_ids: Iterable[str],
        *,
        on_mandatory: Optional[MandatoryHook] = None,
    ) -> Dict[str, Any]:
        """
        Load the mandatory document, hand it to `on_mandatory`, then load the
        optional documents in list order.

        Returns a mapping of document key to parsed data. Optional documents
        that failed to load have no key at all.
        """
        data: Dict[str, Any] = {}

        primary = await self.load_document(mandatory_id, mandatory=True)
        if on_mandatory is not None:
            on_mandatory(primary.key, primary.data)
        if primary.data is not None:
            data[primary.key] = primary.data

        for identifier in optional_ids:
            result = await self.load_document(identifier)
            if result.is_absent or result.data is None:
                log.warning("optional_document_missing", identifier=identifier)
                continue
            data[result.key] = result.data

        return data
