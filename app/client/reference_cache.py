"""
Time-windowed cache for selector reference lists (years, divisions, industries).

Each key holds ``(future, inserted_at)``. The first caller for a key runs the
fetch; concurrent callers wait on the same future, so only one request is in
flight per key. Entries expire a fixed window after insertion regardless of
how often they are read, and expiry is checked on lookup.
"""
import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from app.client.api_client import ApiClientError, MeterApiClient
from app.config import settings
from app.schemas.common import DropdownOption

logger = logging.getLogger(__name__)

REFERENCE_ENDPOINTS = {
    "years": f"{settings.API_PREFIX}/years",
    "divisions": f"{settings.API_PREFIX}/divisions",
    "industries": f"{settings.API_PREFIX}/industries",
}


@dataclass
class ReferenceResult:
    """
    Outcome of a reference list lookup.

    ``items`` is empty both when the list is genuinely empty and when every
    attempt failed; ``ok`` and ``error`` tell the two apart.
    """
    items: List[DropdownOption] = field(default_factory=list)
    ok: bool = True
    error: Optional[str] = None

    def copy(self) -> "ReferenceResult":
        """Per-caller copy, so callers can modify ``items`` without touching the cache."""
        return ReferenceResult(items=list(self.items), ok=self.ok, error=self.error)


@dataclass
class _CacheEntry:
    future: Future
    inserted_at: float


class ReferenceDataCache:
    """Shared, expiring cache of reference lists fetched through ``MeterApiClient``."""

    def __init__(
        self,
        client: MeterApiClient,
        ttl: Optional[float] = None,
        retry_count: Optional[int] = None,
        retry_delay: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.client = client
        self.ttl = ttl if ttl is not None else settings.REFERENCE_CACHE_TTL_SECONDS
        self.retry_count = retry_count if retry_count is not None else settings.REFERENCE_RETRY_COUNT
        self.retry_delay = retry_delay if retry_delay is not None else settings.REFERENCE_RETRY_DELAY_SECONDS
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._entries: Dict[str, _CacheEntry] = {}
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        """True while any reference fetch is outstanding."""
        with self._lock:
            return self._in_flight > 0

    def get_years(self) -> ReferenceResult:
        return self.get("years")

    def get_divisions(self) -> ReferenceResult:
        return self.get("divisions")

    def get_industries(self) -> ReferenceResult:
        return self.get("industries")

    def get(self, key: str) -> ReferenceResult:
        """Return the cached list for ``key``, fetching it if absent or expired."""
        if key not in REFERENCE_ENDPOINTS:
            raise KeyError(f"Unknown reference list: {key}")

        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            owner = entry is None or now - entry.inserted_at >= self.ttl
            if owner:
                entry = _CacheEntry(future=Future(), inserted_at=now)
                self._entries[key] = entry
                self._in_flight += 1

        if not owner:
            logger.debug(f"Using cached data for {key}")
            return entry.future.result().copy()

        try:
            result = self._fetch_with_retry(key)
        except Exception as e:
            entry.future.set_exception(e)
            self._evict(key, entry)
            raise
        finally:
            with self._lock:
                self._in_flight -= 1

        entry.future.set_result(result)
        if not result.ok:
            # Failures are reported to everyone waiting, then forgotten so the
            # next lookup retries instead of serving the failure for a full window.
            self._evict(key, entry)
        return result.copy()

    def clear_cache(self) -> None:
        """Drop every entry; the next lookup for each key fetches again."""
        with self._lock:
            self._entries.clear()
        logger.info("All reference data cache cleared")

    def test_connection(self):
        """Call the API liveness probe; raises ``ApiClientError`` on failure."""
        return self.client.health()

    def _evict(self, key: str, entry: _CacheEntry) -> None:
        with self._lock:
            if self._entries.get(key) is entry:
                del self._entries[key]

    def _fetch_with_retry(self, key: str) -> ReferenceResult:
        endpoint = REFERENCE_ENDPOINTS[key]
        attempts = 1 + max(self.retry_count, 0)

        def log_retry(retry_state):
            error = retry_state.outcome.exception()
            logger.warning(f"Retry attempt {retry_state.attempt_number} for {endpoint}: {error.message}")

        try:
            for attempt in Retrying(
                retry=retry_if_exception_type(ApiClientError),
                stop=stop_after_attempt(attempts),
                wait=wait_fixed(self.retry_delay),
                sleep=self._sleep,
                before_sleep=log_retry,
                reraise=True,
            ):
                with attempt:
                    data = self.client.get_json(endpoint)
        except ApiClientError as e:
            logger.error(f"Failed to fetch {key} after {attempts} attempts: {e.message}")
            return ReferenceResult(items=[], ok=False, error=e.message)

        return self._parse(key, endpoint, data)

    @staticmethod
    def _parse(key: str, endpoint: str, data) -> ReferenceResult:
        if not isinstance(data, list):
            logger.error(f"Invalid response format for {endpoint} - expected array, got {type(data).__name__}")
            return ReferenceResult(items=[], ok=False, error="Invalid response format")
        try:
            items = [DropdownOption.model_validate(item) for item in data]
        except ValidationError as e:
            logger.error(f"Invalid {key} entry from {endpoint}: {e}")
            return ReferenceResult(items=[], ok=False, error="Invalid response format")

        logger.info(f"Successfully loaded {key}: {len(items)} items")
        return ReferenceResult(items=items)
