"""Cached reads and invalidating writes against the nutrition API.

Queries are addressed by composite keys such as ``("foods", filters)``.
Keys are normalized so equal filter objects share one cache entry, and
``invalidate(("foods",))`` drops every entry whose key starts with that
prefix. Live ``Query`` objects refetch when their key changes or when a
mutation invalidates their entity family.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter

from nutrition_admin.client.notifications import Notifier
from nutrition_admin.client.store import Store

logger = logging.getLogger(__name__)

T = TypeVar("T")

QueryKey = tuple[Any, ...]
InvalidationListener = Callable[[QueryKey], None]

DEFAULT_CACHE_TTL_SECONDS = 300
DEFAULT_MAX_CACHE_ENTRIES = 200


def normalize_key(key: object) -> Any:
    """Return a hashable, order-independent form of a query key."""
    if isinstance(key, BaseModel):
        return normalize_key(key.model_dump())
    if isinstance(key, Mapping):
        return tuple(sorted((str(k), normalize_key(v)) for k, v in key.items()))
    if isinstance(key, list | tuple):
        return tuple(normalize_key(item) for item in key)
    if isinstance(key, datetime | date):
        return key.isoformat()
    return key


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


class QueryClient:
    """Shared cache with in-flight deduplication and prefix invalidation.

    Entries expire ``ttl_seconds`` after they are stored. When more than
    ``max_entries`` are held, the least recently used one is dropped.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_CACHE_ENTRIES,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._cache: dict[QueryKey, _CacheEntry] = {}
        self._in_flight: dict[QueryKey, tuple[object, asyncio.Future]] = {}
        self._listeners: list[InvalidationListener] = []

    def get_query_data(self, key: object) -> object | None:
        entry = self._lookup(normalize_key(key))
        return None if entry is None else entry.value

    def is_cached(self, key: object) -> bool:
        return self._lookup(normalize_key(key)) is not None

    async def fetch(self, key: object, fn: Callable[[], Awaitable[T]]) -> T:
        """Return cached data for a key, joining or starting one fetch."""
        normalized = normalize_key(key)
        cached = self._lookup(normalized)
        if cached is not None:
            return cached.value
        entry = self._in_flight.get(normalized)
        if entry is None:
            token = object()
            future = asyncio.ensure_future(self._run(normalized, token, fn))
            entry = (token, future)
            self._in_flight[normalized] = entry
        return await asyncio.shield(entry[1])

    async def _run(
        self, key: QueryKey, token: object, fn: Callable[[], Awaitable[T]]
    ) -> T:
        try:
            result = await fn()
        finally:
            current = self._in_flight.get(key)
            owns_entry = current is not None and current[0] is token
            if owns_entry:
                del self._in_flight[key]
        if owns_entry:
            self._store(key, result)
        return result

    def _lookup(self, key: QueryKey) -> _CacheEntry | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._cache.pop(key, None)
            return None
        self._cache[key] = self._cache.pop(key)
        return entry

    def _store(self, key: QueryKey, value: object) -> None:
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds)
        self._cache.pop(key, None)
        self._cache[key] = _CacheEntry(value=value, expires_at=expires_at)
        while len(self._cache) > self.max_entries:
            del self._cache[next(iter(self._cache))]

    def invalidate(self, prefix: object) -> None:
        """Mark every query whose key starts with ``prefix`` as stale."""
        normalized = normalize_key(prefix)
        if not isinstance(normalized, tuple):
            normalized = (normalized,)
        size = len(normalized)
        for key in [key for key in self._cache if key[:size] == normalized]:
            del self._cache[key]
        for key in [key for key in self._in_flight if key[:size] == normalized]:
            del self._in_flight[key]
        for listener in list(self._listeners):
            listener(normalized)

    def subscribe(self, listener: InvalidationListener) -> Callable[[], None]:
        """Call ``listener(prefix)`` on every invalidation."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


class Query(Generic[T]):
    """A live read bound to store state.

    ``key_fn`` derives the composite key from store state; the query
    refetches whenever the normalized key changes, whenever ``enabled``
    flips to true, and whenever its key is invalidated. Responses for a
    superseded key are discarded.
    """

    def __init__(  # noqa: PLR0913
        self,
        client: QueryClient,
        key_fn: Callable[[], QueryKey],
        fetcher: Callable[[QueryKey], Awaitable[T]],
        *,
        enabled: Callable[[], bool] | None = None,
        stores: Iterable[Store] = (),
    ) -> None:
        self.client = client
        self.key_fn = key_fn
        self.fetcher = fetcher
        self._enabled = enabled or (lambda: True)
        self._stores = list(stores)
        self.data: T | None = None
        self.error: Exception | None = None
        self.is_fetching = False
        self._sequence = 0
        self._task: asyncio.Task | None = None
        self._last_key: Any = None
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def key(self) -> Any:
        return normalize_key(self.key_fn())

    @property
    def enabled(self) -> bool:
        return self._enabled()

    def start(self) -> "Query[T]":
        """Subscribe to stores and invalidations and run the first fetch."""
        for store in self._stores:
            self._unsubscribers.append(store.subscribe(self._on_store_change))
        self._unsubscribers.append(self.client.subscribe(self._on_invalidate))
        self.refetch()
        return self

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def refetch(self) -> asyncio.Task | None:
        """Fetch the current key, superseding any earlier request."""
        self._sequence += 1
        if not self.enabled:
            self._last_key = None
            self.data = None
            self.error = None
            self.is_fetching = False
            self._task = None
            return None
        raw_key = self.key_fn()
        self._last_key = normalize_key(raw_key)
        self.is_fetching = True
        self._task = asyncio.get_running_loop().create_task(
            self._load(raw_key, self._last_key, self._sequence)
        )
        return self._task

    async def wait(self) -> T | None:
        """Wait for the latest fetch to settle and return the data."""
        while self._task is not None and not self._task.done():
            await self._task
        return self.data

    async def _load(self, raw_key: QueryKey, key: Any, sequence: int) -> None:
        try:
            result = await self.client.fetch(raw_key, lambda: self.fetcher(raw_key))
        except Exception as exc:  # noqa: BLE001
            if self._is_current(key, sequence):
                logger.warning("Query %s failed: %s", key, exc)
                self.error = exc
                self.is_fetching = False
            return
        if not self._is_current(key, sequence):
            return
        self.data = result
        self.error = None
        self.is_fetching = False

    def _is_current(self, key: Any, sequence: int) -> bool:
        return sequence == self._sequence and key == self._last_key

    def _on_store_change(
        self, new: Mapping[str, object], old: Mapping[str, object]
    ) -> None:
        key = self.key if self.enabled else None
        if key != self._last_key:
            self.refetch()

    def _on_invalidate(self, prefix: QueryKey) -> None:
        if not self.enabled:
            return
        current = self.key
        if current[: len(prefix)] == prefix:
            self.refetch()


class Mutation(Generic[T]):
    """A write against the data source.

    Input is validated before the call; invalid input raises
    ``ValidationError`` and nothing is sent. On success the entity family
    is invalidated and a success notification is published; failures are
    published as error notifications and leave caller state untouched.
    """

    def __init__(  # noqa: PLR0913
        self,
        client: QueryClient,
        mutate_fn: Callable[[Any], Awaitable[T]],
        *,
        family: str,
        notifier: Notifier,
        schema: TypeAdapter | None = None,
        success_message: str | None = None,
        on_success: Callable[[T], object] | None = None,
    ) -> None:
        self.client = client
        self.mutate_fn = mutate_fn
        self.family = family
        self.notifier = notifier
        self.schema = schema
        self.success_message = success_message
        self.on_success = on_success
        self.is_pending = False
        self.error: Exception | None = None
        self.data: T | None = None

    def prepare(self, variables: Any) -> Any:
        """Validate variables and return the payload to send."""
        if self.schema is None:
            return variables
        validated = self.schema.validate_python(variables)
        return validated.to_form()

    async def mutate_async(
        self,
        variables: Any,
        *,
        on_success: Callable[[T], object] | None = None,
    ) -> T | None:
        """Run the mutation; return its result, or None when it failed."""
        payload = self.prepare(variables)
        self.is_pending = True
        self.error = None
        try:
            result = await self.mutate_fn(payload)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Mutation on %s failed: %s", self.family, exc)
            self.error = exc
            self.notifier.notify("error", str(exc) or type(exc).__name__)
            return None
        finally:
            self.is_pending = False
        self.data = result
        self.client.invalidate((self.family,))
        if self.success_message:
            self.notifier.notify("success", self.success_message)
        for callback in (self.on_success, on_success):
            if callback is not None:
                callback(result)
        return result

    def mutate(
        self,
        variables: Any,
        *,
        on_success: Callable[[T], object] | None = None,
    ) -> asyncio.Task:
        """Validate now and schedule the mutation on the running loop."""
        self.prepare(variables)
        return asyncio.get_running_loop().create_task(
            self.mutate_async(variables, on_success=on_success)
        )
