"""Named state containers with copy-on-write commits and optional persistence.

A store holds plain state values next to the action callables that change
them. Actions commit through ``Store.set``: the recipe edits a deep copy of
the current values and the result is published as a new read-only snapshot,
so readers never observe a half-applied change. Unless ``skip_persist`` is
set, every commit writes the state (minus excluded keys) to a
``StateStorage`` slot named after the store, and construction rehydrates
from that slot.
"""

import copy
import json
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Protocol

logger = logging.getLogger(__name__)

PERSIST_VERSION = 0

Recipe = Callable[[dict[str, object]], Mapping[str, object] | None]
StateSetter = Callable[[Recipe], None]
Initializer = Callable[[StateSetter], dict[str, object]]
Listener = Callable[[Mapping[str, object], Mapping[str, object]], None]


class StateStorage(Protocol):
    """Durable key-value slot storage for store snapshots."""

    def get_item(self, name: str) -> str | None:
        """Return the serialized value stored under a name."""

    def set_item(self, name: str, value: str) -> None:
        """Store a serialized value under a name."""


@dataclass
class InMemoryStorage:
    """Storage kept in a dict; survives store re-creation, not the process."""

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, name: str) -> str | None:
        return self.items.get(name)

    def set_item(self, name: str, value: str) -> None:
        self.items[name] = value


@dataclass
class JsonFileStorage:
    """Storage writing one JSON file per store name into a directory."""

    directory: Path

    def get_item(self, name: str) -> str | None:
        try:
            return self._path(name).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, name: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(name).write_text(value, encoding="utf-8")

    def _path(self, name: str) -> Path:
        return self.directory / f"{name}.json"


class Store:
    """A named state container. Create instances with ``create_store``."""

    def __init__(
        self,
        initializer: Initializer,
        name: str,
        storage: StateStorage | None,
        exclude_from_persist: frozenset[str],
    ) -> None:
        self.name = name
        self._storage = storage
        self._exclude = exclude_from_persist
        self._values: dict[str, object] = {}
        self._actions: dict[str, Callable[..., object]] = {}
        self._snapshot: Mapping[str, object] = MappingProxyType({})
        self._listeners: list[Listener] = []
        self._install(initializer(self.set))

    @property
    def persisted(self) -> bool:
        """Return True when commits are written to durable storage."""
        return self._storage is not None

    def get_state(self) -> Mapping[str, object]:
        """Return the current read-only snapshot of state and actions."""
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(new, old)`` after every commit until unsubscribed."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, recipe: Recipe) -> None:
        """Apply a recipe to a draft copy of the state and commit the result."""
        draft = copy.deepcopy(self._values)
        replacements = recipe(draft)
        if replacements is not None:
            draft.update(replacements)
        unknown = set(draft) - set(self._values)
        if unknown:
            msg = f"Store {self.name!r} has no state keys {sorted(unknown)}"
            raise KeyError(msg)
        previous = self._snapshot
        self._publish(draft)
        self._persist()
        for listener in list(self._listeners):
            listener(self._snapshot, previous)

    def _install(self, initial: Mapping[str, object]) -> None:
        values = {key: value for key, value in initial.items() if not callable(value)}
        self._actions = {key: value for key, value in initial.items() if callable(value)}
        values.update(self._rehydrate(values))
        self._publish(values)

    def _publish(self, values: dict[str, object]) -> None:
        self._values = values
        self._snapshot = MappingProxyType({**values, **self._actions})

    def _persistable(self) -> dict[str, object]:
        return {
            key: value for key, value in self._values.items() if key not in self._exclude
        }

    def _persist(self) -> None:
        if self._storage is None:
            return
        try:
            serialized = json.dumps(
                {"state": self._persistable(), "version": PERSIST_VERSION}
            )
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping persist for store %s: %s", self.name, exc)
            return
        try:
            self._storage.set_item(self.name, serialized)
        except OSError as exc:
            logger.warning("Failed to persist store %s: %s", self.name, exc)

    def _rehydrate(self, defaults: Mapping[str, object]) -> dict[str, object]:
        if self._storage is None:
            return {}
        try:
            raw = self._storage.get_item(self.name)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read persisted store %s: %s", self.name, exc)
            return {}
        if raw is None:
            return {}
        try:
            envelope = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt persisted state for store %s", self.name)
            return {}
        state = envelope.get("state") if isinstance(envelope, dict) else None
        if not isinstance(state, dict):
            logger.warning("Ignoring corrupt persisted state for store %s", self.name)
            return {}
        restored = {}
        for key, value in state.items():
            if key not in defaults or key in self._exclude:
                continue
            if not _matches_default(defaults[key], value):
                logger.warning(
                    "Ignoring persisted %s.%s of unexpected type", self.name, key
                )
                continue
            restored[key] = value
        return restored


def _matches_default(default: object, value: object) -> bool:
    if default is None:
        return not isinstance(value, dict | list)
    return type(value) is type(default)


@dataclass
class StoreRegistry:
    """Owns the stores of one client; each name may be used only once."""

    stores: dict[str, Store] = field(default_factory=dict)

    def register(self, store: Store) -> None:
        """Register a store, rejecting a second store with the same name."""
        if store.name in self.stores:
            msg = f"Store {store.name!r} is already registered"
            raise ValueError(msg)
        self.stores[store.name] = store

    def get(self, name: str) -> Store:
        """Return a registered store by name."""
        return self.stores[name]


def create_store(  # noqa: PLR0913
    initializer: Initializer,
    *,
    name: str = "store",
    storage: StateStorage | None = None,
    skip_persist: bool = False,
    exclude_from_persist: Iterable[str] = (),
    registry: StoreRegistry | None = None,
) -> Store:
    """Build a store from an initializer returning state values and actions."""
    if registry is not None and name in registry.stores:
        msg = f"Store {name!r} is already registered"
        raise ValueError(msg)
    resolved_storage = None if skip_persist else (storage or InMemoryStorage())
    store = Store(
        initializer, name, resolved_storage, frozenset(exclude_from_persist)
    )
    if registry is not None:
        registry.register(store)
    return store
