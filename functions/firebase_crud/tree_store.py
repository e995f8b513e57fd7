"""
Realtime tree store abstraction for the Firebase Realtime Database and an
in-memory test implementation.
"""

from __future__ import annotations

import json
import random
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import firebase_admin
from firebase_admin import db

from firebase_crud.paths import join, split

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class TreeStore(Protocol):
    """Operations the record adapter needs from the tree store.

    Addresses are slash-separated paths. `point_read` returns None when
    nothing is stored at the address.
    """

    def point_read(self, address: str) -> Any:
        ...

    def point_write(self, address: str, value: Any) -> None:
        ...

    def partial_write(self, address: str, fields: dict) -> None:
        ...

    def remove(self, address: str) -> None:
        ...

    def allocate_id(self, parent_address: str) -> str:
        ...


class PushIdGenerator:
    """
    Generates Firebase-style push ids.

    Ids are 20 characters: 8 encode the current time in milliseconds, 12 are
    random. Ids generated within the same millisecond reuse the previous random
    part incremented by one, so ids sort in creation order.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.SystemRandom()
        self._lock = threading.Lock()
        self._last_timestamp = -1
        self._last_random = [0] * 12

    def next_id(self, now_ms: Optional[int] = None) -> str:
        with self._lock:
            timestamp = int(time.time() * 1000) if now_ms is None else now_ms
            if timestamp == self._last_timestamp:
                for i in range(11, -1, -1):
                    if self._last_random[i] != 63:
                        self._last_random[i] += 1
                        break
                    self._last_random[i] = 0
            else:
                self._last_random = [self._rng.randrange(64) for _ in range(12)]
            self._last_timestamp = timestamp

            time_chars = []
            for _ in range(8):
                time_chars.append(PUSH_CHARS[timestamp % 64])
                timestamp //= 64
            return "".join(reversed(time_chars)) + "".join(
                PUSH_CHARS[i] for i in self._last_random
            )


def _prune(value: Any) -> Any:
    # The database never holds null leaves or empty maps.
    if isinstance(value, dict):
        pruned = {}
        for key, child in value.items():
            child = _prune(child)
            if child is not None:
                pruned[key] = child
        return pruned or None
    if isinstance(value, list):
        return [_prune(child) for child in value]
    return value


def _copy(value: Any) -> Any:
    # Round-trip through JSON to mimic what the real database stores.
    return _prune(json.loads(json.dumps(value)))


@dataclass
class InMemoryTreeStore:
    """Test double for the realtime database."""

    root: dict = field(default_factory=dict)
    push_ids: PushIdGenerator = field(default_factory=PushIdGenerator)

    def __post_init__(self):
        self._lock = threading.RLock()

    def point_read(self, address: str) -> Any:
        with self._lock:
            node: Any = self.root
            for part in split(address):
                if not isinstance(node, dict) or part not in node:
                    return None
                node = node[part]
            return _copy(node)

    def point_write(self, address: str, value: Any) -> None:
        value = _copy(value)
        if value is None:
            self.remove(address)
            return
        parts = split(address)
        with self._lock:
            if not parts:
                self.root = value if isinstance(value, dict) else {}
                return
            node = self.root
            for part in parts[:-1]:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = {}
                    node[part] = child
                node = child
            node[parts[-1]] = value

    def partial_write(self, address: str, fields: dict) -> None:
        with self._lock:
            for key, value in fields.items():
                self.point_write(join(address, key), value)

    def remove(self, address: str) -> None:
        parts = split(address)
        with self._lock:
            if not parts:
                self.root = {}
                return
            trail = [self.root]
            for part in parts[:-1]:
                node = trail[-1].get(part)
                if not isinstance(node, dict):
                    return
                trail.append(node)
            trail[-1].pop(parts[-1], None)
            # Prune parents left empty, as the real database does.
            for depth in range(len(trail) - 1, 0, -1):
                if trail[depth]:
                    break
                trail[depth - 1].pop(parts[depth - 1], None)

    def allocate_id(self, parent_address: str) -> str:
        return self.push_ids.next_id()

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.root = {}


@dataclass
class FirebaseTreeStore:
    """
    Firebase Realtime Database implementation backed by `firebase_admin.db`.
    """

    app: firebase_admin.App
    url: Optional[str] = None
    push_ids: PushIdGenerator = field(default_factory=PushIdGenerator)

    def _ref(self, address: str) -> db.Reference:
        return db.reference(address or "/", app=self.app, url=self.url)

    def point_read(self, address: str) -> Any:
        return self._ref(address).get()

    def point_write(self, address: str, value: Any) -> None:
        self._ref(address).set(value)

    def partial_write(self, address: str, fields: dict) -> None:
        self._ref(address).update(fields)

    def remove(self, address: str) -> None:
        self._ref(address).delete()

    def allocate_id(self, parent_address: str) -> str:
        # Reference.push() in the Admin SDK writes a placeholder value first;
        # generating the key locally keeps create to a single write.
        return self.push_ids.next_id()
