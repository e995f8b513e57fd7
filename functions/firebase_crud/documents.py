"""
Document store abstraction for Cloud Firestore and an in-memory test
implementation.
"""

from __future__ import annotations

import json
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from google.cloud import firestore

USERS_COLLECTION = "users"


class DocumentStore(Protocol):
    """Defines the operations the API needs from the document database."""

    def add_document(self, collection: str, data: dict) -> str:
        ...

    def list_documents(self, collection: str) -> list[dict]:
        ...


@dataclass
class InMemoryDocumentStore:
    """Test double for document interactions."""

    collections: dict = field(default_factory=dict)

    def __post_init__(self):
        self._lock = threading.Lock()

    def add_document(self, collection: str, data: dict) -> str:
        doc_id = uuid.uuid4().hex
        stored = json.loads(json.dumps(data, default=str))
        with self._lock:
            self.collections.setdefault(collection, {})[doc_id] = stored
        return doc_id

    def list_documents(self, collection: str) -> list[dict]:
        with self._lock:
            docs = list(self.collections.get(collection, {}).items())
        return [{"id": doc_id, **data} for doc_id, data in docs]

    def reset(self) -> None:
        with self._lock:
            self.collections.clear()


@dataclass
class FirestoreDocumentStore:
    """Cloud Firestore implementation; documents get auto-generated ids."""

    client: firestore.Client

    def add_document(self, collection: str, data: dict) -> str:
        doc_ref = self.client.collection(collection).document()
        doc_ref.set(data)
        return doc_ref.id

    def list_documents(self, collection: str) -> list[dict]:
        return [
            {"id": doc.id, **(doc.to_dict() or {})}
            for doc in self.client.collection(collection).stream()
        ]


def add_user(store: DocumentStore, name: str | None, email: str | None) -> str:
    """Create a user document stamped with its creation time; returns its id."""
    return store.add_document(
        USERS_COLLECTION,
        {
            "name": name,
            "email": email,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        },
    )


def list_users(store: DocumentStore) -> list[dict]:
    return store.list_documents(USERS_COLLECTION)
