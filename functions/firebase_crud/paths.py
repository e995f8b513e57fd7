"""
Address resolution for the realtime tree store.
"""

from __future__ import annotations

from typing import Optional

from firebase_crud.errors import InvalidInputError

SEPARATOR = "/"


def _is_present(value) -> bool:
    return isinstance(value, str) and value != ""


def resolve(collection: str, record_id: Optional[str] = None) -> str:
    """
    Map a collection name and optional record id to a tree address.

    `resolve("orders")` -> "orders"
    `resolve("orders", "k1")` -> "orders/k1"

    No escaping or charset validation happens here; whatever the store accepts
    as a key is valid. Empty segments are rejected before any store access.
    """
    if not _is_present(collection):
        raise InvalidInputError("Collection name is required")
    if record_id is None:
        return collection
    if not _is_present(record_id):
        raise InvalidInputError("Record id is required")
    return f"{collection}{SEPARATOR}{record_id}"


def join(parent: str, child: str) -> str:
    """Join two address fragments, tolerating an empty (root) parent."""
    parent = parent.strip(SEPARATOR)
    child = child.strip(SEPARATOR)
    if not parent:
        return child
    if not child:
        return parent
    return f"{parent}{SEPARATOR}{child}"


def split(address: str) -> list[str]:
    """Split an address into its non-empty segments."""
    return [part for part in address.split(SEPARATOR) if part]


def resolve_record(collection: str, record_id: Optional[str]) -> str:
    """Resolve `collection/record_id` for operations that require an id."""
    return resolve(collection, "" if record_id is None else record_id)
