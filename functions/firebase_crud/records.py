"""
Generic CRUD adapter over the realtime tree store.

Any caller-supplied collection name maps to a top-level node of the tree and
every record lives one level below it. Reads before update/delete make sure a
missing record surfaces as NotFoundError instead of the store silently
creating (update) or ignoring (delete) the node.

There is no compare-and-swap between the existence check and the mutation, so
a concurrent delete can still land in between. Callers that need strict
consistency must add a conditional write layer themselves.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from firebase_crud.errors import (
    InvalidInputError,
    NotFoundError,
    translate_store_errors,
)
from firebase_crud.paths import resolve, resolve_record
from firebase_crud.tree_store import TreeStore

NOT_FOUND_MESSAGE = "Data not found"


def _require_body(body: Any, message: str) -> dict:
    if not isinstance(body, Mapping) or not body:
        raise InvalidInputError(message)
    return dict(body)


class RecordAdapter:
    """Create/list/read/update/delete records addressed by collection and id."""

    def __init__(self, store: TreeStore):
        self.store = store

    async def _run(self, message: str, func, *args) -> Any:
        with translate_store_errors(message):
            return await asyncio.to_thread(func, *args)

    async def exists(
        self, address: str, failure_message: str = "Failed to get data"
    ) -> bool:
        """True if anything, falsy values included, is stored at `address`."""
        value = await self._run(failure_message, self.store.point_read, address)
        return value is not None

    async def create(self, collection: str, body: Any) -> str:
        """Store `body` under a freshly allocated id and return that id."""
        if not collection:
            raise InvalidInputError("Collection name and data are required")
        data = _require_body(body, "Collection name and data are required")
        root = resolve(collection)

        record_id = await self._run(
            "Failed to add data", self.store.allocate_id, root
        )
        await self._run(
            "Failed to add data",
            self.store.point_write,
            resolve(collection, record_id),
            data,
        )
        return record_id

    async def list(self, collection: str) -> Any:
        """Return the whole collection subtree, NotFoundError if it is absent."""
        address = resolve(collection)
        value = await self._run("Failed to get data", self.store.point_read, address)
        if value is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return value

    async def read_one(self, collection: str, record_id: str) -> Any:
        address = resolve_record(collection, record_id)
        value = await self._run(
            "Failed to get data by id", self.store.point_read, address
        )
        if value is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return value

    async def update(self, collection: str, record_id: str, body: Any) -> None:
        """
        Merge the fields of `body` into an existing record.

        Fields not mentioned in `body` are left untouched.
        """
        message = "Collection name, id and data are required"
        if not collection or not record_id:
            raise InvalidInputError(message)
        data = _require_body(body, message)
        address = resolve_record(collection, record_id)

        if not await self.exists(address, "Failed to update data"):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        await self._run(
            "Failed to update data", self.store.partial_write, address, data
        )

    async def delete(self, collection: str, record_id: str) -> None:
        address = resolve_record(collection, record_id)
        if not await self.exists(address, "Failed to delete data"):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        await self._run("Failed to delete data", self.store.remove, address)
