import asyncio
import unittest
from unittest.mock import MagicMock, patch

from firebase_crud.errors import InvalidInputError, NotFoundError, StoreFailureError
from firebase_crud.records import RecordAdapter
from firebase_crud.tree_store import InMemoryTreeStore


class RecordAdapterTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tree = InMemoryTreeStore()
        self.store = MagicMock(wraps=self.tree)
        self.records = RecordAdapter(self.store)

    async def test_create_then_read_one(self):
        body = {"item": "pen", "qty": 2, "tags": ["a", "b"], "meta": {"x": 1.5}}
        record_id = await self.records.create("orders", body)
        self.assertEqual(await self.records.read_one("orders", record_id), body)

    async def test_orders_lifecycle(self):
        with patch.object(self.tree, "allocate_id", return_value="k1"):
            record_id = await self.records.create("orders", {"item": "pen", "qty": 2})
        self.assertEqual(record_id, "k1")
        self.assertEqual(
            await self.records.read_one("orders", "k1"), {"item": "pen", "qty": 2}
        )

        await self.records.update("orders", "k1", {"qty": 5})
        self.assertEqual(
            await self.records.read_one("orders", "k1"), {"item": "pen", "qty": 5}
        )

        await self.records.delete("orders", "k1")
        with self.assertRaises(NotFoundError):
            await self.records.read_one("orders", "k1")

    async def test_partial_update_keeps_untouched_fields(self):
        record_id = await self.records.create("things", {"a": 1, "b": 2})
        await self.records.update("things", record_id, {"b": 3})
        self.assertEqual(
            await self.records.read_one("things", record_id), {"a": 1, "b": 3}
        )

    async def test_create_drops_null_fields(self):
        record_id = await self.records.create("orders", {"item": "pen", "note": None})
        self.assertEqual(
            await self.records.read_one("orders", record_id), {"item": "pen"}
        )

    async def test_create_of_only_empty_maps_stores_nothing(self):
        record_id = await self.records.create("orders", {"meta": {}})
        with self.assertRaises(NotFoundError):
            await self.records.read_one("orders", record_id)

    async def test_list_returns_subtree(self):
        first = await self.records.create("orders", {"item": "pen"})
        second = await self.records.create("orders", {"item": "ink"})
        listing = await self.records.list("orders")
        self.assertEqual(
            listing, {first: {"item": "pen"}, second: {"item": "ink"}}
        )

    async def test_list_of_absent_collection_is_not_found(self):
        with self.assertRaises(NotFoundError):
            await self.records.list("nothing-here")

    async def test_unknown_id_is_not_found_without_mutation(self):
        await self.records.create("orders", {"item": "pen"})
        self.store.reset_mock()

        with self.assertRaises(NotFoundError):
            await self.records.read_one("orders", "missing")
        with self.assertRaises(NotFoundError):
            await self.records.update("orders", "missing", {"qty": 1})
        with self.assertRaises(NotFoundError):
            await self.records.delete("orders", "missing")

        self.store.point_write.assert_not_called()
        self.store.partial_write.assert_not_called()
        self.store.remove.assert_not_called()
        self.assertIsNone(self.tree.point_read("orders/missing"))

    async def test_second_delete_is_not_found(self):
        record_id = await self.records.create("orders", {"item": "pen"})
        await self.records.delete("orders", record_id)
        with self.assertRaises(NotFoundError):
            await self.records.delete("orders", record_id)

    async def test_exists_counts_falsy_values(self):
        self.tree.point_write("counters/zero", 0)
        self.tree.point_write("counters/empty", "")
        self.assertTrue(await self.records.exists("counters/zero"))
        self.assertTrue(await self.records.exists("counters/empty"))
        self.assertFalse(await self.records.exists("counters/none"))

    async def test_update_of_falsy_record_proceeds(self):
        self.tree.point_write("orders/k1", {"qty": 0})
        await self.records.update("orders", "k1", {"qty": 1})
        self.assertEqual(self.tree.point_read("orders/k1"), {"qty": 1})

    async def test_concurrent_creates_get_distinct_ids(self):
        ids = await asyncio.gather(
            *(self.records.create("orders", {"n": n}) for n in range(20))
        )
        self.assertEqual(len(set(ids)), 20)
        self.assertEqual(len(await self.records.list("orders")), 20)


class RecordAdapterInvalidInputTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = MagicMock()
        self.records = RecordAdapter(self.store)

    async def test_read_one_rejects_empty_segments(self):
        with self.assertRaises(InvalidInputError):
            await self.records.read_one("", "k1")
        with self.assertRaises(InvalidInputError):
            await self.records.read_one("orders", "")
        self.assertEqual(self.store.method_calls, [])

    async def test_create_requires_collection_and_mapping_body(self):
        for collection, body in [
            ("", {"a": 1}),
            (None, {"a": 1}),
            ("orders", None),
            ("orders", {}),
            ("orders", "not a mapping"),
            ("orders", [1, 2]),
        ]:
            with self.subTest(collection=collection, body=body):
                with self.assertRaises(InvalidInputError):
                    await self.records.create(collection, body)
        self.assertEqual(self.store.method_calls, [])

    async def test_update_requires_everything(self):
        for args in [("", "k1", {"a": 1}), ("orders", "", {"a": 1}), ("orders", "k1", {})]:
            with self.subTest(args=args):
                with self.assertRaises(InvalidInputError):
                    await self.records.update(*args)
        self.assertEqual(self.store.method_calls, [])

    async def test_list_and_delete_require_names(self):
        with self.assertRaises(InvalidInputError):
            await self.records.list("")
        with self.assertRaises(InvalidInputError):
            await self.records.delete("orders", "")
        self.assertEqual(self.store.method_calls, [])


class RecordAdapterStoreFailureTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = MagicMock()
        self.records = RecordAdapter(self.store)

    async def test_read_failure_carries_store_message(self):
        self.store.point_read.side_effect = RuntimeError("Permission denied")
        with self.assertRaises(StoreFailureError) as ctx:
            await self.records.read_one("orders", "k1")
        self.assertEqual(ctx.exception.message, "Failed to get data by id")
        self.assertEqual(ctx.exception.detail, "Permission denied")
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    async def test_write_failure_on_create(self):
        self.store.allocate_id.return_value = "k1"
        self.store.point_write.side_effect = RuntimeError("quota exceeded")
        with self.assertRaises(StoreFailureError) as ctx:
            await self.records.create("orders", {"a": 1})
        self.assertEqual(ctx.exception.message, "Failed to add data")
        self.store.point_write.assert_called_once_with("orders/k1", {"a": 1})

    async def test_failure_is_not_retried(self):
        self.store.point_read.return_value = {"a": 1}
        self.store.remove.side_effect = RuntimeError("unavailable")
        with self.assertRaises(StoreFailureError) as ctx:
            await self.records.delete("orders", "k1")
        self.assertEqual(ctx.exception.message, "Failed to delete data")
        self.assertEqual(self.store.remove.call_count, 1)


if __name__ == "__main__":
    unittest.main()
