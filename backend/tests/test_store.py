import asyncio
import os
import tempfile
import time
import unittest

from sqlalchemy.exc import OperationalError
from sqlmodel import Session, SQLModel, create_engine


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestTTLCache(unittest.TestCase):
    def test_expiry(self):
        from backend.app.store import TTLCache

        clock = FakeClock()
        cache = TTLCache(10, clock=clock)
        cache.set("a", 1)
        clock.now = 9.9
        self.assertEqual(cache.get("a"), 1)
        clock.now = 10
        self.assertIsNone(cache.get("a"))
        self.assertEqual(len(cache), 0)

    def test_invalidate(self):
        from backend.app.store import TTLCache

        cache = TTLCache(10, clock=FakeClock())
        cache.set("a", 1)
        cache.invalidate("a")
        cache.invalidate("missing")
        self.assertIsNone(cache.get("a"))

    def test_zero_ttl_disables(self):
        from backend.app.store import TTLCache

        cache = TTLCache(0)
        cache.set("a", 1)
        self.assertIsNone(cache.get("a"))

    def test_expired_entries_swept_on_set(self):
        from backend.app.store import TTLCache

        clock = FakeClock()
        cache = TTLCache(10, clock=clock)
        for i in range(100):
            cache.set(f"layout-{i}", i)
            clock.now += 5
        # only entries younger than the ttl survive
        self.assertLessEqual(len(cache), 2)
        self.assertEqual(cache.get("layout-99"), 99)
        self.assertIsNone(cache.get("layout-0"))


class TestDbSettings(unittest.TestCase):
    def test_sqlite_only_connect_args(self):
        from backend.app.db import _connect_args

        self.assertEqual(_connect_args("sqlite:///x.db"), {"check_same_thread": False})
        self.assertEqual(_connect_args("postgresql://db/layouts"), {})

    def test_cache_ttl_from_env(self):
        from backend.app.db import layout_cache_ttl_seconds

        old = os.environ.get("LAYOUT_CACHE_TTL_SECONDS")
        try:
            os.environ["LAYOUT_CACHE_TTL_SECONDS"] = "2.5"
            self.assertEqual(layout_cache_ttl_seconds(), 2.5)
            del os.environ["LAYOUT_CACHE_TTL_SECONDS"]
            self.assertEqual(layout_cache_ttl_seconds(), 30)
        finally:
            if old is not None:
                os.environ["LAYOUT_CACHE_TTL_SECONDS"] = old


class TestLayoutStore(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._tmpdir = tempfile.TemporaryDirectory()
        os.environ.setdefault("VENUE_LAYOUT_DATA_DIR", cls._tmpdir.name)
        from backend.app import models

        cls.models = models
        cls.engine = create_engine(
            f"sqlite:///{cls._tmpdir.name}/store.db",
            connect_args={"check_same_thread": False},
        )
        SQLModel.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls):
        cls.engine.dispose()
        cls._tmpdir.cleanup()

    def _store(self):
        from backend.app.store import LayoutStore, TTLCache

        return LayoutStore(session_factory=lambda: Session(self.engine), cache=TTLCache(60))

    def _venue_id(self):
        with Session(self.engine) as session:
            v = self.models.Venue(name="Hall")
            session.add(v)
            session.commit()
            session.refresh(v)
            return v.id

    def test_crud(self):
        store = self._store()
        venue_id = self._venue_id()
        record = {"name": "L", "type": "seating_chart", "venueId": str(venue_id), "capacity": 3, "sections": []}

        self.assertTrue(asyncio.run(store.venue_exists(venue_id)))
        layout_id = asyncio.run(store.create(venue_id, record))

        loaded = asyncio.run(store.load(layout_id))
        self.assertEqual(loaded["id"], layout_id)
        self.assertEqual(loaded["capacity"], 3)

        # cached copies are independent
        loaded["name"] = "mutated"
        self.assertEqual(asyncio.run(store.load(layout_id))["name"], "L")

        asyncio.run(store.update(layout_id, {**record, "name": "L2", "capacity": 5}))
        self.assertEqual(asyncio.run(store.load(layout_id))["name"], "L2")

        listed = asyncio.run(store.list_for_venue(venue_id))
        self.assertEqual(listed, [{"id": layout_id, "name": "L2", "type": "seating_chart", "capacity": 5}])

        self.assertTrue(asyncio.run(store.delete(layout_id)))
        self.assertIsNone(asyncio.run(store.load(layout_id)))
        self.assertFalse(asyncio.run(store.delete(layout_id)))

    def test_load_during_update_does_not_keep_old_record(self):
        from backend.app.store import LayoutStore, TTLCache

        class SlowWriteStore(LayoutStore):
            def _update(self, layout_id, record):
                time.sleep(0.3)
                super()._update(layout_id, record)

        store = SlowWriteStore(session_factory=lambda: Session(self.engine), cache=TTLCache(60))
        venue_id = self._venue_id()
        record = {"name": "old", "type": "seating_chart", "venueId": str(venue_id), "capacity": 0, "sections": []}
        layout_id = asyncio.run(store.create(venue_id, record))

        async def scenario():
            async def load_mid_write():
                await asyncio.sleep(0.1)
                return await store.load(layout_id)

            await asyncio.gather(store.update(layout_id, {**record, "name": "new"}), load_mid_write())
            return await store.load(layout_id)

        self.assertEqual(asyncio.run(scenario())["name"], "new")

    def test_load_during_delete_does_not_keep_record(self):
        from backend.app.store import LayoutStore, TTLCache

        class SlowDeleteStore(LayoutStore):
            def _delete(self, layout_id):
                time.sleep(0.3)
                return super()._delete(layout_id)

        store = SlowDeleteStore(session_factory=lambda: Session(self.engine), cache=TTLCache(60))
        venue_id = self._venue_id()
        layout_id = asyncio.run(store.create(venue_id, {"name": "gone", "sections": []}))

        async def scenario():
            async def load_mid_delete():
                await asyncio.sleep(0.1)
                return await store.load(layout_id)

            await asyncio.gather(store.delete(layout_id), load_mid_delete())
            return await store.load(layout_id)

        self.assertIsNone(asyncio.run(scenario()))

    def test_update_missing(self):
        from seating_chart.errors import LayoutNotFound

        with self.assertRaises(LayoutNotFound):
            asyncio.run(self._store().update("nope", {"name": "x"}))

    def test_database_errors_surface_as_persistence_failure(self):
        from backend.app.store import LayoutStore
        from seating_chart.errors import PersistenceFailure

        def broken_session():
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        store = LayoutStore(session_factory=broken_session)
        with self.assertRaises(PersistenceFailure):
            asyncio.run(store.load("anything"))
        with self.assertRaises(PersistenceFailure):
            asyncio.run(store.create(1, {"name": "x"}))


if __name__ == "__main__":
    unittest.main()
