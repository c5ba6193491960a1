"""Tests for the EventStore implementations.

Every behavioural test runs against both the in-memory and the SQLite store
so the two stay interchangeable.
"""

import sqlite3

import pytest
import pytest_asyncio

from omnitrace.config import StorageConfig
from omnitrace.errors import DuplicateEventError, StorageError, StoreNotInitializedError
from omnitrace.models import SCHEMA_VERSION, Category, EventContext, Session
from omnitrace.storage import InMemoryEventStore, SQLiteEventStore, create_store


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path):
    if request.param == "memory":
        store = InMemoryEventStore()
    else:
        store = SQLiteEventStore(tmp_path / "events.db")
    await store.initialize()

    yield store

    await store.close()


# ─────────────────────────────────────────────────────────────────────────────
# Events
# ─────────────────────────────────────────────────────────────────────────────


class TestEvents:
    """Tests for the append-only event log."""

    @pytest.mark.asyncio
    async def test_round_trip_preserves_fields(self, store, make_event, at):
        event = make_event(
            "manual_event",
            at(9),
            id="reading",
            title="Reading",
            category="study",
            duration=30 * 60_000,
            keywords=("book",),
            note="chapter 3",
            context=EventContext(screen="timeline", state={"k": 1}, extra={"custom": True}),
        )

        await store.append_event(event)

        assert await store.read_all_events() == [event]

    @pytest.mark.asyncio
    async def test_read_all_is_oldest_first(self, store, make_event, at):
        await store.append_events([
            make_event("navigation", at(10), id="b"),
            make_event("navigation", at(9), id="a"),
        ])

        assert [e.id for e in await store.read_all_events()] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_range_is_inclusive(self, store, make_event, at):
        await store.append_events([
            make_event("navigation", at(8), id="before"),
            make_event("navigation", at(9), id="start"),
            make_event("navigation", at(10), id="end"),
            make_event("navigation", at(11), id="after"),
        ])

        events = await store.read_events_by_range(at(9), at(10))

        assert [e.id for e in events] == ["start", "end"]

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, store, make_event, at):
        await store.append_event(make_event("navigation", at(9), id="same"))

        with pytest.raises(DuplicateEventError) as exc_info:
            await store.append_event(make_event("navigation", at(10), id="same"))

        assert exc_info.value.event_id == "same"
        assert len(await store.read_all_events()) == 1

    @pytest.mark.asyncio
    async def test_batch_with_duplicate_writes_nothing(self, store, make_event, at):
        batch = [
            make_event("navigation", at(9), id="one"),
            make_event("navigation", at(10), id="one"),
        ]

        with pytest.raises(DuplicateEventError):
            await store.append_events(batch)

        assert await store.read_all_events() == []
        assert (await store.get_metadata()).event_count == 0

    @pytest.mark.asyncio
    async def test_event_count_tracks_appends(self, store, make_event, at):
        await store.append_event(make_event("navigation", at(9)))
        await store.append_events([make_event("navigation", at(10)), make_event("navigation", at(11))])

        metadata = await store.get_metadata()

        assert metadata.event_count == 3
        assert metadata.schema_version == SCHEMA_VERSION


# ─────────────────────────────────────────────────────────────────────────────
# Sessions
# ─────────────────────────────────────────────────────────────────────────────


class TestSessions:
    """Tests for session records."""

    @pytest.mark.asyncio
    async def test_last_session_by_start_time(self, store, at):
        await store.add_session(Session(id="late", start_time=at(12)))
        await store.add_session(Session(id="early", start_time=at(8), end_time=at(9), recovered=False))

        assert (await store.get_last_session()).id == "late"
        assert [s.id for s in await store.get_all_sessions()] == ["early", "late"]

    @pytest.mark.asyncio
    async def test_no_sessions(self, store):
        assert await store.get_last_session() is None

    @pytest.mark.asyncio
    async def test_update_session(self, store, at):
        session = Session(id="s1", start_time=at(8))
        await store.add_session(session)

        session.end_time = at(9)
        session.recovered = True
        await store.update_session(session)

        assert await store.get_last_session() == Session(id="s1", start_time=at(8), end_time=at(9), recovered=True)

    @pytest.mark.asyncio
    async def test_update_unknown_session(self, store, at):
        with pytest.raises(StorageError):
            await store.update_session(Session(id="ghost", start_time=at(8)))


# ─────────────────────────────────────────────────────────────────────────────
# Maintenance
# ─────────────────────────────────────────────────────────────────────────────


class TestWipe:
    """Tests for wipe_all."""

    @pytest.mark.asyncio
    async def test_wipe_clears_everything(self, store, make_event, at):
        await store.append_event(make_event("navigation", at(9)))
        await store.add_session(Session(id="s1", start_time=at(8)))

        await store.wipe_all()

        assert await store.read_all_events() == []
        assert await store.get_all_sessions() == []
        metadata = await store.get_metadata()
        assert metadata.event_count == 0
        assert metadata.schema_version == SCHEMA_VERSION

    @pytest.mark.asyncio
    async def test_ids_reusable_after_wipe(self, store, make_event, at):
        await store.append_event(make_event("navigation", at(9), id="x"))
        await store.wipe_all()

        await store.append_event(make_event("navigation", at(9), id="x"))

        assert len(await store.read_all_events()) == 1


# ─────────────────────────────────────────────────────────────────────────────
# SQLite specifics
# ─────────────────────────────────────────────────────────────────────────────


class TestSQLiteEventStore:
    """Tests for SQLite-only behaviour."""

    @pytest.mark.asyncio
    async def test_requires_initialize(self, tmp_path, make_event, at):
        store = SQLiteEventStore(tmp_path / "events.db")

        with pytest.raises(StoreNotInitializedError):
            await store.read_all_events()
        with pytest.raises(StoreNotInitializedError):
            await store.append_event(make_event("navigation", at(9)))

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path, manual, at):
        path = tmp_path / "nested" / "events.db"
        first = SQLiteEventStore(path)
        await first.initialize()
        await first.append_event(manual(at(9), "Thesis", id="thesis"))

        second = SQLiteEventStore(path)
        await second.initialize()

        events = await second.read_all_events()
        assert [e.id for e in events] == ["thesis"]
        assert events[0].category == Category.STUDY
        assert (await second.get_metadata()).event_count == 1

    @pytest.mark.asyncio
    async def test_unknown_event_type_is_skipped(self, sqlite_store, make_event, at):
        await sqlite_store.append_event(make_event("navigation", at(9), id="good"))
        conn = sqlite3.connect(str(sqlite_store.db_path))
        with conn:
            conn.execute(
                "INSERT INTO events (id, type, timestamp) VALUES ('bad', 'teleport', ?)",
                (at(10),),
            )
        conn.close()

        assert [e.id for e in await sqlite_store.read_all_events()] == ["good"]

    @pytest.mark.asyncio
    async def test_malformed_columns(self, sqlite_store, make_event, at):
        """A non-object context reads as empty; rows that still fail are skipped."""
        await sqlite_store.append_event(make_event("navigation", at(9), id="good"))
        conn = sqlite3.connect(str(sqlite_store.db_path))
        with conn:
            conn.executemany(
                "INSERT INTO events (id, type, timestamp, context, keywords) VALUES (?, 'navigation', ?, ?, ?)",
                [
                    ("list-context", at(10), '["x"]', None),
                    ("string-context", at(11), '"home"', None),
                    ("broken-json", at(12), "{oops", None),
                    ("number-keywords", at(13), "{}", "5"),
                ],
            )
        conn.close()

        events = await sqlite_store.read_all_events()

        assert [e.id for e in events] == ["good", "list-context", "string-context"]
        assert events[1].context == EventContext()
        assert events[2].context == EventContext()

    @pytest.mark.asyncio
    async def test_unwritable_path(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        store = SQLiteEventStore(blocker / "events.db")

        with pytest.raises(StorageError):
            await store.initialize()


class TestCreateStore:
    """Tests for the store factory."""

    @pytest.mark.asyncio
    async def test_memory_backend(self):
        store = await create_store(StorageConfig(backend="memory"))

        assert isinstance(store, InMemoryEventStore)

    @pytest.mark.asyncio
    async def test_sqlite_backend(self, tmp_path):
        store = await create_store(StorageConfig(backend="sqlite", database_path=str(tmp_path / "x.db")))

        assert isinstance(store, SQLiteEventStore)
        assert (await store.get_metadata()).event_count == 0

    @pytest.mark.asyncio
    async def test_without_initialize(self, tmp_path):
        path = tmp_path / "x.db"

        store = await create_store(StorageConfig(backend="sqlite", database_path=str(path)), initialize=False)

        assert not path.exists()
        with pytest.raises(StoreNotInitializedError):
            await store.read_all_events()
