"""Tests for the anonymous link cleanup."""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy import select

from links.models import Link
from tasks.cleanup import ExpirySweeper

NOW = datetime(2024, 3, 15, 3, 0, tzinfo=timezone.utc)


def fixed_clock():
    return NOW


@pytest.fixture
async def seeded(session, owner_a):
    links = {
        "anon_8d": Link(url="https://example.com/1", short_code="anon8day", created_at=NOW - timedelta(days=8)),
        "anon_30d": Link(url="https://example.com/2", short_code="anon30dy", created_at=NOW - timedelta(days=30)),
        "anon_6d": Link(url="https://example.com/3", short_code="anon6day", created_at=NOW - timedelta(days=6)),
        "owned_8d": Link(url="https://example.com/4", short_code="ownd8day", user_id=owner_a,
                         created_at=NOW - timedelta(days=8)),
        "owned_1y": Link(url="https://example.com/5", short_code="ownd1yr0", user_id=owner_a,
                         created_at=NOW - timedelta(days=365)),
    }
    session.add_all(links.values())
    await session.commit()
    return links


async def remaining_codes(session):
    result = await session.execute(select(Link.short_code).order_by(Link.short_code))
    return list(result.scalars().all())


class TestExpirySweeper:

    def test_cutoff_is_seven_days_back(self, repository):
        sweeper = ExpirySweeper(repository, clock=fixed_clock)

        assert sweeper.cutoff() == NOW - timedelta(days=7)

    @pytest.mark.asyncio
    async def test_deletes_only_stale_anonymous(self, session, repository, seeded):
        sweeper = ExpirySweeper(repository, clock=fixed_clock)

        deleted = await sweeper.sweep()

        assert set(deleted) == {seeded["anon_8d"].id, seeded["anon_30d"].id}
        assert await remaining_codes(session) == ["anon6day", "ownd1yr0", "ownd8day"]

    @pytest.mark.asyncio
    async def test_second_run_is_noop(self, session, repository, seeded):
        sweeper = ExpirySweeper(repository, clock=fixed_clock)

        await sweeper.sweep()
        deleted = await sweeper.sweep()

        assert deleted == []
        assert len(await remaining_codes(session)) == 3

    @pytest.mark.asyncio
    async def test_custom_retention(self, session, repository, seeded):
        sweeper = ExpirySweeper(repository, retention=timedelta(days=1), clock=fixed_clock)

        deleted = await sweeper.sweep()

        assert len(deleted) == 3
        assert await remaining_codes(session) == ["ownd1yr0", "ownd8day"]

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self):
        class BrokenRepository:
            async def find_expired_anonymous(self, cutoff):
                raise RuntimeError("connection lost")

            async def delete_many(self, link_ids):
                raise AssertionError("must not be reached")

        sweeper = ExpirySweeper(BrokenRepository(), clock=fixed_clock)

        with pytest.raises(RuntimeError, match="connection lost"):
            await sweeper.sweep()


class TestBeatSchedule:

    def test_daily_at_three(self):
        from tasks import app

        entry = app.conf.beat_schedule["delete-expired-anonymous-links-daily"]

        assert entry["task"] == "tasks.delete_expired_anonymous_links"
        assert entry["schedule"].hour == {3}
        assert entry["schedule"].minute == {0}


class FakeEngine:

    def __init__(self):
        self.disposed = []

    async def dispose(self):
        self.disposed.append(True)


@asynccontextmanager
async def fake_session():
    yield object()


def repository_returning(links):
    class StaticRepository:
        deleted = []

        def __init__(self, session):
            pass

        async def find_expired_anonymous(self, cutoff):
            return links

        async def delete_many(self, link_ids):
            StaticRepository.deleted.extend(link_ids)

    return StaticRepository


class FailingRepository:

    def __init__(self, session):
        pass

    async def find_expired_anonymous(self, cutoff):
        raise RuntimeError("connection lost")

    async def delete_many(self, link_ids):
        raise AssertionError("must not be reached")


class TestCleanupTask:

    @pytest.fixture
    def fake_engine(self, monkeypatch):
        import tasks

        engine = FakeEngine()
        monkeypatch.setattr(tasks, "engine", engine)
        monkeypatch.setattr(tasks, "async_session_maker", fake_session)
        return engine

    def test_returns_deleted_count_and_disposes(self, monkeypatch, fake_engine):
        import tasks

        stale = [SimpleNamespace(id=uuid.uuid4()), SimpleNamespace(id=uuid.uuid4())]
        repository_class = repository_returning(stale)
        monkeypatch.setattr(tasks, "SQLAlchemyLinkRepository", repository_class)

        assert tasks.delete_expired_anonymous_links() == 2
        assert repository_class.deleted == [link.id for link in stale]
        assert fake_engine.disposed == [True]

    def test_disposes_engine_when_sweep_fails(self, monkeypatch, fake_engine):
        import tasks

        monkeypatch.setattr(tasks, "SQLAlchemyLinkRepository", FailingRepository)

        with pytest.raises(RuntimeError, match="connection lost"):
            tasks.delete_expired_anonymous_links()
        assert fake_engine.disposed == [True]
