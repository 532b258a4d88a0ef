"""Tests for NotificationStore statement building and error wrapping."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from app.errors import InvalidArgument, StoreUnavailable
from app.services.notification_store import NotificationDraft, NotificationStore


class _RecordingSession:
    def __init__(self, result: object = None, error: Exception | None = None) -> None:
        self.statements: list[object] = []
        self.committed = False
        self._result = result
        self._error = error

    async def __aenter__(self) -> "_RecordingSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def execute(self, statement: object) -> object:
        self.statements.append(statement)
        if self._error is not None:
            raise self._error
        return self._result

    async def commit(self) -> None:
        self.committed = True


def _factory(session: _RecordingSession):
    return lambda: session


def _sql(statement: object) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


class TestUpdateRead:
    @pytest.mark.asyncio
    async def test_requires_exactly_one_target(self) -> None:
        session = _RecordingSession()
        store = NotificationStore(_factory(session))

        with pytest.raises(InvalidArgument):
            await store.update_read()
        with pytest.raises(InvalidArgument):
            await store.update_read(notification_id="n1", user_id="u1")
        assert session.statements == []

    @pytest.mark.asyncio
    async def test_mark_all_is_single_predicate_update(self) -> None:
        session = _RecordingSession(result=SimpleNamespace(rowcount=3))
        store = NotificationStore(_factory(session))

        changed = await store.update_read(user_id="u1")

        assert changed == 3
        assert session.committed is True
        assert len(session.statements) == 1
        sql = _sql(session.statements[0])
        assert sql.startswith("UPDATE notifications SET")
        assert "IS false" in sql
        assert "notifications.user_id =" in sql

    @pytest.mark.asyncio
    async def test_mark_one_filters_by_id(self) -> None:
        session = _RecordingSession(result=SimpleNamespace(rowcount=0))
        store = NotificationStore(_factory(session))

        changed = await store.update_read(notification_id="missing")

        assert changed == 0
        sql = _sql(session.statements[0])
        assert "notifications.id =" in sql
        assert "notifications.user_id" not in sql


class TestStoreErrors:
    @pytest.mark.asyncio
    async def test_database_error_becomes_store_unavailable(self) -> None:
        error = OperationalError("SELECT 1", {}, Exception("connection refused"))
        store = NotificationStore(_factory(_RecordingSession(error=error)))

        with pytest.raises(StoreUnavailable) as exc_info:
            await store.count_unread("u1")

        assert exc_info.value.__cause__ is error
        assert "connection refused" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_create_many_with_no_drafts_skips_database(self) -> None:
        session = _RecordingSession()
        store = NotificationStore(_factory(session))

        assert await store.create_many([]) == []
        assert await store.disabled_users([], "trades") == set()
        assert session.statements == []

    def test_draft_defaults(self) -> None:
        draft = NotificationDraft(user_id="u1", type="player_news", title="News", message="Update")
        assert draft.priority == "normal"
        assert draft.data == {}
