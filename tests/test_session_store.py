"""Tests for session store implementations."""

from __future__ import annotations

import stat
from pathlib import Path

from adapters.session_store import FileSessionStore, MemorySessionStore
from core.domain.auth import StoredSession
from core.interfaces.session_store import SessionStore

SESSION = StoredSession(
    access_token="access-123",
    refresh_token="refresh-456",
    user_id="user-1",
    user_email="ada@example.com",
)


class TestMemorySessionStore:
    def test_implements_protocol(self) -> None:
        assert isinstance(MemorySessionStore(), SessionStore)

    def test_set_get_clear(self) -> None:
        store = MemorySessionStore()
        assert store.get() is None
        store.set(SESSION)
        assert store.get() == SESSION
        store.clear()
        assert store.get() is None

    def test_subscribers_are_notified(self) -> None:
        store = MemorySessionStore()
        seen: list[StoredSession | None] = []
        unsubscribe = store.subscribe(seen.append)

        store.set(SESSION)
        store.clear()
        unsubscribe()
        store.set(SESSION)

        assert seen == [SESSION, None]

    def test_unsubscribe_twice_is_harmless(self) -> None:
        store = MemorySessionStore()
        unsubscribe = store.subscribe(lambda _: None)
        unsubscribe()
        unsubscribe()


class TestFileSessionStore:
    def test_round_trip_between_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "session.json"
        FileSessionStore(path).set(SESSION)

        reloaded = FileSessionStore(path)
        assert reloaded.get() == SESSION
        assert reloaded.get().is_authenticated is True

    def test_file_is_private(self, tmp_path: Path) -> None:
        path = tmp_path / "session.json"
        FileSessionStore(path).set(SESSION)
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_clear_removes_file(self, tmp_path: Path) -> None:
        path = tmp_path / "session.json"
        store = FileSessionStore(path)
        store.set(SESSION)
        store.clear()
        assert not path.exists()
        assert FileSessionStore(path).get() is None

    def test_corrupt_file_means_signed_out(self, tmp_path: Path) -> None:
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        assert FileSessionStore(path).get() is None

    def test_repr_hides_tokens(self) -> None:
        assert "access-123" not in repr(SESSION)
