"""Session store implementations.

- `MemorySessionStore`: process-local, for tests and embedding.
- `FileSessionStore`: JSON file in the user config dir so the CLI stays signed
  in between invocations.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Callable

import structlog
from pydantic import ValidationError

from core.domain.auth import StoredSession
from core.interfaces.session_store import SessionListener

logger = structlog.get_logger(__name__)


class MemorySessionStore:
    def __init__(self, initial: StoredSession | None = None) -> None:
        self._session = initial
        self._listeners: list[SessionListener] = []

    def get(self) -> StoredSession | None:
        return self._session

    def set(self, session: StoredSession) -> None:
        self._session = session
        self._notify(session)

    def clear(self) -> None:
        self._session = None
        self._notify(None)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, session: StoredSession | None) -> None:
        for listener in list(self._listeners):
            listener(session)


class FileSessionStore(MemorySessionStore):
    """Persists the session as JSON (mode 0600).

    A corrupt or unreadable file is treated as "signed out" and logged.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(self._load(path))
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @staticmethod
    def _load(path: Path) -> StoredSession | None:
        if not path.exists():
            return None
        try:
            return StoredSession.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.warning("session_file_unreadable", path=str(path), error=str(exc))
            return None

    def set(self, session: StoredSession) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(session.model_dump(mode="json"), indent=2, sort_keys=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload + "\n")
        super().set(session)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        super().clear()
