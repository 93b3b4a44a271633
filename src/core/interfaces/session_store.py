"""Session store contract.

Why Protocol:
- A structural contract (duck typing) with no rigid inheritance.
- The API client works the same against a JSON file, memory, or a keyring
  backend, and tests can swap in the in-memory one.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from core.domain.auth import StoredSession

SessionListener = Callable[[StoredSession | None], None]


@runtime_checkable
class SessionStore(Protocol):
    """Holds the tokens of the signed-in user.

    Design rules:
    - `set`/`clear` notify every subscriber with the new value (`None` on clear).
    - `subscribe` returns a callable that removes the listener.
    """

    def get(self) -> StoredSession | None:
        ...

    def set(self, session: StoredSession) -> None:
        ...

    def clear(self) -> None:
        ...

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        ...
