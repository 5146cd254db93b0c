import time

from typing_extensions import Protocol


class SessionStateStore(Protocol):
    """Server-side storage for login attempts and tokens.

    Keys are namespaced by browser session. Implementations don't need to
    lock: one browser session never runs two callbacks at once, so
    last-write-wins is fine.
    """

    def set(self, key: str, value: str, ttl: int | None = None): ...

    def get(self, key: str) -> str | None: ...

    def delete(self, key: str): ...

    def pop(self, key: str) -> str | None:
        """Atomically get and delete a key. Returns None if key doesn't exist."""
        ...


class MemoryStateStore:
    """In-process store with per-key expiry, for tests and single workers."""

    def __init__(self):
        self.data: dict[str, tuple[str, float | None]] = {}

    def _expired(self, expires_at: float | None) -> bool:
        return expires_at is not None and time.time() >= expires_at

    def set(self, key: str, value: str, ttl: int | None = None):
        expires_at = time.time() + ttl if ttl is not None else None
        self.data[key] = (value, expires_at)

    def get(self, key: str) -> str | None:
        entry = self.data.get(key)

        if entry is None:
            return None

        value, expires_at = entry

        if self._expired(expires_at):
            del self.data[key]
            return None

        return value

    def delete(self, key: str):
        self.data.pop(key, None)

    def pop(self, key: str) -> str | None:
        entry = self.data.pop(key, None)

        if entry is None:
            return None

        value, expires_at = entry

        return None if self._expired(expires_at) else value
