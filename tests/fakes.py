# tests/fakes.py

from __future__ import annotations

from datetime import datetime, timedelta


class FakeClock:
    """
    Deterministic Clock for unit tests.

    - Returns a fixed time until moved
    - advance()/set() move it explicitly
    """

    def __init__(self, now: datetime | None = None) -> None:
        self.current = now or datetime(2024, 1, 1, 9, 0)

    def now(self) -> datetime:
        return self.current

    def set(self, now: datetime) -> None:
        self.current = now

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


class InMemoryBackend:
    """
    Dict-backed KeyValueBackend.

    Captures writes for assertions about how often the engine persists.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.writes: list[tuple[str, str]] = []

    def read(self, key: str) -> str | None:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        self.data[key] = value


class FailingBackend(InMemoryBackend):
    """Reads work, every write raises."""

    def write(self, key: str, value: str) -> None:
        raise OSError("disk full")
