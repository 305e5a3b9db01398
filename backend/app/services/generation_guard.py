from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Iterator

from app.core.exceptions import GenerationInProgressError


class GenerationGuard:
    """Admits a single generation at a time; extra requests are rejected, not queued."""

    def __init__(self) -> None:
        self._lock = Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def try_acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()

    @contextmanager
    def hold(self) -> Iterator[None]:
        if not self.try_acquire():
            raise GenerationInProgressError()
        try:
            yield
        finally:
            self.release()


generation_guard = GenerationGuard()
