from __future__ import annotations


class IdAllocator:
    """Monotonic vertex id counter owned by a single model.

    Ids handed out by :meth:`allocate` are never reissued.  Ids that enter
    the model from elsewhere (loaded files, generators) must be passed to
    :meth:`observe` so the counter stays ahead of them.
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be >= 0")
        self._next = start

    def allocate(self) -> int:
        vid = self._next
        self._next += 1
        return vid

    def peek(self) -> int:
        return self._next

    def observe(self, vid: int) -> None:
        if vid < 0:
            raise ValueError(f"Vertex id must be >= 0, got {vid}")
        if vid >= self._next:
            self._next = vid + 1

    def reserve(self, floor: int) -> None:
        """Advance the counter to at least *floor*."""
        if floor > self._next:
            self._next = floor

    def __repr__(self) -> str:
        return f"IdAllocator(next={self._next})"
