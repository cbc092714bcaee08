"""Per-listing critical sections for validate-then-write sequences."""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict


class ListingBusyError(RuntimeError):
    """Raised when a listing's critical section could not be entered in time."""

    def __init__(self, listing_id: str) -> None:
        super().__init__(f"Listing {listing_id} is busy")
        self.listing_id = listing_id


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class ListingLockRegistry:
    """In-process mutual exclusion keyed by listing id.

    Entries are dropped once no coroutine holds or waits on them. Across
    processes the row lock taken in the write transaction and the storage
    exclusion constraints carry the guarantee.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _LockEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def is_locked(self, listing_id: str) -> bool:
        entry = self._entries.get(listing_id)
        return entry is not None and entry.lock.locked()

    @asynccontextmanager
    async def hold(self, listing_id: str, *, timeout: float | None = None) -> AsyncIterator[None]:
        entry = self._entries.setdefault(listing_id, _LockEntry())
        entry.users += 1
        try:
            try:
                await asyncio.wait_for(entry.lock.acquire(), timeout=timeout)
            except asyncio.TimeoutError:
                raise ListingBusyError(listing_id) from None
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            entry.users -= 1
            if entry.users == 0:
                self._entries.pop(listing_id, None)


listing_locks = ListingLockRegistry()
