"""Per-room serialization of edit requests."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass
class RoomLockRegistry:
    """Hands out one asyncio lock per room, dropping it once unused."""

    _locks: dict[str, asyncio.Lock] = field(default_factory=dict)
    _holders: dict[str, int] = field(default_factory=dict)

    @asynccontextmanager
    async def hold(self, room_id: str) -> AsyncIterator[None]:
        """Run the block while no other edit for the room is in progress."""
        lock = self._locks.setdefault(room_id, asyncio.Lock())
        self._holders[room_id] = self._holders.get(room_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[room_id] -= 1
            if self._holders[room_id] == 0:
                del self._holders[room_id]
                del self._locks[room_id]

    def active_rooms(self) -> set[str]:
        """Rooms with an edit running or waiting."""
        return set(self._locks)
