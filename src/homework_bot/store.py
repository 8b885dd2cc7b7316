from __future__ import annotations

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .models import KVEntry, utcnow


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def put(self, key: str, value: str) -> None: ...


class SqlKeyValueStore:
    """Durable string -> string mapping on top of the ``kv_entries`` table.

    Errors are not handled here; ``SessionStateManager`` owns that policy.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker

    async def get(self, key: str) -> str | None:
        async with self._sessionmaker() as s:
            entry = await s.get(KVEntry, key)
            return entry.value if entry else None

    async def put(self, key: str, value: str) -> None:
        async with self._sessionmaker() as s:
            await s.merge(KVEntry(key=key, value=value, updated_at=utcnow()))
            await s.commit()
