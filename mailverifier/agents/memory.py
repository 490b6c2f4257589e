"""
Agent memory backed by LangGraph checkpointers.

    ":memory:"         -> InMemorySaver (lost on restart)
    "file:<path>"      -> AsyncSqliteSaver on a local SQLite file
"""
import logging

import aiosqlite
from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.checkpoint.memory import InMemorySaver
from langgraph.checkpoint.sqlite.aio import AsyncSqliteSaver


logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"
FILE_PREFIX = "file:"


class Memory:
    """Conversation memory for one agent; the saver is created on first use."""

    def __init__(self, storage_url: str = IN_MEMORY):
        if storage_url != IN_MEMORY and not storage_url.startswith(FILE_PREFIX):
            raise ValueError(f"Unsupported memory storage url: {storage_url}")
        self.storage_url = storage_url
        self._saver: BaseCheckpointSaver | None = None
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_persistent(self) -> bool:
        return self.storage_url.startswith(FILE_PREFIX)

    @property
    def path(self) -> str | None:
        return self.storage_url[len(FILE_PREFIX):] if self.is_persistent else None

    @property
    def checkpointer(self) -> BaseCheckpointSaver:
        """Create the saver lazily (the SQLite connection opens on first checkpoint)."""
        if self._saver is None:
            if self.is_persistent:
                self._conn = aiosqlite.connect(self.path)
                self._saver = AsyncSqliteSaver(self._conn)
                logger.info(f"🔧 Agent memory at {self.path}")
            else:
                self._saver = InMemorySaver()
        return self._saver

    async def close(self):
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
        self._saver = None
