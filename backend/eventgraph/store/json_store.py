"""
JSON document store: the only gateway to persisted state.

PERSISTENCE STRATEGY: Re-read, Modify, Write Back under one Lock
=================================================================

Problem:
  Every request works on a full snapshot of one JSON file. Two mutations
  that interleave their load -> modify -> save sequences lose one of the
  writes, and two concurrent creates can hand out the same id.

Solution:
  1. Reads call `load()` directly and see the latest saved snapshot.
  2. Mutations go through `transaction()`, which holds a single
     asyncio.Lock around load -> apply -> save. Only one read-modify-write
     is ever in flight per store.
  3. Every successful mutation is written back. Nothing is kept in memory
     between operations, so the file is always the source of truth.
  4. Saves go to a sibling temp file which is then renamed over the
     target, so a crashed write never leaves a truncated document.

  Readers never take the lock. They can observe the state from just
  before an in-flight mutation commits, which is fine because they never
  write it back.
"""

import asyncio
import json
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiofiles
import aiofiles.os
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from eventgraph.core.errors import StoreIOError
from eventgraph.core.logging import get_logger
from eventgraph.core.metrics import record_store_operation

logger = get_logger(__name__)

COLLECTIONS = ("users", "events", "locations", "participants")


class StoreDocument(BaseModel):
    """The whole dataset. Collections missing from the file read as empty."""

    users: list[dict[str, Any]] = Field(default_factory=list)
    events: list[dict[str, Any]] = Field(default_factory=list)
    locations: list[dict[str, Any]] = Field(default_factory=list)
    participants: list[dict[str, Any]] = Field(default_factory=list)

    # Unknown top-level keys survive a load/save round trip
    model_config = {"extra": "allow"}

    def collection(self, name: str) -> list[dict[str, Any]]:
        if name not in COLLECTIONS:
            raise KeyError(name)
        return getattr(self, name)


class JsonStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    async def load(self) -> StoreDocument:
        """Read and parse the document. Raises StoreIOError on any failure."""
        start = time.perf_counter()
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
            document = StoreDocument.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            self._failed("load", start, e)
            raise StoreIOError("Data store is unavailable", str(self.path), "load") from e

        record_store_operation("load", time.perf_counter() - start)
        return document

    async def save(self, document: StoreDocument) -> None:
        """Write the document atomically. Raises StoreIOError on failure."""
        start = time.perf_counter()
        payload = json.dumps(document.model_dump(), indent=2, ensure_ascii=False)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
                await f.flush()
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            self._failed("save", start, e)
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
            raise StoreIOError("Data store could not be written", str(self.path), "save") from e

        record_store_operation("save", time.perf_counter() - start)
        logger.debug(
            "store_saved",
            users=len(document.users),
            events=len(document.events),
            locations=len(document.locations),
            participants=len(document.participants),
        )

    async def initialize(self) -> bool:
        """Create an empty document if none exists. Returns True if created."""
        if await aiofiles.os.path.exists(self.path):
            return False
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        await self.save(StoreDocument())
        logger.info("store_initialized", path=str(self.path))
        return True

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreDocument]:
        """
        Exclusive load -> modify -> save.
        The document is saved only if the body exits without raising.
        """
        async with self._lock:
            document = await self.load()
            yield document
            await self.save(document)

    def _failed(self, operation: str, start: float, error: Exception) -> None:
        record_store_operation(operation, time.perf_counter() - start, failed=True)
        logger.error(
            "store_operation_failed",
            operation=operation,
            path=str(self.path),
            error_type=type(error).__name__,
            error=str(error),
        )
