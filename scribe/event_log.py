"""Append-only, capacity-bounded audit log (newest first)."""

import logging
from collections import deque
from datetime import datetime
from typing import Callable, Optional

from scribe.models import LogType, SystemLogEntry, new_id, to_millis, utcnow
from scribe.record_store import JsonTable, RecordStore, TableKey

logger = logging.getLogger(__name__)

LOG_CAPACITY = 200


class EventLog:
    """Ring buffer of system events, written through to the record store.

    The buffer is read from the store once and kept in memory; appending
    evicts the oldest entry once the capacity is reached.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utcnow,
                 capacity: int = LOG_CAPACITY):
        self.table = JsonTable(store, TableKey.LOGS, empty=[])
        self.capacity = capacity
        self._clock = clock
        self._buffer: Optional[deque] = None

    def _bounded(self, rows: list) -> deque:
        # Rows are newest first; a deque built from them would evict the head.
        return deque(rows[: self.capacity], maxlen=self.capacity)

    def _entries(self) -> deque:
        if self._buffer is None:
            self._buffer = self._bounded(self.table.load())
        return self._buffer

    def append(self, type: LogType, message: str, user_id: Optional[str] = None) -> SystemLogEntry:
        entry = SystemLogEntry(
            id=new_id("log"),
            type=type,
            message=message,
            timestamp=to_millis(self._clock()),
            user_id=user_id,
        )
        buffer = self._entries()
        buffer.appendleft(entry.to_document())
        self.table.dump(list(buffer))
        return entry

    def entries(self) -> list[SystemLogEntry]:
        return [SystemLogEntry.model_validate(e) for e in self._entries()]

    def __len__(self) -> int:
        return len(self._entries())

    # --- Backup hooks ---

    def snapshot(self) -> list:
        return self.table.load()

    def restore(self, entries: list) -> None:
        self._buffer = self._bounded(entries)
        self.table.dump(list(self._buffer))

    def clear(self) -> None:
        self.table.clear()
        self._buffer = None
