"""Record store adapter: named JSON blobs over a durable key-value area.

Each table lives under one well-known key. There are no transactions and no
atomicity across keys; an absent key reads as the table's empty value.
"""

import copy
import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


class TableKey(str, Enum):
    SESSION = "scribe_user"
    USERS = "scribe_users_db"
    PROJECTS = "scribe_projects_db"
    CONFIG = "scribe_config"
    LOGS = "scribe_system_logs"
    FEEDBACK = "scribe_prompt_feedback"


def encode(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


class RecordStore:
    """Synchronous get/set/remove over raw strings."""

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, raw: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryRecordStore(RecordStore):
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, raw: str) -> None:
        self._data[key] = raw

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


# --- SQL-backed store ---

class Base(DeclarativeBase):
    pass


class StoredRecord(Base):
    __tablename__ = "records"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))


class SQLRecordStore(RecordStore):
    """Durable store persisting every key as one row of a SQLAlchemy table."""

    def __init__(self, database_url: str):
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.engine = create_engine(database_url, connect_args=connect_args)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)

    def read(self, key: str) -> Optional[str]:
        db = self._session_factory()
        try:
            row = db.get(StoredRecord, key)
            return row.value if row else None
        finally:
            db.close()

    def write(self, key: str, raw: str) -> None:
        db = self._session_factory()
        try:
            row = db.get(StoredRecord, key)
            if row:
                row.value = raw
            else:
                db.add(StoredRecord(key=key, value=raw))
            db.commit()
        finally:
            db.close()

    def remove(self, key: str) -> None:
        db = self._session_factory()
        try:
            row = db.get(StoredRecord, key)
            if row:
                db.delete(row)
                db.commit()
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


class JsonTable:
    """One named, independently serialized collection inside a record store."""

    def __init__(self, store: RecordStore, key: TableKey, empty: Any = None):
        self.store = store
        self.key = key
        self._empty = empty

    def exists(self) -> bool:
        return self.store.read(self.key.value) is not None

    def load(self) -> Any:
        raw = self.store.read(self.key.value)
        if raw is None:
            return copy.deepcopy(self._empty)
        return json.loads(raw)

    def dump(self, value: Any) -> None:
        self.store.write(self.key.value, encode(value))

    def clear(self) -> None:
        self.store.remove(self.key.value)
