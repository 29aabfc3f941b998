"""Explicit handle on the signed-in user.

The persisted pointer is read once by ``Session.init`` when the application
starts; afterwards the handle is passed to whoever needs the current user and
every change is written through to the store.

A detached handle has no pointer. Servers build one per client request from
the caller's own credentials, so clients never share a current user.
"""

from typing import Optional

from scribe.models import UserRecord
from scribe.record_store import JsonTable, RecordStore, TableKey


class Session:
    def __init__(self, store: Optional[RecordStore] = None):
        self.pointer = JsonTable(store, TableKey.SESSION) if store is not None else None
        self._user: Optional[UserRecord] = None

    @classmethod
    def init(cls, store: RecordStore) -> "Session":
        session = cls(store)
        stored = session.pointer.load()
        if stored:
            session._user = UserRecord.model_validate(stored)
        return session

    @classmethod
    def detached(cls, user: Optional[UserRecord] = None) -> "Session":
        session = cls()
        session._user = user
        return session

    @property
    def user(self) -> Optional[UserRecord]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def bind(self, user: UserRecord) -> None:
        self._user = user
        if self.pointer is not None:
            self.pointer.dump(user.to_document())

    def teardown(self) -> None:
        self._user = None
        if self.pointer is not None:
            self.pointer.clear()
