"""Wires every table module to one record store and one session handle."""

from datetime import datetime
from typing import Callable, Optional

from scribe.backup import BackupController
from scribe.config_table import ConfigTable
from scribe.conversation import ChatFlow
from scribe.event_log import EventLog
from scribe.feedback import FeedbackStore
from scribe.identity import IdentityManager
from scribe.models import AppMode, ProjectRecord, UserRecord, utcnow
from scribe.projects import ProjectStore
from scribe.record_store import RecordStore
from scribe.session import Session


class Studio:
    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = utcnow,
        auth_latency: Optional[float] = None,
    ):
        self.store = store
        self.clock = clock
        self.auth_latency = auth_latency
        self.events = EventLog(store, clock)
        self.config = ConfigTable(store, self.events)
        self.session = Session.init(store)
        self.identity = self.identity_for(self.session)
        self.projects = ProjectStore(store, clock)
        self.feedback = FeedbackStore(store, self.events, clock)
        self.backups = BackupController(
            self.identity.users,
            self.projects,
            self.config,
            self.events,
            self.feedback,
            self.session,
            clock,
        )

    def identity_for(self, session: Session) -> IdentityManager:
        """Identity manager over the shared tables, bound to ``session``."""
        return IdentityManager(self.store, session, self.config, self.events, self.clock, self.auth_latency)

    def chat(
        self,
        user: UserRecord,
        mode: AppMode,
        project: Optional[ProjectRecord] = None,
        identity: Optional[IdentityManager] = None,
    ) -> ChatFlow:
        return ChatFlow(
            identity or self.identity,
            self.projects,
            self.config,
            self.events,
            user,
            mode,
            project=project,
            clock=self.clock,
        )
