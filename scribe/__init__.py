"""
Scribe Persistence Engine

Session state and storage for a writing studio: a multi-table database over a
key-value record store, per-user daily quotas, conversation projects, a
bounded audit log, and whole-system backup/restore.

No model calls happen here; the engine only hands out system prompts.
"""

from scribe.record_store import RecordStore, MemoryRecordStore, SQLRecordStore, TableKey
from scribe.config_table import ConfigTable, merge_with_defaults, migrate_config
from scribe.identity import IdentityManager
from scribe.projects import ProjectStore, derive_title
from scribe.event_log import EventLog
from scribe.feedback import FeedbackStore
from scribe.backup import BackupController
from scribe.conversation import ChatFlow
from scribe.dashboard import dashboard_summary
from scribe.session import Session
from scribe.studio import Studio

__version__ = "0.1.0"
