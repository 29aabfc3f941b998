"""Whole-system backup, restore and factory reset."""

import json
import logging
from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from scribe.config_table import ConfigTable, merge_with_defaults, migrate_config
from scribe.defaults import default_config_document
from scribe.errors import MalformedBackup
from scribe.event_log import EventLog
from scribe.feedback import FeedbackStore
from scribe.identity import UserTable
from scribe.models import AppConfig, LogType, ProjectRecord, PromptFeedback, SystemLogEntry, UserRecord, utcnow
from scribe.projects import ProjectStore
from scribe.session import Session

logger = logging.getLogger(__name__)

ROW_MODELS = {
    "users": UserRecord,
    "projects": ProjectRecord,
    "logs": SystemLogEntry,
    "feedback": PromptFeedback,
}


class BackupDocument(BaseModel):
    """Interchange shape of an exported backup. Missing or null tables are skipped on restore."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    users: Optional[list[dict[str, Any]]] = None
    projects: Optional[list[dict[str, Any]]] = None
    config: Optional[dict[str, Any]] = None
    logs: Optional[list[dict[str, Any]]] = None
    feedback: Optional[list[dict[str, Any]]] = None
    backup_date: Optional[str] = None

    @field_validator("users", "projects", "logs", "feedback")
    @classmethod
    def _rows_are_readable(cls, rows, info: ValidationInfo):
        # Rows are stored as given, so each must read back as its table's record.
        if rows is not None:
            model = ROW_MODELS[info.field_name]
            for row in rows:
                try:
                    model.model_validate(row)
                except ValidationError as e:
                    raise ValueError(
                        f"unreadable {info.field_name} row {row.get('id')!r}: {e.error_count()} error(s)"
                    ) from e
        return rows

    @field_validator("config")
    @classmethod
    def _config_is_readable(cls, document):
        if document is not None:
            try:
                AppConfig.model_validate(merge_with_defaults(migrate_config(document), default_config_document()))
            except ValidationError as e:
                raise ValueError(f"unreadable config: {e.error_count()} error(s)") from e
        return document


def parse_backup(text: str) -> BackupDocument:
    try:
        raw = json.loads(text)
    except (TypeError, ValueError) as e:
        raise MalformedBackup(f"Backup is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise MalformedBackup("Backup must be a JSON object")
    try:
        return BackupDocument.model_validate(raw)
    except ValidationError as e:
        raise MalformedBackup(f"Backup has an unexpected shape: {e.error_count()} error(s)") from e


class BackupController:
    def __init__(
        self,
        users: UserTable,
        projects: ProjectStore,
        config: ConfigTable,
        events: EventLog,
        feedback: FeedbackStore,
        session: Session,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.users = users
        self.projects = projects
        self.config = config
        self.events = events
        self.feedback = feedback
        self.session = session
        self._clock = clock

    def create_backup(self) -> str:
        backup = {
            "users": self.users.snapshot(),
            "projects": self.projects.snapshot(),
            "config": self.config.snapshot(),
            "logs": self.events.snapshot(),
            "feedback": self.feedback.snapshot(),
            "backupDate": self._clock().isoformat(),
        }
        return json.dumps(backup, ensure_ascii=False, indent=2)

    def restore_backup(self, text: str) -> bool:
        """Overwrite every table present in the backup. Returns False if the text is unusable."""
        try:
            backup = parse_backup(text)
        except MalformedBackup as e:
            logger.warning("Backup restore failed: %s", e)
            return False

        if backup.users is not None:
            self.users.restore(backup.users)
        if backup.projects is not None:
            self.projects.restore(backup.projects)
        if backup.config is not None:
            self.config.restore(backup.config)
        if backup.logs is not None:
            self.events.restore(backup.logs)
        if backup.feedback is not None:
            self.feedback.restore(backup.feedback)

        self.events.append(LogType.WARNING, "System backup restored.")
        logger.info("Restored backup dated %s", backup.backup_date or "unknown")
        return True

    def factory_reset(self) -> None:
        """Remove every table and the session pointer. Irreversible."""
        self.session.teardown()
        self.users.clear()
        self.projects.clear()
        self.config.clear()
        self.events.clear()
        self.feedback.clear()
        logger.warning("Factory reset completed")
