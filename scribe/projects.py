"""Per-user conversation records with ordered message history."""

from datetime import datetime
from typing import Callable, Optional

from scribe.models import AppMode, Message, ProjectRecord, Role, new_id, to_millis, utcnow
from scribe.record_store import JsonTable, RecordStore, TableKey

DEFAULT_TITLE = "New Project"
TITLE_PREFIX_LENGTH = 30


def derive_title(messages: list[Message]) -> str:
    """Name a conversation after the opening of its first user message."""
    first = next((m for m in messages if m.role == Role.USER), None)
    if first is None:
        return DEFAULT_TITLE
    return first.text[:TITLE_PREFIX_LENGTH] + "..."


class ProjectStore:
    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utcnow):
        self.table = JsonTable(store, TableKey.PROJECTS, empty=[])
        self._clock = clock

    def _all(self) -> list[ProjectRecord]:
        return [ProjectRecord.model_validate(p) for p in self.table.load()]

    def list_for_user(self, user_id: str) -> list[ProjectRecord]:
        projects = [p for p in self._all() if p.user_id == user_id]
        return sorted(projects, key=lambda p: p.updated_at, reverse=True)

    def get(self, project_id: str) -> Optional[ProjectRecord]:
        return next((p for p in self._all() if p.id == project_id), None)

    def create(self, user_id: str, mode: AppMode, title: str = DEFAULT_TITLE) -> ProjectRecord:
        project = ProjectRecord(
            id=new_id("proj"),
            user_id=user_id,
            name=title,
            mode=mode,
            messages=[],
            updated_at=to_millis(self._clock()),
        )
        self.save(project)
        return project

    def save(self, project: ProjectRecord) -> ProjectRecord:
        """Upsert by id, stamping ``updated_at`` with the save time."""
        project.updated_at = to_millis(self._clock())
        rows = self.table.load()
        document = project.to_document()
        for index, row in enumerate(rows):
            if row.get("id") == project.id:
                rows[index] = document
                break
        else:
            rows.append(document)
        self.table.dump(rows)
        return project

    def delete(self, project_id: str) -> bool:
        rows = self.table.load()
        remaining = [row for row in rows if row.get("id") != project_id]
        self.table.dump(remaining)
        return len(remaining) != len(rows)

    # --- Backup hooks ---

    def snapshot(self) -> list:
        return self.table.load()

    def restore(self, rows: list) -> None:
        self.table.dump(rows)

    def clear(self) -> None:
        self.table.clear()
