"""Append-only ratings of generated prompts."""

from datetime import datetime
from typing import Callable, Optional

from scribe.event_log import EventLog
from scribe.models import LogType, PromptFeedback, Rating, new_id, to_millis, utcnow
from scribe.record_store import JsonTable, RecordStore, TableKey


class FeedbackStore:
    def __init__(self, store: RecordStore, events: EventLog, clock: Callable[[], datetime] = utcnow):
        self.table = JsonTable(store, TableKey.FEEDBACK, empty=[])
        self.events = events
        self._clock = clock

    def append(self, feedback: PromptFeedback) -> None:
        rows = self.table.load()
        rows.append(feedback.to_document())
        self.table.dump(rows)
        self.events.append(LogType.INFO, f"Prompt feedback received: {feedback.rating.value}", feedback.user_id)

    def submit(
        self,
        user_id: str,
        original_input: str,
        generated_prompt: str,
        rating: Rating,
        comment: Optional[str] = None,
    ) -> PromptFeedback:
        feedback = PromptFeedback(
            id=new_id("fb"),
            user_id=user_id,
            original_input=original_input,
            generated_prompt=generated_prompt,
            rating=rating,
            comment=comment,
            timestamp=to_millis(self._clock()),
        )
        self.append(feedback)
        return feedback

    def list_all(self) -> list[PromptFeedback]:
        return [PromptFeedback.model_validate(f) for f in self.table.load()]

    # --- Backup hooks ---

    def snapshot(self) -> list:
        return self.table.load()

    def restore(self, rows: list) -> None:
        self.table.dump(rows)

    def clear(self) -> None:
        self.table.clear()
