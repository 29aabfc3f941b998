"""One authoring conversation: quota gate, streamed reply, autosave."""

import logging
from datetime import datetime
from typing import AsyncIterator, Callable, Optional

from scribe.config_table import ConfigTable
from scribe.event_log import EventLog
from scribe.identity import IdentityManager
from scribe.models import AppMode, LogType, Message, ProjectRecord, Role, UserRecord, to_millis, utcnow
from scribe.projects import ProjectStore, derive_title

logger = logging.getLogger(__name__)

APOLOGY = "Sorry, something went wrong."

# (system_instruction, history) -> stream of text chunks
ReplyGenerator = Callable[[str, list[Message]], AsyncIterator[str]]


class ChatFlow:
    """Drives a conversation and saves it after every completed exchange.

    The project is created lazily on the first completed exchange. While a
    reply streams in, the last message is the only one that changes.
    """

    def __init__(
        self,
        identity: IdentityManager,
        projects: ProjectStore,
        config: ConfigTable,
        events: EventLog,
        user: UserRecord,
        mode: AppMode,
        project: Optional[ProjectRecord] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.identity = identity
        self.projects = projects
        self.config = config
        self.events = events
        self.user = user
        self.mode = project.mode if project else mode
        self.messages: list[Message] = list(project.messages) if project else []
        self.project_id: Optional[str] = project.id if project else None
        self.limit_reached = False
        self._clock = clock

    def _now(self) -> int:
        return to_millis(self._clock())

    async def send(
        self,
        text: str,
        generate: ReplyGenerator,
        on_chunk: Optional[Callable[[str], None]] = None,
    ) -> Optional[Message]:
        """Send ``text`` and stream the reply. Returns None if nothing was sent."""
        if not text.strip():
            return None
        if not self.identity.check_and_increment_usage():
            self.limit_reached = True
            return None

        self.messages.append(Message(role=Role.USER, text=text, timestamp=self._now()))
        history = list(self.messages)
        reply = Message(role=Role.MODEL, text="", timestamp=self._now())
        self.messages.append(reply)

        try:
            instruction = self.config.system_instruction(self.mode)
            async for chunk in generate(instruction, history):
                if chunk:
                    reply.text += chunk
                    if on_chunk:
                        on_chunk(reply.text)
        except Exception as e:
            logger.exception("Chat reply failed for user %s", self.user.id)
            self.events.append(LogType.ERROR, f"Chat error: {e}", self.user.id)
            self.messages[-1] = Message(role=Role.MODEL, text=APOLOGY, timestamp=self._now())
            return self.messages[-1]

        reply.timestamp = self._now()
        self.save()
        return reply

    def save(self) -> ProjectRecord:
        """Persist the transcript, creating the project on first save."""
        project = self.projects.get(self.project_id) if self.project_id else None
        if project is None:
            project = self.projects.create(self.user.id, self.mode, derive_title(self.messages))
            self.project_id = project.id
        project.messages = list(self.messages)
        return self.projects.save(project)
