"""Model provider client: streams chat replies and rewrites prompts."""

import logging
import os
from typing import AsyncIterator, Optional

from anthropic import AsyncAnthropic

from backend.ai.prompts import build_chat_messages, build_optimizer_messages
from scribe.errors import MissingProviderCredential
from scribe.models import Message

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
EMPTY_PROMPT_REPLY = "The prompt could not be generated."


class ModelProvider:
    def __init__(self, model: Optional[str] = None):
        self.model = model or os.getenv("SCRIBE_MODEL", DEFAULT_MODEL)
        self._client: Optional[AsyncAnthropic] = None

    def _get_client(self) -> AsyncAnthropic:
        if self._client is None:
            api_key = os.getenv("ANTHROPIC_API_KEY")
            if not api_key:
                raise MissingProviderCredential("ANTHROPIC_API_KEY")
            self._client = AsyncAnthropic(api_key=api_key)
        return self._client

    async def stream_reply(self, system_instruction: str, history: list[Message]) -> AsyncIterator[str]:
        """Yield reply text chunks for the transcript ``history``."""
        client = self._get_client()
        async with client.messages.stream(
            model=self.model,
            max_tokens=4000,
            system=system_instruction,
            messages=build_chat_messages(history),
            temperature=0.8,
        ) as stream:
            async for text in stream.text_stream:
                yield text

    async def optimize_prompt(self, raw_input: str, kind: str) -> str:
        client = self._get_client()
        system, messages = build_optimizer_messages(raw_input, kind)
        response = await client.messages.create(
            model=self.model,
            max_tokens=2000,
            system=system,
            messages=messages,
            temperature=0.7,
        )
        text = "".join(block.text for block in response.content if block.type == "text")
        if not text:
            logger.warning("Prompt optimizer returned no text")
        return text or EMPTY_PROMPT_REPLY
