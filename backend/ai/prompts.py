"""Prompt construction for the writing studio's model calls.

Per-mode system prompts live in the configuration document and are edited by
administrators; this module only holds the fixed prompt-builder instructions
and the message formatting shared by every call.
"""

from scribe.models import Message, Role

PROMPT_ENGINEER_SYSTEM = (
    "You are an expert prompt engineer and creative writing coach. Your job is to turn "
    "rough ideas into high-quality inputs optimized for large language models."
)

PROMPT_OPTIMIZER_TEMPLATE = """Turn the raw user idea below into a PERFECT, DETAILED and PROFESSIONAL system instruction or prompt for an AI model.

Goal: when this prompt is used, the model should write the best possible story or screenplay.

Content type: {kind}
<user_input>
{raw_input}
</user_input>

The prompt you write must include:
1. Role assignment (persona)
2. Task definition
3. Context and details
4. Tone and style guidelines
5. Format constraints

Output ONLY the prompt text, with no extra explanation."""

# Number of most recent messages forwarded with each chat turn
HISTORY_WINDOW = 40


def build_chat_messages(history: list[Message]) -> list[dict]:
    """Convert a transcript to provider messages, oldest first.

    Empty turns are dropped and consecutive turns from the same side are
    joined, since the provider requires strictly alternating roles.
    """
    messages: list[dict] = []
    for msg in history[-HISTORY_WINDOW:]:
        if not msg.text:
            continue
        role = "assistant" if msg.role == Role.MODEL else "user"
        if messages and messages[-1]["role"] == role:
            messages[-1]["content"] += "\n\n" + msg.text
        else:
            messages.append({"role": role, "content": msg.text})
    while messages and messages[0]["role"] != "user":
        messages.pop(0)
    return messages


def build_optimizer_messages(raw_input: str, kind: str) -> tuple[str, list[dict]]:
    """Returns (system_prompt, messages) for the prompt builder."""
    content = PROMPT_OPTIMIZER_TEMPLATE.format(kind=kind, raw_input=raw_input)
    return PROMPT_ENGINEER_SYSTEM, [{"role": "user", "content": content}]
