import json
import logging
from datetime import datetime
from typing import Optional

import anthropic
from pydantic import ValidationError

import config
from models import IntentResponse, Task
from prompts import CONVERSATION_PROMPT, INTENT_PROMPT

logger = logging.getLogger(__name__)


def strip_code_fence(text: str) -> str:
    """Strip a markdown code block wrapped around a model reply."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = lines[1:]  # Remove first line (```json)
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]  # Remove last line (```)
        text = "\n".join(lines)
    return text


def format_task_list(tasks: list[Task]) -> str:
    open_tasks = [task for task in tasks if not task.completed]
    if not open_tasks:
        return "(none)"
    return "\n".join(
        f"{number}. [{task.id}] {task.text}" for number, task in enumerate(open_tasks, start=1)
    )


def first_text(response) -> Optional[str]:
    """Text of the first content block, or None when it is not a text block."""
    if not response.content:
        return None
    return getattr(response.content[0], "text", None)


def parse_intent(raw: str) -> Optional[IntentResponse]:
    """Validate a classifier reply. Anything off-shape is treated as no answer."""
    try:
        payload = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError:
        logger.warning("Intent reply is not JSON: %r", raw)
        return None
    if not isinstance(payload, dict):
        logger.warning("Intent reply is not an object: %r", raw)
        return None
    try:
        return IntentResponse.model_validate(payload)
    except ValidationError as e:
        logger.info("Intent reply rejected: %s", e.errors(include_url=False))
        return None


class IntentClassifier:
    """Asks Claude which planner intent an utterance expresses."""

    def __init__(self, client: Optional[anthropic.AsyncAnthropic] = None, model: str = config.PLANNER_MODEL):
        self.client = client or anthropic.AsyncAnthropic(api_key=config.ANTHROPIC_API_KEY)
        self.model = model
        self.enabled = client is not None or config.api_key_configured()

    async def classify(self, utterance: str, tasks: Optional[list[Task]] = None) -> Optional[IntentResponse]:
        if not self.enabled:
            return None
        system_prompt = INTENT_PROMPT.format(
            today=datetime.now().strftime("%Y-%m-%d"),
            tasks=format_task_list(tasks or []),
        )
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=256,
                system=system_prompt,
                messages=[{"role": "user", "content": utterance}]
            )
        except anthropic.APIError as e:
            logger.warning("Intent classification failed: %s", e)
            return None

        ai_text = first_text(response)
        if ai_text is None:
            logger.info("Intent reply has no text block")
            return None
        logger.debug("Intent reply: %s", ai_text)
        return parse_intent(ai_text)


class ConversationResponder:
    """Open-ended reply for utterances the interpreter did not handle."""

    def __init__(self, client: Optional[anthropic.AsyncAnthropic] = None, model: str = config.PLANNER_MODEL):
        self.client = client or anthropic.AsyncAnthropic(api_key=config.ANTHROPIC_API_KEY)
        self.model = model
        self.enabled = client is not None or config.api_key_configured()

    async def respond(self, utterance: str, history: list[dict], tasks: list[Task]) -> str:
        if not self.enabled:
            return "API key not configured"
        system_prompt = CONVERSATION_PROMPT.format(
            today=datetime.now().strftime("%Y-%m-%d"),
            tasks=format_task_list(tasks),
        )
        messages = list(history)
        if not messages or messages[-1].get("content") != utterance:
            messages.append({"role": "user", "content": utterance})
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=512,
                system=system_prompt,
                messages=messages
            )
        except anthropic.APIError as e:
            logger.warning("Conversational reply failed: %s", e)
            return f"API error: {e}"

        reply = first_text(response)
        if reply is None:
            return "Sorry, I didn't catch that."
        return reply.strip()
