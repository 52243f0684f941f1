"""Backend interaction shapes behind a conversation session.

`CompletionStrategy` talks to the stateless chat completions endpoint and is
handed the full message list by the caller. `AssistantStrategy` talks to a
server-side assistant: it posts to a thread, submits a run, polls it and
reads back the newest assistant message written by that run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from models.conversation_models import PromptEntry
from services.conversation.errors import EmptyResponse, NoMessage
from services.conversation.response_parser import extract_completion, extract_usage, message_text
from services.conversation.run_poller import RunPoller

LOGGER = logging.getLogger(__name__)


@dataclass
class StrategyReply:
    """Text produced by one call plus what the session needs to record it."""

    text: str
    entries: List[PromptEntry] = field(default_factory=list)
    usage: Dict[str, Optional[int]] = field(default_factory=dict)


class CompletionStrategy:
    """Single round trip against the chat completions endpoint."""

    def __init__(self, client: AsyncOpenAI, model: str) -> None:
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        self.client = client
        self.model = model

    async def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        response_format: Optional[Dict[str, Any]] = None,
    ) -> StrategyReply:
        """Send `messages` as-is and return the concatenated reply.

        Raises:
            EmptyResponse: If no choice carries any content.
        """
        params: Dict[str, Any] = {"model": self.model, "messages": messages}
        if response_format is not None:
            params["response_format"] = response_format

        response = await self.client.chat.completions.create(**params)
        text, entries = extract_completion(response)
        if not text:
            LOGGER.error("Completion for model %s returned no content", self.model)
            raise EmptyResponse()
        return StrategyReply(text=text, entries=entries, usage=extract_usage(response))


class AssistantStrategy:
    """Thread message, run, poll, fetch against a pre-existing assistant."""

    def __init__(self, client: AsyncOpenAI, model: str, poller: RunPoller) -> None:
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        self.client = client
        self.model = model
        self.poller = poller

    async def sync_model(self, assistant_id: str) -> Any:
        """Point the assistant at the session model if it uses another one."""
        assistant = await self.client.beta.assistants.retrieve(assistant_id)
        if getattr(assistant, "model", None) == self.model:
            return assistant
        LOGGER.info("Updating assistant %s model from %s to %s", assistant_id, assistant.model, self.model)
        return await self.client.beta.assistants.update(assistant_id, model=self.model)

    async def complete(
        self,
        thread_id: str,
        assistant_id: str,
        content: str,
        instructions: Optional[str] = None,
    ) -> StrategyReply:
        """Post `content` to the thread and return the assistant's reply.

        Raises:
            RunFailed: The run did not complete.
            PollTimeout: The run stayed pending past the poller timeout.
            NoMessage: The run completed without a readable assistant message.
        """
        await self.sync_model(assistant_id)
        await self.client.beta.threads.messages.create(thread_id, role="user", content=content)

        run_params: Dict[str, Any] = {"assistant_id": assistant_id}
        if instructions:
            run_params["additional_instructions"] = instructions
        run = await self.client.beta.threads.runs.create(thread_id, **run_params)
        LOGGER.info("Submitted run %s on thread %s (status %s)", run.id, thread_id, run.status)

        run = await self.poller.wait(thread_id, run)
        text = await self.latest_reply(thread_id, run.id)
        return StrategyReply(text=text, usage=extract_usage(run))

    async def latest_reply(self, thread_id: str, run_id: str) -> str:
        """Return the text of the newest assistant message written by `run_id`."""
        newest = None
        async for message in self.client.beta.threads.messages.list(thread_id, order="asc"):
            if getattr(message, "role", None) == "assistant" and getattr(message, "run_id", None) == run_id:
                newest = message

        text = message_text(newest) if newest is not None else ""
        if not text:
            LOGGER.error("Run %s left no assistant message on thread %s", run_id, thread_id)
            raise NoMessage(thread_id)
        return text
