"""Shared stubs for the OpenAI client used across tests."""

from types import SimpleNamespace
from typing import Iterable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.conversation.run_poller import RunPoller
from services.conversation.session import ConversationSession

MODEL = "gpt-4o-mini"


class AsyncPage:
    """Async-iterable stand-in for the paginator returned by `messages.list`."""

    def __init__(self, items: Iterable) -> None:
        self._items = list(items)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self._items:
            yield item


class Fakes:
    """Builders for response objects shaped like the OpenAI SDK's."""

    @staticmethod
    def completion(*contents: Optional[str], prompt_tokens: int = 0, completion_tokens: int = 0):
        choices = [
            SimpleNamespace(message=SimpleNamespace(role="assistant", content=content)) for content in contents
        ]
        usage = SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)
        return SimpleNamespace(choices=choices, usage=usage)

    @staticmethod
    def run(status: str, *, run_id: str = "run_1", error: Optional[str] = None, usage=None):
        last_error = SimpleNamespace(code="server_error", message=error) if error is not None else None
        return SimpleNamespace(id=run_id, status=status, last_error=last_error, usage=usage)

    @staticmethod
    def message(role: str, text: str, *, run_id: Optional[str] = "run_1"):
        block = SimpleNamespace(type="text", text=SimpleNamespace(value=text, annotations=[]))
        return SimpleNamespace(role=role, content=[block], run_id=run_id if role == "assistant" else None)

    @staticmethod
    def page(*messages) -> AsyncPage:
        return AsyncPage(messages)


def build_client() -> MagicMock:
    client = MagicMock()
    client.beta.threads.create = AsyncMock(
        side_effect=[SimpleNamespace(id=f"thread_{index}") for index in range(1, 10)]
    )
    client.chat.completions.create = AsyncMock()
    client.beta.assistants.retrieve = AsyncMock(return_value=SimpleNamespace(id="asst_1", model=MODEL))
    client.beta.assistants.update = AsyncMock(return_value=SimpleNamespace(id="asst_1", model=MODEL))
    client.beta.threads.messages.create = AsyncMock(return_value=SimpleNamespace(id="msg_1"))
    client.beta.threads.messages.list = MagicMock(return_value=AsyncPage([]))
    client.beta.threads.runs.create = AsyncMock(return_value=Fakes.run("completed"))
    client.beta.threads.runs.retrieve = AsyncMock()
    return client


@pytest.fixture
def fakes():
    return Fakes


@pytest.fixture
def client():
    return build_client()


@pytest.fixture
def session(client):
    return ConversationSession(client, MODEL, "thread_0", poller=RunPoller(client, interval=0))
