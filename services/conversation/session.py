"""Conversation session over the OpenAI chat and assistant APIs.

A session can answer through two backends. Completion mode replays the
session's accumulated prompt on every call; assistant mode keeps history on
a server-side thread. Both are reachable from one session, but their
histories are separate tracks: completion calls never touch the thread and
assistant calls never touch the accumulated prompt.

Sessions are not safe for concurrent use; serialize calls per session.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from openai import AsyncOpenAI

from models.conversation_models import ResponseMode
from services.conversation.accumulated_prompt import AccumulatedPrompt
from services.conversation.message_log import MessageLog
from services.conversation.prompts import delimited_questions_instruction, structured_questions_instruction
from services.conversation.question_parser import parse_structured_questions, split_questions
from services.conversation.question_schema import RESPONSE_FORMAT
from services.conversation.run_poller import RunPoller
from services.conversation.strategies import AssistantStrategy, CompletionStrategy
from services.conversation.usage import SessionUsage

LOGGER = logging.getLogger(__name__)


def _require_text(value: Optional[str], name: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{name} is required.")
    return value


def _require_positive(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer.")
    return value


def _summarize(questions: List[str]) -> str:
    return "[" + ", ".join(questions) + "]"


class ConversationSession:
    """Hold one conversation against a model through either backend."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        thread_id: str,
        *,
        poller: Optional[RunPoller] = None,
        prompt_warn_after: Optional[int] = None,
    ) -> None:
        """Wrap an existing thread; use `open()` to create one.

        Args:
            client: Shared async OpenAI client.
            model: Model identifier used for completions and assistant runs.
            thread_id: Server-side thread used in assistant mode.
            poller: Run poller; defaults to one polling every second with no timeout.
            prompt_warn_after: Accumulated prompt size that triggers a growth warning.
        """
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        self.client = client
        self._model = _require_text(model, "model")
        self._thread_id = thread_id
        self.prompt = AccumulatedPrompt(warn_after=prompt_warn_after)
        self.log = MessageLog()
        self.usage = SessionUsage()
        self._completion = CompletionStrategy(client, self._model)
        self._assistant = AssistantStrategy(client, self._model, poller or RunPoller(client))

    @classmethod
    async def open(
        cls,
        client: AsyncOpenAI,
        model: str,
        *,
        poll_interval: float = 1.0,
        poll_timeout: Optional[float] = None,
        prompt_warn_after: Optional[int] = None,
    ) -> "ConversationSession":
        """Create a thread and return a session bound to it."""
        thread = await client.beta.threads.create()
        LOGGER.info("Opened conversation thread %s for model %s", thread.id, model)
        poller = RunPoller(client, interval=poll_interval, timeout=poll_timeout)
        return cls(client, model, thread.id, poller=poller, prompt_warn_after=prompt_warn_after)

    @property
    def model(self) -> str:
        return self._model

    @property
    def thread_id(self) -> str:
        return self._thread_id

    async def ask(
        self,
        instruction: Optional[str],
        question: str,
        *,
        mode: ResponseMode = ResponseMode.COMPLETION,
        assistant_id: Optional[str] = None,
    ) -> str:
        """Answer `question` through the backend selected by `mode`.

        In completion mode `instruction` is sent as a developer message and
        both it and the reply join the accumulated prompt. In assistant mode
        it is passed as additional run instructions.
        """
        mode = ResponseMode(mode)
        _require_text(question, "question")

        if mode is ResponseMode.COMPLETION:
            _require_text(instruction, "instruction")
            pending = AccumulatedPrompt.turn(instruction, question)
            reply = await self._completion.complete(self.prompt.staged(pending))
            self.prompt.commit([*pending, *reply.entries])
        elif mode is ResponseMode.ASSISTANT:
            assistant_id = _require_text(assistant_id, "assistant_id")
            reply = await self._assistant.complete(self._thread_id, assistant_id, question, instruction)

        self.usage.add(reply.usage)
        self.log.record_turn(question, reply.text)
        return reply.text

    async def ask_stateless(self, instruction: str, question: str) -> str:
        """Answer through chat completions, replaying the whole prompt."""
        return await self.ask(instruction, question, mode=ResponseMode.COMPLETION)

    async def ask_via_assistant(self, instruction: Optional[str], question: str, assistant_id: str) -> str:
        """Answer through the assistant `assistant_id` on this session's thread."""
        return await self.ask(instruction, question, mode=ResponseMode.ASSISTANT, assistant_id=assistant_id)

    async def generate_sample_questions(
        self,
        context: str,
        count: int,
        max_words: int,
        *,
        mode: ResponseMode = ResponseMode.COMPLETION,
        assistant_id: Optional[str] = None,
    ) -> List[str]:
        """Ask the model for `count` questions of at most `max_words` words.

        Completion mode requests schema-constrained JSON and parses its
        `questions` field; assistant mode asks for delimited plain text. The
        number of questions returned is not checked against `count`.
        """
        mode = ResponseMode(mode)
        _require_text(context, "context")
        _require_positive(count, "count")
        _require_positive(max_words, "max_words")

        if mode is ResponseMode.COMPLETION:
            pending = AccumulatedPrompt.turn(structured_questions_instruction(count, max_words), context)
            reply = await self._completion.complete(
                [entry.to_message() for entry in pending],
                response_format=RESPONSE_FORMAT,
            )
            self.usage.add(reply.usage)
            questions = parse_structured_questions(reply.text)
            self.prompt.commit([*pending, *reply.entries])
        elif mode is ResponseMode.ASSISTANT:
            assistant_id = _require_text(assistant_id, "assistant_id")
            reply = await self._assistant.complete(
                self._thread_id,
                assistant_id,
                context,
                delimited_questions_instruction(count, max_words),
            )
            self.usage.add(reply.usage)
            questions = split_questions(reply.text)

        self.log.record_turn(context, _summarize(questions))
        return questions

    async def generate_sample_questions_stateless(self, context: str, count: int, max_words: int) -> List[str]:
        return await self.generate_sample_questions(context, count, max_words, mode=ResponseMode.COMPLETION)

    async def generate_sample_questions_via_assistant(
        self, context: str, count: int, max_words: int, assistant_id: str
    ) -> List[str]:
        return await self.generate_sample_questions(
            context, count, max_words, mode=ResponseMode.ASSISTANT, assistant_id=assistant_id
        )

    async def reset(self) -> None:
        """Start over on a new thread with an empty log and prompt.

        Token usage totals are kept. If the thread cannot be created the
        error propagates and the session is left as it was.
        """
        thread = await self.client.beta.threads.create()
        self.log.clear()
        self.prompt.clear()
        previous, self._thread_id = self._thread_id, thread.id
        LOGGER.info("Reset conversation: thread %s replaced by %s", previous, thread.id)

    def history_view(self) -> List[str]:
        return self.log.view()

    def __str__(self) -> str:
        return str(self.log)
