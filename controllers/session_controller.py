"""Session lifecycle helpers for conversation workflows."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import HTTPException, Request

from models.conversation_models import ResponseMode
from services.conversation.errors import ConversationError, PollTimeout, RunFailed
from services.conversation.session import ConversationSession
from services.conversation.session_store import ManagedSession, SessionStore
from utils.settings import ConversationSettings


def _store(request: Request) -> SessionStore:
	return request.app.state.session_store


def _settings(request: Request) -> ConversationSettings:
	return request.app.state.settings


@asynccontextmanager
async def _locked(request: Request, session_id: str) -> AsyncIterator[ManagedSession]:
	"""Yield a session while holding its lock, translating failures to HTTP errors."""
	try:
		managed = _store(request).get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc

	async with managed.lock:
		try:
			yield managed
		except HTTPException:
			raise
		except PollTimeout as exc:
			raise HTTPException(status_code=504, detail={"error": "PollTimeout", "message": str(exc)}) from exc
		except RunFailed as exc:
			raise HTTPException(
				status_code=502,
				detail={"error": "RunFailed", "message": exc.reason, "status": exc.status},
			) from exc
		except ConversationError as exc:
			# SchemaParseError, EmptyResponse, NoMessage
			raise HTTPException(status_code=502, detail={"error": type(exc).__name__, "message": str(exc)}) from exc
		except ValueError as exc:
			raise HTTPException(status_code=400, detail=str(exc)) from exc


def _resolve_assistant(request: Request, mode: ResponseMode, assistant_id: Optional[str]) -> Optional[str]:
	if mode is not ResponseMode.ASSISTANT:
		return None
	resolved = assistant_id or _settings(request).assistant_id
	if not resolved:
		raise HTTPException(status_code=400, detail="assistant_id is required in assistant mode.")
	return resolved


async def start_session(request: Request, model: Optional[str] = None) -> Dict[str, Any]:
	"""Open a new conversation session and return its id."""
	settings = _settings(request)
	session = await ConversationSession.open(
		request.app.state.openai_client,
		model or settings.model,
		poll_interval=settings.poll_interval,
		poll_timeout=settings.poll_timeout,
		prompt_warn_after=settings.prompt_warning_entries,
	)
	managed = _store(request).add(session)
	return {"session_id": managed.session_id, "model": session.model, "thread_id": session.thread_id}


async def ask(
	request: Request,
	session_id: str,
	instruction: Optional[str],
	question: str,
	mode: ResponseMode,
	assistant_id: Optional[str] = None,
) -> Dict[str, Any]:
	"""Answer a question in the requested mode."""
	assistant_id = _resolve_assistant(request, mode, assistant_id)
	async with _locked(request, session_id) as managed:
		reply = await managed.session.ask(instruction, question, mode=mode, assistant_id=assistant_id)
		return {"session_id": session_id, "mode": mode.value, "reply": reply}


async def sample_questions(
	request: Request,
	session_id: str,
	context: str,
	count: int,
	max_words: int,
	mode: ResponseMode,
	assistant_id: Optional[str] = None,
) -> Dict[str, Any]:
	"""Generate sample questions in the requested mode."""
	assistant_id = _resolve_assistant(request, mode, assistant_id)
	async with _locked(request, session_id) as managed:
		questions = await managed.session.generate_sample_questions(
			context, count, max_words, mode=mode, assistant_id=assistant_id
		)
		return {"session_id": session_id, "mode": mode.value, "questions": questions}


async def reset_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Clear history and move the session to a new thread."""
	async with _locked(request, session_id) as managed:
		await managed.session.reset()
		return {"session_id": session_id, "thread_id": managed.session.thread_id}


async def session_history(request: Request, session_id: str) -> Dict[str, Any]:
	"""Return the rendered message log."""
	async with _locked(request, session_id) as managed:
		return {"session_id": session_id, "history": managed.session.history_view()}


async def session_usage(request: Request, session_id: str) -> Dict[str, Any]:
	"""Return token totals and, when the model is priced, a cost estimate."""
	async with _locked(request, session_id) as managed:
		session = managed.session
		usage = session.usage.as_dict()
		try:
			cost = session.usage.cost(session.model)
		except ValueError:
			cost = None
		return {
			"session_id": session_id,
			"model": session.model,
			"prompt_entries": len(session.prompt),
			"usage": usage,
			"cost": cost,
		}


async def close_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Drop a session from the registry."""
	try:
		_store(request).remove(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return {"session_id": session_id, "closed": True}
