"""FastAPI routes for conversation sessions."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from controllers.session_controller import (
	ask,
	close_session,
	reset_session,
	sample_questions,
	session_history,
	session_usage,
	start_session,
)
from models.conversation_models import ResponseMode

router = APIRouter(prefix="/sessions")


class StartPayload(BaseModel):
	model: Optional[str] = None


class AskPayload(BaseModel):
	question: str
	instruction: Optional[str] = None
	mode: ResponseMode = ResponseMode.COMPLETION
	assistant_id: Optional[str] = None


class SampleQuestionsPayload(BaseModel):
	context: str
	count: int = Field(3, ge=1)
	max_words: int = Field(10, ge=1)
	mode: ResponseMode = ResponseMode.COMPLETION
	assistant_id: Optional[str] = None


@router.post("")
async def start_session_route(request: Request, payload: Optional[StartPayload] = None):
	try:
		return await start_session(request, payload.model if payload else None)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/ask")
async def ask_route(request: Request, session_id: str, payload: AskPayload):
	try:
		return await ask(
			request, session_id, payload.instruction, payload.question, payload.mode, payload.assistant_id
		)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/sample-questions")
async def sample_questions_route(request: Request, session_id: str, payload: SampleQuestionsPayload):
	try:
		return await sample_questions(
			request,
			session_id,
			payload.context,
			payload.count,
			payload.max_words,
			payload.mode,
			payload.assistant_id,
		)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/reset")
async def reset_session_route(request: Request, session_id: str):
	try:
		return await reset_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/history")
async def history_route(request: Request, session_id: str):
	try:
		return await session_history(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/usage")
async def usage_route(request: Request, session_id: str):
	try:
		return await session_usage(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{session_id}")
async def close_session_route(request: Request, session_id: str):
	try:
		return await close_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
