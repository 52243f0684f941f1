"""Simple in-memory registry of open conversation sessions."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict
from uuid import uuid4

from services.conversation.session import ConversationSession


@dataclass
class ManagedSession:
	"""A session plus the lock that serializes calls against it."""

	session_id: str
	session: ConversationSession
	lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class SessionStore:
	"""Track sessions by id for the HTTP layer."""

	def __init__(self) -> None:
		self._sessions: Dict[str, ManagedSession] = {}

	def add(self, session: ConversationSession) -> ManagedSession:
		"""Register a session under a fresh id."""
		session_id = uuid4().hex
		managed = ManagedSession(session_id=session_id, session=session)
		self._sessions[session_id] = managed
		return managed

	def get(self, session_id: str) -> ManagedSession:
		"""Return a session or raise KeyError if missing."""
		managed = self._sessions.get(session_id)
		if managed is None:
			raise KeyError(f"Session {session_id} not found")
		return managed

	def remove(self, session_id: str) -> ManagedSession:
		"""Forget a session; its thread is left on the server."""
		managed = self.get(session_id)
		del self._sessions[session_id]
		return managed

	def __len__(self) -> int:
		return len(self._sessions)
