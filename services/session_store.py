"""Simple in-memory store for analysis sessions."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional
from uuid import uuid4

from services.analysis_session import AnalysisSession, Gateway
from utils.settings import DEFAULT_MAX_SESSIONS, DEFAULT_SESSION_TTL_SECONDS


class SessionStore:
	"""Create, look up and discard analysis sessions.

	Sessions idle for longer than `ttl_seconds` are dropped, and at most
	`max_sessions` are held; the least recently used one makes room for a
	new one. A session that is still analyzing is never expired by age.
	"""

	def __init__(
		self,
		gateway_factory: Callable[[], Gateway],
		ttl_seconds: Optional[float] = DEFAULT_SESSION_TTL_SECONDS,
		max_sessions: int = DEFAULT_MAX_SESSIONS,
		clock: Callable[[], float] = time.monotonic,
	) -> None:
		if max_sessions < 1:
			raise ValueError("max_sessions must be at least 1")
		self._gateway_factory = gateway_factory
		self.ttl_seconds = ttl_seconds
		self.max_sessions = max_sessions
		self._clock = clock
		self._sessions: Dict[str, AnalysisSession] = {}
		self._last_used: Dict[str, float] = {}

	def __len__(self) -> int:
		return len(self._sessions)

	def __contains__(self, session_id: str) -> bool:
		return session_id in self._sessions

	def create(self) -> AnalysisSession:
		"""Create a new idle session with a fresh gateway."""
		self.evict_expired()
		while len(self._sessions) >= self.max_sessions:
			oldest = min(self._last_used, key=self._last_used.get)
			self._drop(oldest, "capacity")

		session_id = uuid4().hex
		session = AnalysisSession(self._gateway_factory(), session_id=session_id)
		self._sessions[session_id] = session
		self._last_used[session_id] = self._clock()
		logging.info("Created session %s", session_id)
		return session

	def get(self, session_id: str) -> AnalysisSession:
		"""Return a session or raise KeyError if missing; marks it as used."""
		session = self._sessions.get(session_id)
		if session is None:
			raise KeyError(f"Session {session_id} not found")
		self._last_used[session_id] = self._clock()
		return session

	def discard(self, session_id: str) -> None:
		"""Drop a session and everything it holds."""
		if session_id not in self._sessions:
			raise KeyError(f"Session {session_id} not found")
		self._drop(session_id, "discarded")

	def evict_expired(self) -> int:
		"""Drop sessions idle past the TTL and return how many were dropped."""
		if self.ttl_seconds is None:
			return 0
		now = self._clock()
		expired = [
			session_id
			for session_id, last_used in self._last_used.items()
			if now - last_used > self.ttl_seconds and self._sessions[session_id].can_analyze
		]
		for session_id in expired:
			self._drop(session_id, "expired")
		return len(expired)

	def _drop(self, session_id: str, reason: str) -> None:
		self._sessions.pop(session_id, None)
		self._last_used.pop(session_id, None)
		logging.info("Dropped session %s (%s)", session_id, reason)
