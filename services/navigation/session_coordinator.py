"""Navigation session lifecycle rules layered on the record store."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from dal.record_store import RecordStore
from models.navigation_models import NavigationSession, utcnow
from models.schemas import SessionCreate, SessionUpdate, validate_payload

LOGGER = logging.getLogger(__name__)


class SessionCoordinator:
	"""Start, update, advance, and end navigation sessions.

	With `enforce_single_active` on, starting or reactivating a session ends
	every other session that is still active, so at most one session is ever
	active. With it off,
	several sessions may be active at once and `get_active` returns the
	earliest-created one.
	"""

	def __init__(self, store: RecordStore, *, enforce_single_active: bool = True) -> None:
		if store is None:
			raise ValueError("RecordStore is required.")
		self.store = store
		self.enforce_single_active = enforce_single_active

	def start_session(self, payload: Dict[str, Any]) -> NavigationSession:
		"""Validate `payload` and store a new session.

		Returns only the new session; sessions ended as a side effect are
		available through `start_session_with_ended`.
		"""
		session, _ = self.start_session_with_ended(payload)
		return session

	def start_session_with_ended(self, payload: Dict[str, Any]) -> tuple[NavigationSession, List[NavigationSession]]:
		"""Start a session and also return any sessions deactivated to make room for it."""
		fields: SessionCreate = validate_payload(SessionCreate, payload)
		ended: List[NavigationSession] = []
		if self.enforce_single_active and fields.is_active:
			for previous in self.store.list_active_sessions():
				ended.append(self.end_session(previous.id))
		session = self.store.create_session(**fields.model_dump())
		LOGGER.info("Navigation session %s started (total_steps=%s)", session.id, session.total_steps)
		return session, ended

	def get(self, session_id: str) -> NavigationSession:
		return self.store.get_session(session_id)

	def get_active(self) -> Optional[NavigationSession]:
		return self.store.get_active_session()

	def update_session(self, session_id: str, payload: Dict[str, Any]) -> NavigationSession:
		"""Apply a validated partial update to an existing session."""
		session, _ = self.update_session_with_ended(session_id, payload)
		return session

	def update_session_with_ended(
		self, session_id: str, payload: Dict[str, Any]
	) -> tuple[NavigationSession, List[NavigationSession]]:
		"""Update a session and return any other sessions ended because it was reactivated."""
		changes = validate_payload(SessionUpdate, payload).changes()
		ended: List[NavigationSession] = []
		if self.enforce_single_active and changes.get("is_active"):
			self.store.get_session(session_id)
			for other in self.store.list_active_sessions():
				if other.id != session_id:
					ended.append(self.end_session(other.id))
		session = self.store.update_session(session_id, **changes)
		if ended:
			LOGGER.info("Navigation session %s reactivated; ended %d other session(s)", session_id, len(ended))
		return session, ended

	def record_progress(self, session_id: str) -> NavigationSession:
		"""Advance the session's progress counter by one step."""
		session = self.store.increment_session_progress(session_id)
		LOGGER.debug("Session %s progress %s/%s", session_id, session.progress, session.total_steps)
		return session

	def apply_instruction(self, session_id: str, instruction: str) -> NavigationSession:
		return self.store.update_session(session_id, current_instruction=instruction)

	def end_session(self, session_id: str) -> NavigationSession:
		"""Deactivate a session and stamp its end time; ending twice keeps the first end time."""
		session = self.store.get_session(session_id)
		if not session.is_active and session.end_time is not None:
			return session
		ended = self.store.update_session(session_id, is_active=False, end_time=utcnow())
		LOGGER.info("Navigation session %s ended at progress %s", session_id, ended.progress)
		return ended
