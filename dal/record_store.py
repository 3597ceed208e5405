"""In-memory record store for navigation sessions and their analysis history.

Each entity kind lives in its own insertion-ordered dict keyed by a uuid4
string. Lookups by session are full scans, which is fine for the volumes a
single navigation session produces. Records live until the process exits.
"""

from __future__ import annotations

import threading
from dataclasses import fields, replace
from typing import Callable, Dict, Generic, List, Optional, TypeVar
from uuid import uuid4

from models.navigation_models import AudioEvent, DetectedObject, NavigationSession, RecognizedText
from utils.errors import InputValidationError, SessionNotFoundError

DEFAULT_RECENT_LIMIT = 10

RecordT = TypeVar("RecordT", NavigationSession, DetectedObject, AudioEvent, RecognizedText)

_SESSION_MUTABLE_FIELDS = frozenset(f.name for f in fields(NavigationSession)) - {"id", "start_time"}


class _Collection(Generic[RecordT]):
	"""One entity kind: an id-keyed dict guarded by its own lock."""

	def __init__(self) -> None:
		self._records: Dict[str, RecordT] = {}
		self._lock = threading.RLock()

	def insert(self, build: Callable[[str], RecordT]) -> RecordT:
		with self._lock:
			record_id = uuid4().hex
			while record_id in self._records:
				record_id = uuid4().hex
			record = build(record_id)
			self._records[record_id] = record
			return record

	def get(self, record_id: str) -> Optional[RecordT]:
		with self._lock:
			return self._records.get(record_id)

	def modify(self, record_id: str, apply: Callable[[RecordT], RecordT]) -> Optional[RecordT]:
		"""Replace a record with `apply(record)`; None when the id is unknown."""
		with self._lock:
			existing = self._records.get(record_id)
			if existing is None:
				return None
			updated = apply(existing)
			self._records[record_id] = updated
			return updated

	def values(self) -> List[RecordT]:
		with self._lock:
			return list(self._records.values())

	def by_session(self, session_id: str) -> List[RecordT]:
		return [record for record in self.values() if record.session_id == session_id]

	def recent_by_session(self, session_id: str, limit: int) -> List[RecordT]:
		# Ties on timestamp fall back to reverse insertion order.
		ranked = sorted(
			enumerate(self.by_session(session_id)),
			key=lambda pair: (pair[1].timestamp, pair[0]),
			reverse=True,
		)
		return [record for _, record in ranked[: max(limit, 0)]]

	def __len__(self) -> int:
		with self._lock:
			return len(self._records)


class RecordStore:
	"""Hold sessions, detected objects, audio events, and recognized texts."""

	def __init__(self) -> None:
		self._sessions: _Collection[NavigationSession] = _Collection()
		self._objects: _Collection[DetectedObject] = _Collection()
		self._audio_events: _Collection[AudioEvent] = _Collection()
		self._texts: _Collection[RecognizedText] = _Collection()

	# Sessions

	def create_session(
		self,
		*,
		user_id: Optional[str] = None,
		current_instruction: Optional[str] = None,
		total_steps: int = 0,
		is_active: bool = True,
	) -> NavigationSession:
		"""Store a new session with progress 0 and the current time as start."""
		return self._sessions.insert(
			lambda record_id: NavigationSession(
				id=record_id,
				user_id=user_id,
				current_instruction=current_instruction,
				total_steps=total_steps,
				is_active=is_active,
			)
		)

	def get_session(self, session_id: str) -> NavigationSession:
		"""Return a session or raise SessionNotFoundError."""
		session = self._sessions.get(session_id)
		if session is None:
			raise SessionNotFoundError(session_id)
		return session

	def get_active_session(self) -> Optional[NavigationSession]:
		"""Return the first active session in insertion order, if any."""
		for session in self._sessions.values():
			if session.is_active:
				return session
		return None

	def list_active_sessions(self) -> List[NavigationSession]:
		return [session for session in self._sessions.values() if session.is_active]

	def update_session(self, session_id: str, **changes) -> NavigationSession:
		"""Shallow-merge `changes` onto a session and return the merged record."""
		unknown = sorted(set(changes) - _SESSION_MUTABLE_FIELDS)
		if unknown:
			raise InputValidationError("Fields cannot be updated", unknown)
		updated = self._sessions.modify(session_id, lambda existing: replace(existing, **changes))
		if updated is None:
			raise SessionNotFoundError(session_id)
		return updated

	def increment_session_progress(self, session_id: str, step: int = 1) -> NavigationSession:
		"""Add `step` to a session's progress under the collection lock."""
		updated = self._sessions.modify(
			session_id, lambda existing: replace(existing, progress=existing.progress + step)
		)
		if updated is None:
			raise SessionNotFoundError(session_id)
		return updated

	# Detected objects

	def create_detected_object(
		self,
		*,
		name: str,
		session_id: Optional[str] = None,
		description: Optional[str] = None,
		distance: Optional[str] = None,
		position: Optional[str] = None,
		confidence: Optional[int] = None,
	) -> DetectedObject:
		return self._objects.insert(
			lambda record_id: DetectedObject(
				id=record_id,
				name=name,
				session_id=session_id,
				description=description,
				distance=distance,
				position=position,
				confidence=confidence,
			)
		)

	def list_detected_objects(self, session_id: str) -> List[DetectedObject]:
		return self._objects.by_session(session_id)

	def list_recent_detected_objects(self, session_id: str, limit: int = DEFAULT_RECENT_LIMIT) -> List[DetectedObject]:
		return self._objects.recent_by_session(session_id, limit)

	# Audio events

	def create_audio_event(
		self,
		*,
		type: str,
		session_id: Optional[str] = None,
		content: Optional[str] = None,
		audio_level: Optional[int] = None,
	) -> AudioEvent:
		return self._audio_events.insert(
			lambda record_id: AudioEvent(
				id=record_id,
				type=type,
				session_id=session_id,
				content=content,
				audio_level=audio_level,
			)
		)

	def list_audio_events(self, session_id: str) -> List[AudioEvent]:
		return self._audio_events.by_session(session_id)

	def list_recent_audio_events(self, session_id: str, limit: int = DEFAULT_RECENT_LIMIT) -> List[AudioEvent]:
		return self._audio_events.recent_by_session(session_id, limit)

	# Recognized texts

	def create_recognized_text(
		self,
		*,
		type: str,
		content: str,
		session_id: Optional[str] = None,
		confidence: Optional[int] = None,
	) -> RecognizedText:
		return self._texts.insert(
			lambda record_id: RecognizedText(
				id=record_id,
				type=type,
				content=content,
				session_id=session_id,
				confidence=confidence,
			)
		)

	def list_recognized_texts(self, session_id: str) -> List[RecognizedText]:
		return self._texts.by_session(session_id)

	def list_recent_recognized_texts(self, session_id: str, limit: int = DEFAULT_RECENT_LIMIT) -> List[RecognizedText]:
		return self._texts.recent_by_session(session_id, limit)

	def counts(self) -> Dict[str, int]:
		"""Return the number of stored records per kind."""
		return {
			"sessions": len(self._sessions),
			"detected_objects": len(self._objects),
			"audio_events": len(self._audio_events),
			"recognized_texts": len(self._texts),
		}
