"""Navigation session endpoints: lifecycle, instructions, and history."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Request

from controllers.error_mapping import http_errors
from dal.record_store import RecordStore
from models.schemas import InstructionRequest, validate_payload
from services.navigation.analysis_relay import AnalysisRelay
from services.navigation.session_coordinator import SessionCoordinator
from services.realtime.broadcaster import Broadcaster


def _coordinator(request: Request) -> SessionCoordinator:
	return request.app.state.session_coordinator


def _broadcaster(request: Request) -> Broadcaster:
	return request.app.state.broadcaster


def _store(request: Request) -> RecordStore:
	return request.app.state.record_store


async def start_session(request: Request, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
	"""Start a session and announce it (plus any session it replaced) to realtime clients."""
	with http_errors():
		session, ended = _coordinator(request).start_session_with_ended(payload if payload is not None else {})
	broadcaster = _broadcaster(request)
	for previous in ended:
		broadcaster.broadcast({"type": "navigation_updated", "session": previous.to_dict()})
	result = session.to_dict()
	broadcaster.broadcast({"type": "navigation_started", "session": result})
	return result


async def get_active_session(request: Request) -> Optional[Dict[str, Any]]:
	"""Return the active session, or None when no session is running."""
	session = _coordinator(request).get_active()
	return session.to_dict() if session is not None else None


async def update_session(request: Request, session_id: str, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
	"""Apply a partial update to a session, announcing any session it displaced."""
	with http_errors():
		session, ended = _coordinator(request).update_session_with_ended(
			session_id, payload if payload is not None else {}
		)
	for previous in ended:
		_announce_update(request, previous)
	return _announce_update(request, session)


async def record_progress(request: Request, session_id: str) -> Dict[str, Any]:
	"""Mark one more step of the session as completed."""
	with http_errors():
		session = _coordinator(request).record_progress(session_id)
	return _announce_update(request, session)


async def end_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Stop a session, e.g. after an emergency stop."""
	with http_errors():
		session = _coordinator(request).end_session(session_id)
	return _announce_update(request, session)


async def generate_instruction(request: Request, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
	"""Ask the AI service for the next instruction for a session."""
	relay: AnalysisRelay = request.app.state.analysis_relay
	with http_errors("Failed to generate instruction"):
		body: InstructionRequest = validate_payload(InstructionRequest, payload if payload is not None else {})
		return await relay.generate_instruction(
			body.session_id,
			user_query=body.user_query,
			current_location=body.current_location,
			destination=body.destination,
		)


async def list_detected_objects(request: Request, session_id: str) -> List[Dict[str, Any]]:
	return [record.to_dict() for record in _store(request).list_detected_objects(session_id)]


async def list_audio_events(request: Request, session_id: str) -> List[Dict[str, Any]]:
	return [record.to_dict() for record in _store(request).list_audio_events(session_id)]


async def list_recognized_texts(request: Request, session_id: str) -> List[Dict[str, Any]]:
	return [record.to_dict() for record in _store(request).list_recognized_texts(session_id)]


def _announce_update(request: Request, session) -> Dict[str, Any]:
	result = session.to_dict()
	_broadcaster(request).broadcast({"type": "navigation_updated", "session": result})
	return result
