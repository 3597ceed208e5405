"""FastAPI routes for navigation sessions and their analysis history."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Request

from controllers.navigation_controller import (
	end_session,
	generate_instruction,
	get_active_session,
	list_audio_events,
	list_detected_objects,
	list_recognized_texts,
	record_progress,
	start_session,
	update_session,
)

router = APIRouter(prefix="/api/navigation")


@router.post("/start")
async def start_session_route(request: Request, payload: Optional[Dict[str, Any]] = Body(default=None)):
	try:
		return await start_session(request, payload)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/active")
async def active_session_route(request: Request):
	"""Return the active session, or null."""
	try:
		return await get_active_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/instruction")
async def instruction_route(request: Request, payload: Optional[Dict[str, Any]] = Body(default=None)):
	try:
		return await generate_instruction(request, payload)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.patch("/{session_id}")
async def update_session_route(
	request: Request, session_id: str, payload: Optional[Dict[str, Any]] = Body(default=None)
):
	try:
		return await update_session(request, session_id, payload)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/progress")
async def progress_route(request: Request, session_id: str):
	"""Advance the session by one completed step."""
	try:
		return await record_progress(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/end")
async def end_session_route(request: Request, session_id: str):
	try:
		return await end_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/objects")
async def objects_route(request: Request, session_id: str):
	try:
		return await list_detected_objects(request, session_id)
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/audio")
async def audio_events_route(request: Request, session_id: str):
	try:
		return await list_audio_events(request, session_id)
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/texts")
async def texts_route(request: Request, session_id: str):
	try:
		return await list_recognized_texts(request, session_id)
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
