from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile

from controllers.analysis_controller import analyze_vision, process_audio

router = APIRouter(prefix="/api")


@router.post("/vision/analyze")
async def analyze_vision_route(
	request: Request,
	image: Optional[UploadFile] = File(default=None),
	sessionId: Optional[str] = Form(default=None),
):
	"""Analyze one camera frame for objects, obstacles, and readable text."""
	try:
		return await analyze_vision(request, image, sessionId)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/audio/process")
async def process_audio_route(
	request: Request,
	audio: Optional[UploadFile] = File(default=None),
	sessionId: Optional[str] = Form(default=None),
	audioLevel: Optional[str] = Form(default=None),
):
	"""Transcribe and classify one recorded audio clip."""
	try:
		return await process_audio(request, audio, sessionId, audioLevel)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
