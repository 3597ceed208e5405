from fastapi import Request, UploadFile
from typing import Any, Dict, Optional

from controllers.error_mapping import http_errors
from services.navigation.analysis_relay import AnalysisRelay
from utils.media_validation import read_upload


async def analyze_vision(
    request: Request,
    image: Optional[UploadFile],
    session_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Handle a camera-frame upload.

    Args:
        request: FastAPI Request object (used to access app.state for shared services).
        image: Uploaded image file (raw JPEG/PNG bytes).
        session_id: Optional session the detections belong to.

    Returns:
        A dict containing: objects, obstacles, textContent
    """
    relay: AnalysisRelay = request.app.state.analysis_relay
    with http_errors("Failed to analyze image"):
        image_bytes = await read_upload(image, relay.max_upload_bytes, kind="image")
        return await relay.handle_vision_upload(image_bytes, session_id=session_id or None)


async def process_audio(
    request: Request,
    audio: Optional[UploadFile],
    session_id: Optional[str] = None,
    audio_level: Optional[str] = None,
) -> Dict[str, Any]:
    """Handle a recorded audio clip.

    Args:
        request: FastAPI Request object.
        audio: Uploaded audio file; its content type picks the transcription file format.
        session_id: Optional session the events belong to.
        audio_level: Client-measured input level; non-numeric values fall back to the default.

    Returns:
        A dict containing: analysis (with events) and transcription
    """
    relay: AnalysisRelay = request.app.state.analysis_relay
    with http_errors("Failed to process audio"):
        audio_bytes = await read_upload(audio, relay.max_upload_bytes, kind="audio")
        return await relay.handle_audio_upload(
            audio_bytes,
            session_id=session_id or None,
            audio_level=audio_level,
            mime_type=audio.content_type if audio is not None else None,
        )
