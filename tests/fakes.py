"""In-process stand-ins for the AI collaborators, broadcaster, and websockets."""

import io
from typing import Any, Dict, List, Optional

from PIL import Image

from models.analysis_models import AudioAnalysis, NavigationInstruction, VisionAnalysis


BENCH_SCENE = {
    "objects": [{"name": "bench", "description": "wooden bench", "distance": "2m", "position": "left", "confidence": 80}],
    "obstacles": [],
    "textContent": [{"type": "sign", "content": "Exit A", "confidence": 95}],
}


class FakeVision:
    def __init__(self, result: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.result = BENCH_SCENE if result is None else result
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def analyze(self, image_b64, *, mime_type="image/jpeg"):
        self.calls.append({"image_b64": image_b64, "mime_type": mime_type})
        if self.error:
            raise self.error
        return VisionAnalysis.model_validate(self.result)


class FakeTranscriber:
    def __init__(self, text: str = "Train to platform 4 now boarding", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def transcribe(self, audio_bytes, *, mime_type=None):
        self.calls.append({"audio_bytes": audio_bytes, "mime_type": mime_type})
        if self.error:
            raise self.error
        return self.text


class FakeAudioClassifier:
    def __init__(self, events: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None):
        self.events = events if events is not None else [
            {"type": "announcement", "content": "Platform 4 boarding", "importance": "high", "actionRequired": True}
        ]
        self.error = error
        self.calls: List[str] = []

    async def classify(self, transcript):
        self.calls.append(transcript)
        if self.error:
            raise self.error
        return AudioAnalysis.model_validate({"events": self.events})


class FakeInstructionGenerator:
    def __init__(self, result: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.result = result or {
            "instruction": "Walk forward 5 meters to Exit A",
            "priority": "normal",
            "estimatedDuration": "10 seconds",
        }
        self.error = error
        self.contexts = []

    async def generate(self, context):
        self.contexts.append(context)
        if self.error:
            raise self.error
        return NavigationInstruction.model_validate(self.result)


class RecordingBroadcaster:
    """Stands in for Broadcaster and remembers every event."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []

    def broadcast(self, event):
        self.events.append(event)
        return 0


class FakeWebSocket:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[str] = []
        self.closed_with: Optional[int] = None

    async def send_text(self, message: str) -> None:
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(message)

    async def close(self, code: int = 1000) -> None:
        self.closed_with = code


def make_image_bytes(size=(32, 24), fmt="PNG", mode="RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, (10, 120, 200) if mode == "RGB" else (10, 120, 200, 128)).save(buffer, format=fmt)
    return buffer.getvalue()

