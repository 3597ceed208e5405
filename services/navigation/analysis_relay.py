"""Bridge uploaded media and instruction requests to the AI service.

Each handler validates its input, asks the relevant AI collaborator, writes
the structured result to the record store, and broadcasts it to realtime
clients. A failed AI call raises AnalysisError before anything is stored or
broadcast.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Optional, TypeVar

from dal.record_store import DEFAULT_RECENT_LIMIT, RecordStore
from models.navigation_models import DetectedObject
from services.image_preprocessor import ImagePreprocessor
from services.navigation.session_coordinator import SessionCoordinator
from services.openai.instruction_generator import InstructionContext
from services.realtime.broadcaster import Broadcaster
from utils.config import DEFAULT_MAX_UPLOAD_BYTES
from utils.errors import AnalysisError, InputValidationError
from utils.media_validation import check_payload, parse_audio_level

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class AICollaborators:
	"""The AI-backed services the relay depends on.

	Production wires the OpenAI-backed classes from `services.openai`; tests
	substitute fakes with the same method names.
	"""

	vision: Any
	transcriber: Any
	audio_classifier: Any
	instruction_generator: Any


def describe_object(obj: DetectedObject) -> str:
	"""Render a detected object as a short context line, e.g. 'bench (2m)'."""
	return f"{obj.name} ({obj.distance})" if obj.distance else obj.name


class AnalysisRelay:
	"""Run vision, audio, and instruction requests and fan out the results."""

	def __init__(
		self,
		store: RecordStore,
		coordinator: SessionCoordinator,
		broadcaster: Broadcaster,
		ai: AICollaborators,
		*,
		image_preprocessor: Optional[ImagePreprocessor] = None,
		max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
		default_audio_level: int = 50,
		recent_limit: int = DEFAULT_RECENT_LIMIT,
	) -> None:
		self.store = store
		self.coordinator = coordinator
		self.broadcaster = broadcaster
		self.ai = ai
		self.image_preprocessor = image_preprocessor or ImagePreprocessor()
		self.max_upload_bytes = max_upload_bytes
		self.default_audio_level = default_audio_level
		self.recent_limit = recent_limit

	async def handle_vision_upload(self, image_bytes: Optional[bytes], session_id: Optional[str] = None) -> Dict[str, Any]:
		"""Analyze a camera frame and return `{objects, obstacles, textContent}`.

		Objects and obstacles become DetectedObject rows and text items become
		RecognizedText rows, all tagged with `session_id`. Without a session id
		nothing is stored but the result is still returned and broadcast.
		"""
		check_payload(image_bytes, self.max_upload_bytes, kind="image")
		image_b64, mime_type = await asyncio.to_thread(self.image_preprocessor.prepare, image_bytes)
		analysis = await self._consult("Vision analysis", self.ai.vision.analyze(image_b64, mime_type=mime_type))

		if session_id:
			for item in [*analysis.objects, *analysis.obstacles]:
				self.store.create_detected_object(session_id=session_id, **item.model_dump())
			for text in analysis.text_content:
				self.store.create_recognized_text(session_id=session_id, **text.model_dump())
			LOGGER.info(
				"Stored %d objects and %d texts for session %s",
				len(analysis.objects) + len(analysis.obstacles),
				len(analysis.text_content),
				session_id,
			)

		payload = analysis.to_wire()
		self.broadcaster.broadcast({"type": "vision_analysis", "analysis": payload})
		return payload

	async def handle_audio_upload(
		self,
		audio_bytes: Optional[bytes],
		session_id: Optional[str] = None,
		audio_level: Any = None,
		mime_type: Optional[str] = None,
	) -> Dict[str, Any]:
		"""Transcribe and classify an audio clip; return `{analysis: {events}, transcription}`."""
		check_payload(audio_bytes, self.max_upload_bytes, kind="audio")
		transcription = await self._consult(
			"Audio transcription", self.ai.transcriber.transcribe(audio_bytes, mime_type=mime_type)
		)
		analysis = await self._consult("Audio classification", self.ai.audio_classifier.classify(transcription))

		if session_id:
			level = parse_audio_level(audio_level, self.default_audio_level)
			for event in analysis.events:
				self.store.create_audio_event(
					session_id=session_id,
					type=event.type,
					content=event.content,
					audio_level=level,
				)

		body = {"analysis": analysis.to_wire(), "transcription": transcription}
		self.broadcaster.broadcast({"type": "audio_analysis", **body})
		return body

	async def generate_instruction(
		self,
		session_id: Optional[str],
		user_query: Optional[str] = None,
		current_location: Optional[str] = None,
		destination: Optional[str] = None,
	) -> Dict[str, Any]:
		"""Produce the next instruction for a session and store it as the current one.

		The session must exist; an unknown id raises SessionNotFoundError before
		the AI service is called.
		"""
		if not session_id:
			raise InputValidationError("Missing required field", ["sessionId"])
		self.coordinator.get(session_id)

		objects = self.store.list_recent_detected_objects(session_id, self.recent_limit)
		texts = self.store.list_recent_recognized_texts(session_id, self.recent_limit)
		context = InstructionContext(
			detected_objects=[describe_object(obj) for obj in objects],
			recognized_text=[text.content for text in texts],
			user_query=user_query,
			current_location=current_location,
			destination=destination,
		)
		instruction = await self._consult(
			"Instruction generation", self.ai.instruction_generator.generate(context)
		)

		self.coordinator.apply_instruction(session_id, instruction.instruction)
		payload = instruction.to_wire()
		self.broadcaster.broadcast({"type": "navigation_instruction", "instruction": payload})
		return payload

	@staticmethod
	async def _consult(what: str, call: Awaitable[T]) -> T:
		try:
			return await call
		except AnalysisError:
			raise
		except Exception as exc:
			LOGGER.error("%s failed: %s", what, exc)
			raise AnalysisError(f"{what} failed") from exc
