"""Navigation domain records held by the in-memory record store."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utcnow() -> datetime:
	return datetime.now(timezone.utc)


def _camel(name: str) -> str:
	head, *rest = name.split("_")
	return head + "".join(part.title() for part in rest)


class WireRecord:
	"""Mixin that renders a dataclass record with camelCase keys for JSON."""

	def to_dict(self) -> Dict[str, Any]:
		out: Dict[str, Any] = {}
		for f in fields(self):
			value = getattr(self, f.name)
			if isinstance(value, datetime):
				value = value.isoformat()
			out[_camel(f.name)] = value
		return out


@dataclass
class NavigationSession(WireRecord):
	"""One user's navigation run, tracking the current instruction and step progress."""

	id: str
	user_id: Optional[str] = None
	start_time: datetime = field(default_factory=utcnow)
	end_time: Optional[datetime] = None
	current_instruction: Optional[str] = None
	progress: int = 0
	total_steps: int = 0
	is_active: bool = True


@dataclass
class DetectedObject(WireRecord):
	"""An object or obstacle seen in a single vision analysis pass."""

	id: str
	name: str
	session_id: Optional[str] = None
	description: Optional[str] = None
	distance: Optional[str] = None
	position: Optional[str] = None
	confidence: Optional[int] = None
	timestamp: datetime = field(default_factory=utcnow)


@dataclass
class AudioEvent(WireRecord):
	"""A classified sound or speech event from one audio analysis pass."""

	id: str
	type: str
	session_id: Optional[str] = None
	content: Optional[str] = None
	audio_level: Optional[int] = None
	timestamp: datetime = field(default_factory=utcnow)


@dataclass
class RecognizedText(WireRecord):
	"""Text read from the scene (signs, gate numbers, directions)."""

	id: str
	type: str
	content: str
	session_id: Optional[str] = None
	confidence: Optional[int] = None
	timestamp: datetime = field(default_factory=utcnow)
