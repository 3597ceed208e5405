"""Shapes of the structured results returned by the AI service."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _ResultModel(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SceneObject(_ResultModel):
	"""An object or obstacle reported by the vision analysis."""

	name: str = Field(min_length=1)
	description: Optional[str] = None
	distance: Optional[str] = None
	position: Optional[str] = None
	confidence: Optional[int] = None

	@field_validator("confidence", mode="before")
	@classmethod
	def _round_confidence(cls, value):
		if isinstance(value, float):
			return round(value)
		return value


class SceneText(_ResultModel):
	"""A piece of text read from the scene."""

	type: str = Field(min_length=1)
	content: str
	confidence: Optional[int] = None

	@field_validator("confidence", mode="before")
	@classmethod
	def _round_confidence(cls, value):
		if isinstance(value, float):
			return round(value)
		return value


class VisionAnalysis(_ResultModel):
	objects: List[SceneObject] = Field(default_factory=list)
	obstacles: List[SceneObject] = Field(default_factory=list)
	text_content: List[SceneText] = Field(default_factory=list, alias="textContent")

	def to_wire(self) -> dict:
		return self.model_dump(by_alias=True)


class AudioEventResult(_ResultModel):
	"""One classified audio event."""

	type: str = Field(min_length=1)
	content: str = ""
	importance: Literal["low", "medium", "high"] = "low"
	action_required: bool = Field(default=False, alias="actionRequired")


class AudioAnalysis(_ResultModel):
	events: List[AudioEventResult] = Field(default_factory=list)

	def to_wire(self) -> dict:
		return self.model_dump(by_alias=True)


class NavigationInstruction(_ResultModel):
	"""A spoken instruction produced from the current scene context."""

	instruction: str = Field(min_length=1)
	priority: Literal["normal", "urgent", "warning"] = "normal"
	estimated_duration: str = Field(default="", alias="estimatedDuration")

	def to_wire(self) -> dict:
		return self.model_dump(by_alias=True)
