"""Request schemas validated before anything reaches the record store.

Field names follow the camelCase wire format used by the browser client;
`populate_by_name` also accepts the snake_case attribute names.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from utils.errors import InputValidationError


class _WireModel(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SessionCreate(_WireModel):
	"""Fields accepted when a navigation session is started."""

	user_id: Optional[str] = Field(default=None, alias="userId")
	current_instruction: Optional[str] = Field(default=None, alias="currentInstruction")
	total_steps: int = Field(default=0, ge=0, alias="totalSteps")
	is_active: bool = Field(default=True, alias="isActive")


class SessionUpdate(_WireModel):
	"""Partial session update; only fields present in the body are applied."""

	user_id: Optional[str] = Field(default=None, alias="userId")
	end_time: Optional[datetime] = Field(default=None, alias="endTime")
	current_instruction: Optional[str] = Field(default=None, alias="currentInstruction")
	progress: int = Field(default=0, ge=0)
	total_steps: int = Field(default=0, ge=0, alias="totalSteps")
	is_active: bool = Field(default=True, alias="isActive")

	def changes(self) -> Dict[str, Any]:
		"""Return only the fields the caller actually sent, keyed by attribute name."""
		return self.model_dump(exclude_unset=True)


class InstructionRequest(_WireModel):
	"""Body of the instruction-generation endpoint."""

	session_id: Optional[str] = Field(default=None, alias="sessionId")
	user_query: Optional[str] = Field(default=None, alias="userQuery")
	current_location: Optional[str] = Field(default=None, alias="currentLocation")
	destination: Optional[str] = None


def _error_fields(exc: ValidationError) -> list[str]:
	names = []
	for error in exc.errors():
		loc = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
		if loc and loc not in names:
			names.append(loc)
	return names


def validate_payload(schema: type[BaseModel], payload: Any) -> Any:
	"""Validate `payload` against `schema`, raising InputValidationError on failure."""
	if not isinstance(payload, dict):
		raise InputValidationError("Request body must be a JSON object")
	try:
		return schema.model_validate(payload)
	except ValidationError as exc:
		raise InputValidationError("Invalid fields", _error_fields(exc)) from exc
