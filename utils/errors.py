"""Domain exceptions shared by the store, coordinator, and analysis relay.

Controllers translate these into HTTP responses; nothing below the
controller layer imports FastAPI.
"""

from __future__ import annotations

from typing import Iterable, List


class NavigationError(Exception):
	"""Base class for errors raised by the navigation core."""


class InputValidationError(NavigationError):
	"""Raised when request fields are missing or malformed.

	The offending field names are kept on `fields` so callers can report them.
	"""

	def __init__(self, message: str, fields: Iterable[str] = ()) -> None:
		self.fields: List[str] = list(fields)
		if self.fields:
			message = f"{message}: {', '.join(self.fields)}"
		super().__init__(message)


class SessionNotFoundError(NavigationError, KeyError):
	"""Raised when a navigation session id does not exist."""

	def __init__(self, session_id: str) -> None:
		self.session_id = session_id
		super().__init__(f"Navigation session {session_id} not found")

	def __str__(self) -> str:
		return self.args[0]


class MissingPayloadError(NavigationError):
	"""Raised when an upload carries no bytes."""


class PayloadTooLargeError(NavigationError):
	"""Raised when an upload exceeds the configured size limit."""

	def __init__(self, limit: int) -> None:
		self.limit = limit
		super().__init__(f"Upload exceeds the {limit} byte limit")


class AnalysisError(NavigationError):
	"""Raised when the AI service fails or returns an unusable response."""
