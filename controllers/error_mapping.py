"""Translate navigation-core exceptions into HTTP errors."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException

from utils.errors import (
	AnalysisError,
	InputValidationError,
	MissingPayloadError,
	PayloadTooLargeError,
	SessionNotFoundError,
)

LOGGER = logging.getLogger(__name__)


@contextmanager
def http_errors(analysis_detail: str = "Analysis failed") -> Iterator[None]:
	"""Map domain errors raised inside the block to HTTPException.

	Args:
		analysis_detail: Generic message returned when the AI service fails;
			the underlying cause is logged, not returned.
	"""
	try:
		yield
	except SessionNotFoundError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	except InputValidationError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	except MissingPayloadError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	except PayloadTooLargeError as exc:
		raise HTTPException(status_code=413, detail=str(exc)) from exc
	except AnalysisError as exc:
		LOGGER.error("%s: %s", analysis_detail, exc, exc_info=exc.__cause__ is not None)
		raise HTTPException(status_code=500, detail=analysis_detail) from exc
