"""Helpers to pull structured tool output out of Responses API results."""

import json
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from utils.errors import AnalysisError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_function_call(response: Any, *, tool_name: str) -> Dict[str, Any]:
    """Return the decoded arguments of the named function call."""
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) == "function_call" and getattr(item, "name", None) == tool_name:
            raw = getattr(item, "arguments", "{}") or "{}"
            try:
                args = json.loads(raw)
            except json.JSONDecodeError as exc:
                raise AnalysisError(f"Arguments for '{tool_name}' are not valid JSON.") from exc
            if not isinstance(args, dict):
                raise AnalysisError(f"Arguments for '{tool_name}' must be a JSON object.")
            return args
    raise AnalysisError(f"No function_call output for '{tool_name}' found in Responses API output.")


def parse_tool_result(response: Any, *, tool_name: str, model: Type[ModelT]) -> ModelT:
    """Decode the named function call and validate it against `model`."""
    args = parse_function_call(response, tool_name=tool_name)
    try:
        return model.model_validate(args)
    except ValidationError as exc:
        raise AnalysisError(f"Output of '{tool_name}' does not match the expected shape: {exc}") from exc


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = getattr(response, "usage", None)
    return {
        "input_tokens": getattr(usage, "input_tokens", None) if usage else None,
        "output_tokens": getattr(usage, "output_tokens", None) if usage else None,
    }
