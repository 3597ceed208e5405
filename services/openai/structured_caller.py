"""Shared plumbing for Responses API calls that return one forced tool call."""

import logging
import time
from typing import Any, Dict, List, Type, TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel

from services.openai.response_parser import extract_usage, parse_tool_result
from utils.errors import AnalysisError

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class StructuredCaller:
    """Call a model with a single strict function tool and validate its arguments."""

    def __init__(self, client: AsyncOpenAI, *, model: str, max_output_tokens: int = 1000) -> None:
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        self.client = client
        self.model = model
        self.max_output_tokens = max_output_tokens

    async def _call_tool(
        self,
        inputs: List[Dict[str, Any]],
        *,
        tool: Dict[str, Any],
        result_model: Type[ModelT],
    ) -> ModelT:
        tool_name = tool["name"]
        start = time.time()
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=inputs,
                tools=[tool],
                tool_choice={"type": "function", "name": tool_name},
                max_output_tokens=self.max_output_tokens,
            )
        except Exception as exc:
            LOGGER.error("OpenAI Responses API call for %s failed: %s", tool_name, exc)
            raise AnalysisError(f"{tool_name} request failed") from exc

        try:
            result = parse_tool_result(response, tool_name=tool_name, model=result_model)
        except AnalysisError as exc:
            LOGGER.error("Unusable %s output: %s", tool_name, exc)
            LOGGER.debug("Full response object: %r", response)
            raise

        usage = extract_usage(response)
        LOGGER.info(
            "%s completed in %.3fs (input_tokens=%s, output_tokens=%s)",
            tool_name,
            time.time() - start,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return result
