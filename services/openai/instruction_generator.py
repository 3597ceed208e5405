"""Generate spoken navigation instructions from recent scene context."""

from dataclasses import dataclass, field
from typing import List, Optional

from openai import AsyncOpenAI

from models.analysis_models import NavigationInstruction
from services.openai.media_inputs import build_text_inputs
from services.openai.prompts import instruction_system_prompt, instruction_user_prompt
from services.openai.structured_caller import StructuredCaller
from services.openai.tool_schemas import INSTRUCTION_FUNCTION

DEFAULT_TEXT_MODEL = "gpt-4o"


@dataclass
class InstructionContext:
    """What the user is facing right now, flattened to short display strings."""

    detected_objects: List[str] = field(default_factory=list)
    recognized_text: List[str] = field(default_factory=list)
    user_query: Optional[str] = None
    current_location: Optional[str] = None
    destination: Optional[str] = None


class InstructionGenerator(StructuredCaller):
    """Produce the next instruction, its priority, and an estimated duration."""

    def __init__(self, client: AsyncOpenAI, *, model: str = DEFAULT_TEXT_MODEL) -> None:
        super().__init__(client, model=model, max_output_tokens=300)
        self.system_prompt = instruction_system_prompt()

    async def generate(self, context: InstructionContext) -> NavigationInstruction:
        user_prompt = instruction_user_prompt(
            context.detected_objects,
            context.recognized_text,
            context.user_query,
            context.current_location,
            context.destination,
        )
        inputs = build_text_inputs(self.system_prompt, user_prompt)
        return await self._call_tool(inputs, tool=INSTRUCTION_FUNCTION, result_model=NavigationInstruction)
