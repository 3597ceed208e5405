"""Classify transcribed audio into navigation-relevant events."""

from openai import AsyncOpenAI

from models.analysis_models import AudioAnalysis
from services.openai.media_inputs import build_text_inputs
from services.openai.prompts import audio_system_prompt, audio_user_prompt
from services.openai.structured_caller import StructuredCaller
from services.openai.tool_schemas import AUDIO_FUNCTION

DEFAULT_TEXT_MODEL = "gpt-4o"


class AudioEventClassifier(StructuredCaller):
    """Turn a transcript into announcements, traffic, conversation, and alarm events."""

    def __init__(self, client: AsyncOpenAI, *, model: str = DEFAULT_TEXT_MODEL) -> None:
        super().__init__(client, model=model, max_output_tokens=500)
        self.system_prompt = audio_system_prompt()

    async def classify(self, transcript: str) -> AudioAnalysis:
        """Return the events heard in `transcript`; silence yields no events."""
        text = (transcript or "").strip()
        if not text:
            return AudioAnalysis(events=[])
        inputs = build_text_inputs(self.system_prompt, audio_user_prompt(text))
        return await self._call_tool(inputs, tool=AUDIO_FUNCTION, result_model=AudioAnalysis)
