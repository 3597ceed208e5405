"""Scene analysis for navigation using OpenAI's Responses API."""

from openai import AsyncOpenAI

from models.analysis_models import VisionAnalysis
from services.openai.media_inputs import build_image_inputs, to_image_data_url
from services.openai.prompts import vision_system_prompt, vision_user_prompt
from services.openai.structured_caller import StructuredCaller
from services.openai.tool_schemas import VISION_FUNCTION

DEFAULT_VISION_MODEL = "gpt-4o"


class VisionAnalyzer(StructuredCaller):
    """Describe objects, obstacles, and readable text in a camera frame."""

    def __init__(self, client: AsyncOpenAI, *, model: str = DEFAULT_VISION_MODEL) -> None:
        super().__init__(client, model=model, max_output_tokens=1000)
        self.system_prompt = vision_system_prompt()

    async def analyze(self, image_b64: str, *, mime_type: str = "image/jpeg") -> VisionAnalysis:
        """Return the structured scene analysis for a base64-encoded image.

        Args:
            image_b64: Base64 text of the image bytes.
            mime_type: Image MIME type used in the data URL.

        Raises:
            AnalysisError: If the request fails or the output has the wrong shape.
        """
        inputs = build_image_inputs(self.system_prompt, vision_user_prompt(), to_image_data_url(image_b64, mime_type))
        return await self._call_tool(inputs, tool=VISION_FUNCTION, result_model=VisionAnalysis)
