"""Narration generator for short videos."""

import logging

from services.ai_service import AIService
from services.errors import AIServiceError
from services.prompts import NARRATION_V1, strip_markdown_code_blocks

logger = logging.getLogger(__name__)


class ScriptGenerator:
    """Generates narration text with Gemini, falling back to the description.

    `generate` never raises: narration is decorative and must not fail a
    request.
    """

    def __init__(self, ai_service: AIService):
        """Initialize with an AIService instance.

        Args:
            ai_service: Configured AIService with Gemini client
        """
        self.ai = ai_service

    async def generate(self, description: str) -> str:
        """Generate a short narration for a video description.

        Args:
            description: The user's video description

        Returns:
            Narration text, or the unmodified description on any failure
        """
        prompt = NARRATION_V1.format(description=description)

        try:
            response = await self.ai.generate_text(prompt, temperature=0.7, max_output_tokens=250)
        except AIServiceError as e:
            logger.warning(f"Narration generation failed, using description: {e}")
            return description

        narration = strip_markdown_code_blocks(response)
        if not narration:
            logger.warning("Narration came back empty after cleanup, using description")
            return description

        logger.info(f"Generated narration ({len(narration)} chars)")
        return narration
