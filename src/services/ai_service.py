"""AI service for keyword suggestion and narration using Google GenAI."""

import asyncio
import logging
from typing import Optional

from google.genai import Client
from google.genai import types

from services.errors import AIServiceError
from utils.retry import APIRateLimitError, NetworkError, retry_api_call

logger = logging.getLogger(__name__)


class AIService:
    """Thin async wrapper around a Gemini text model.

    Every failure surfaces as AIServiceError so callers only need one
    except clause for their fallback path.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "gemini-2.5-flash",
        timeout: float = 60.0,
    ):
        """Initialize Google GenAI client.

        Args:
            api_key: Google GenAI API key; None leaves the service unconfigured
            model_name: Gemini model to use
            timeout: Seconds before a single call is abandoned
        """
        self.api_key = api_key
        self.model_name = model_name
        self.timeout = timeout
        self.client = Client(api_key=api_key) if api_key else None

        if self.client:
            logger.info(f"Initialized AI service with model: {model_name}")
        else:
            logger.warning("AI service not configured (GEMINI_API_KEY missing); AI steps will fall back")

    def is_configured(self) -> bool:
        return self.client is not None

    async def generate_text(
        self,
        prompt: str,
        temperature: float = 0.5,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Generate text for a prompt.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            max_output_tokens: Optional response length cap

        Returns:
            Stripped response text (never empty)

        Raises:
            AIServiceError: if unconfigured, timed out, failed or empty
        """
        if self.client is None:
            raise AIServiceError("AI service is not configured")

        try:
            text = await asyncio.wait_for(
                asyncio.to_thread(self._generate_sync, prompt, temperature, max_output_tokens),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise AIServiceError(f"AI call timed out after {self.timeout}s") from e
        except AIServiceError:
            raise
        except Exception as e:
            raise AIServiceError(f"AI call failed: {e}") from e

        if not text or not text.strip():
            raise AIServiceError("AI response is empty")
        return text.strip()

    @retry_api_call(max_retries=3, base_delay=2.0)
    def _generate_sync(
        self,
        prompt: str,
        temperature: float,
        max_output_tokens: Optional[int],
    ) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                ),
            )
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            # Convert specific errors to retryable errors
            message = str(e).lower()
            if "rate limit" in message or "429" in message or "resource_exhausted" in message:
                raise APIRateLimitError(f"Rate limit hit: {e}") from e
            if "network" in message or "connection" in message:
                raise NetworkError(f"Network error: {e}") from e
            raise

        return response.text or ""
