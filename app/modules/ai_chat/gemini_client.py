"""Gemini client used by the AI career assistant."""
import logging
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import HarmBlockThreshold, HarmCategory

from app.config.settings import settings

logger = logging.getLogger(__name__)

GENERATION_CONFIG = {
    "max_output_tokens": 2048,
    "temperature": 0.7,
    "top_p": 0.8,
    "top_k": 40,
}

SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
}


class AIServiceError(Exception):
    """Gemini call failed for a reason other than those below."""


class AIServiceTimeout(AIServiceError):
    pass


class AIServiceQuotaExceeded(AIServiceError):
    pass


class AIServiceBlocked(AIServiceError):
    pass


class GeminiClient:
    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        api_key = api_key or settings.gemini_api_key
        if not api_key:
            raise ValueError("GEMINI_API_KEY must be configured")
        genai.configure(api_key=api_key)
        self.model_name = model_name or settings.gemini_model
        self._model = genai.GenerativeModel(
            self.model_name,
            generation_config=GENERATION_CONFIG,
            safety_settings=SAFETY_SETTINGS,
        )

    def generate(self, prompt: str, timeout: Optional[float] = None) -> str:
        """Return the model's text answer; raises an AIServiceError subclass on failure."""
        timeout = timeout or settings.ai_chat_timeout_sec
        try:
            response = self._model.generate_content(prompt, request_options={"timeout": timeout})
        except google_exceptions.DeadlineExceeded as e:
            raise AIServiceTimeout(str(e)) from e
        except google_exceptions.ResourceExhausted as e:
            raise AIServiceQuotaExceeded(str(e)) from e
        except Exception as e:
            raise AIServiceError(str(e)) from e

        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            raise AIServiceBlocked(f"Prompt BLOCKED: {feedback.block_reason}")
        try:
            text = response.text
        except ValueError as e:
            # .text raises when the only candidate was stopped by safety filters
            raise AIServiceBlocked(str(e)) from e
        if not text:
            raise AIServiceError("Empty response from AI service")
        return text
