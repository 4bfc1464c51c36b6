"""
Gemini Priority Provider - primary LLM for AI triage.

Calls the Gemini generateContent REST endpoint with a JSON response type.
"""

from typing import Dict, Optional
import json
import logging

import requests

from civic_pulse.core.settings import settings
from civic_pulse.services.ai_priority.base import PriorityProvider, ProviderError, post_with_deadline

logger = logging.getLogger(__name__)


class GeminiPriorityProvider(PriorityProvider):
    """
    Google Gemini provider.

    Requires GEMINI_API_KEY. Selected before OpenAI when both keys are set.
    """

    API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.timeout_seconds = timeout_seconds or settings.AI_TIMEOUT_SECONDS
        self.temperature = settings.AI_TEMPERATURE if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or settings.AI_MAX_OUTPUT_TOKENS
        self.session = session or requests
        self.enabled = bool(self.api_key and self.api_key.strip())

    def is_enabled(self) -> bool:
        return self.enabled

    def get_model_info(self) -> Dict[str, str]:
        return {"provider": "gemini", "name": self.model}

    def get_timeout_seconds(self) -> float:
        return self.timeout_seconds

    def build_payload(self, prompt: str) -> Dict:
        return {
            "contents": [{
                "parts": [{"text": prompt}]
            }],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

    def generate(self, prompt: str) -> str:
        url = f"{self.API_BASE_URL}/{self.model}:generateContent"
        logger.debug(f"Calling Gemini model {self.model}")

        status_code, body = post_with_deadline(
            self.session,
            url,
            self.timeout_seconds,
            params={"key": self.api_key},
            headers={"Content-Type": "application/json"},
            json=self.build_payload(prompt),
        )

        if not 200 <= status_code < 300:
            raise ProviderError(f"Gemini API returned status {status_code}")

        try:
            data = json.loads(body)
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Unexpected Gemini response envelope: {e}")

        if not text:
            raise ProviderError("Gemini returned an empty completion")
        return text
