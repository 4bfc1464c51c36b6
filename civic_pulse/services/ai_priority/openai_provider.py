"""
OpenAI Priority Provider - secondary LLM for AI triage.

Only used when no Gemini key is configured.
"""

from typing import Dict, Optional
import json
import logging

import requests

from civic_pulse.core.settings import settings
from civic_pulse.services.ai_priority.base import PriorityProvider, ProviderError, post_with_deadline
from civic_pulse.services.ai_priority.prompt import SYSTEM_INSTRUCTION

logger = logging.getLogger(__name__)


class OpenAIPriorityProvider(PriorityProvider):
    """
    OpenAI chat completions provider.

    Requires OPENAI_API_KEY.
    """

    API_URL = "https://api.openai.com/v1/chat/completions"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = settings.OPENAI_API_KEY if api_key is None else api_key
        self.model = model or settings.OPENAI_MODEL
        self.timeout_seconds = timeout_seconds or settings.AI_TIMEOUT_SECONDS
        self.temperature = settings.AI_TEMPERATURE if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or settings.AI_MAX_OUTPUT_TOKENS
        self.session = session or requests
        self.enabled = bool(self.api_key and self.api_key.strip())

    def is_enabled(self) -> bool:
        return self.enabled

    def get_model_info(self) -> Dict[str, str]:
        return {"provider": "openai", "name": self.model}

    def get_timeout_seconds(self) -> float:
        return self.timeout_seconds

    def build_payload(self, prompt: str) -> Dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_output_tokens,
            "response_format": {"type": "json_object"},
        }

    def generate(self, prompt: str) -> str:
        logger.debug(f"Calling OpenAI model {self.model}")
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        status_code, body = post_with_deadline(
            self.session,
            self.API_URL,
            self.timeout_seconds,
            headers=headers,
            json=self.build_payload(prompt),
        )

        if not 200 <= status_code < 300:
            raise ProviderError(f"OpenAI API returned status {status_code}")

        try:
            data = json.loads(body)
            text = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Unexpected OpenAI response envelope: {e}")

        if not text:
            raise ProviderError("OpenAI returned an empty completion")
        return text
