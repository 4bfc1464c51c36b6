"""
Image Analysis - optional photo signal for triage.

Looks at the first photo of an issue with an OpenAI vision model.
The result is informational only and never changes the priority score.
Fails gracefully: any problem returns None.
"""

from typing import List, Optional
import json
import logging

import requests

from civic_pulse.core.settings import settings
from civic_pulse.models.issue import ImageAnalysis, PriorityLevel
from civic_pulse.services.ai_priority.base import post_with_deadline
from civic_pulse.services.ai_priority.parsing import extract_first_json_object

logger = logging.getLogger(__name__)

IMAGE_PROMPT = """Analyze this civic issue photo and provide:
1. Severity assessment (Low/Medium/High/Critical)
2. Brief description of what you see
3. List of any safety hazards detected

Respond in JSON format:
{
  "severity": "Low|Medium|High|Critical",
  "description": "What you see in the image",
  "detectedHazards": ["hazard1", "hazard2"]
}"""


class ImageAnalysisService:
    """
    Vision-model photo assessment.

    Requires OPENAI_API_KEY. Only the first image is sent.
    """

    API_URL = "https://api.openai.com/v1/chat/completions"
    MAX_TOKENS = 300

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.api_key = settings.OPENAI_API_KEY if api_key is None else api_key
        self.model = model or settings.OPENAI_VISION_MODEL
        self.timeout_seconds = timeout_seconds or settings.AI_TIMEOUT_SECONDS
        self.enabled = bool(self.api_key and self.api_key.strip())

    def is_enabled(self) -> bool:
        return self.enabled

    def build_payload(self, image_url: str) -> dict:
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": IMAGE_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                }
            ],
            "max_tokens": self.MAX_TOKENS,
        }

    def analyze_images(self, image_urls: List[str]) -> Optional[ImageAnalysis]:
        if not image_urls or not self.enabled:
            return None

        try:
            status_code, body = post_with_deadline(
                requests,
                self.API_URL,
                self.timeout_seconds,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=self.build_payload(image_urls[0]),
            )
            if not 200 <= status_code < 300:
                logger.warning(f"⚠️ Vision API returned status {status_code}")
                return None

            text = json.loads(body)["choices"][0]["message"]["content"]
        except Exception as e:
            logger.warning(f"⚠️ Image analysis failed: {e}")
            return None

        return self._parse(text)

    def _parse(self, text: str) -> Optional[ImageAnalysis]:
        payload = extract_first_json_object(text or "")
        if payload is None:
            logger.warning("Could not parse image analysis response as JSON")
            return None

        severity = payload.get("severity")
        if not isinstance(severity, str):
            logger.warning(f"Image analysis missing severity: {payload}")
            return None

        try:
            level = PriorityLevel(severity.strip().capitalize())
        except ValueError:
            logger.warning(f"Image analysis returned unknown severity {severity!r}")
            return None

        hazards = payload.get("detectedHazards") or []
        if not isinstance(hazards, list):
            hazards = []

        return ImageAnalysis(
            severity=level,
            description=str(payload.get("description") or ""),
            detected_hazards=[str(h) for h in hazards],
        )


_image_service: Optional[ImageAnalysisService] = None


def get_image_analysis_service() -> ImageAnalysisService:
    global _image_service
    if _image_service is None:
        _image_service = ImageAnalysisService()
    return _image_service
