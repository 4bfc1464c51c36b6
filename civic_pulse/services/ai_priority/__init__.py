"""
AI priority assessment.

Optional: when no provider is configured or a call fails, callers fall back
to the rule-based classifier.
"""

from civic_pulse.services.ai_priority.base import AIUnavailable, PriorityProvider, ProviderError
from civic_pulse.services.ai_priority.gemini_provider import GeminiPriorityProvider
from civic_pulse.services.ai_priority.openai_provider import OpenAIPriorityProvider
from civic_pulse.services.ai_priority.registry import (
    AIPriorityAssessor,
    get_ai_priority_assessor,
    select_priority_provider,
)

__all__ = [
    "AIPriorityAssessor",
    "AIUnavailable",
    "GeminiPriorityProvider",
    "OpenAIPriorityProvider",
    "PriorityProvider",
    "ProviderError",
    "get_ai_priority_assessor",
    "select_priority_provider",
]
