"""
AI Priority Registry - provider selection and the AI assessment boundary.

Selection order:
1. Gemini, if GEMINI_API_KEY is set
2. OpenAI, if OPENAI_API_KEY is set
3. None: the AI path is skipped without any network call

assess() never raises. Every failure becomes AIUnavailable.
"""

from typing import Optional, Union
import logging

from civic_pulse.core.settings import Settings, settings as default_settings
from civic_pulse.models.issue import (
    AssessmentSource,
    IssueContext,
    PriorityAssessment,
    priority_level_for_score,
)
from civic_pulse.services.ai_priority.base import AIUnavailable, PriorityProvider, ProviderError
from civic_pulse.services.ai_priority.gemini_provider import GeminiPriorityProvider
from civic_pulse.services.ai_priority.openai_provider import OpenAIPriorityProvider
from civic_pulse.services.ai_priority.parsing import VerdictError, parse_priority_verdict
from civic_pulse.services.ai_priority.prompt import build_priority_prompt

logger = logging.getLogger(__name__)

AIResult = Union[PriorityAssessment, AIUnavailable]


def select_priority_provider(config: Optional[Settings] = None) -> Optional[PriorityProvider]:
    """
    Pick the provider for the configured credentials.

    Returns None when AI is disabled or no credential is set.
    """
    config = config or default_settings

    if not config.AI_ENABLED:
        logger.info("AI priority assessment disabled (AI_ENABLED=false)")
        return None

    provider_kwargs = dict(
        timeout_seconds=config.AI_TIMEOUT_SECONDS,
        temperature=config.AI_TEMPERATURE,
        max_output_tokens=config.AI_MAX_OUTPUT_TOKENS,
    )

    gemini = GeminiPriorityProvider(api_key=config.GEMINI_API_KEY or "", model=config.GEMINI_MODEL, **provider_kwargs)
    if gemini.is_enabled():
        logger.info(f"✅ AI priority provider: gemini ({gemini.model})")
        return gemini

    openai = OpenAIPriorityProvider(api_key=config.OPENAI_API_KEY or "", model=config.OPENAI_MODEL, **provider_kwargs)
    if openai.is_enabled():
        logger.info(f"✅ AI priority provider: openai ({openai.model})")
        return openai

    logger.warning("⚠️ No AI API key configured, priority will be rule-based only")
    return None


class AIPriorityAssessor:
    """
    Asks a language model for a priority verdict.

    The model's score is trusted; the level is always re-derived from it
    with the same thresholds the rule-based path uses.
    """

    def __init__(self, provider: Optional[PriorityProvider] = None):
        self.provider = provider

    @property
    def available(self) -> bool:
        return self.provider is not None and self.provider.is_enabled()

    def assess(self, context: IssueContext) -> AIResult:
        if not self.available:
            return AIUnavailable("no AI provider configured")

        provider_name = self.provider.get_model_info().get("provider", "unknown")

        try:
            text = self.provider.generate(build_priority_prompt(context))
        except ProviderError as e:
            logger.warning(f"⚠️ AI provider {provider_name} failed: {e}")
            return AIUnavailable(str(e))
        except Exception as e:
            logger.error(f"AI provider {provider_name} raised unexpectedly: {e}", exc_info=True)
            return AIUnavailable(f"{type(e).__name__}: {e}")

        try:
            verdict = parse_priority_verdict(text)
        except VerdictError as e:
            logger.warning(f"⚠️ Could not parse AI response from {provider_name}: {e}")
            logger.debug(f"Response text: {text[:500]}")
            return AIUnavailable(str(e))

        factors = [
            f"AI Analysis: {verdict.reasoning}",
            f"Safety Risk: {verdict.safety_risk}",
            f"Urgency: {verdict.urgency_level}",
            f"Impact: {verdict.impact_assessment}",
        ]
        if context.similar_issues_count > 0:
            factors.append(f"{context.similar_issues_count} similar issue(s) in area")

        derived_level = priority_level_for_score(verdict.score)
        if derived_level != verdict.priority:
            logger.warning(
                f"AI returned priority {verdict.priority.value} with score {verdict.score}; "
                f"using {derived_level.value} from the score"
            )
            factors.append(f"Model suggested priority: {verdict.priority.value}")

        assessment = PriorityAssessment.build(
            score=verdict.score,
            factors=factors,
            source=AssessmentSource.AI_ASSESSED,
            ai_analysis=verdict.reasoning,
        )
        logger.info(f"AI ({provider_name}) priority {assessment.level.value} (score {assessment.score})")
        return assessment


_assessor: Optional[AIPriorityAssessor] = None


def get_ai_priority_assessor() -> AIPriorityAssessor:
    """
    Get or create the AIPriorityAssessor singleton configured from settings.
    """
    global _assessor
    if _assessor is None:
        _assessor = AIPriorityAssessor(select_priority_provider())
    return _assessor
