"""
Priority Decision Orchestrator - the triage entry point.

Flow:
1. Validate the issue context (the only rejection the caller can see)
2. Resolve the similar-issue count (best-effort, 0 on failure) unless the caller supplied it
3. Try AI assessment
4. Fall back to the rule-based classifier

A valid context always yields a PriorityAssessment.
"""

from typing import Any, Dict, Optional, Union
import logging

from civic_pulse.models.issue import IssueContext, PriorityAssessment
from civic_pulse.services.ai_priority.base import AIUnavailable
from civic_pulse.services.ai_priority.registry import AIPriorityAssessor, get_ai_priority_assessor
from civic_pulse.services.keyword_classifier import KeywordSeverityClassifier, get_keyword_classifier
from civic_pulse.services.spatial_duplicates import SpatialDuplicateFinder, get_spatial_duplicate_finder

logger = logging.getLogger(__name__)


class PriorityOrchestrator:
    """
    Composes the spatial finder, the AI assessor and the keyword classifier.

    Without a finder, or with resolve_similar=False, the context's
    similar_issues_count is used as given.
    """

    def __init__(
        self,
        classifier: Optional[KeywordSeverityClassifier] = None,
        ai_assessor: Optional[AIPriorityAssessor] = None,
        finder: Optional[SpatialDuplicateFinder] = None,
    ):
        self.classifier = classifier or get_keyword_classifier()
        self.ai_assessor = ai_assessor if ai_assessor is not None else AIPriorityAssessor(None)
        self.finder = finder

    def evaluate(
        self,
        context: Union[IssueContext, Dict[str, Any]],
        use_ai: bool = True,
        resolve_similar: bool = True,
    ) -> PriorityAssessment:
        """
        Triage one issue.

        Args:
            context: IssueContext or raw payload dict
            use_ai: try the AI assessor before the rule-based classifier
            resolve_similar: look up the similar-issue count; pass False when
                the caller already knows it

        Raises:
            InvalidIssueContext: if the context is missing required fields
        """
        if not isinstance(context, IssueContext):
            context = IssueContext.from_payload(context)

        if resolve_similar and self.finder is not None:
            similar = self.finder.find_similar(context.category, context.location)
            context = context.with_similar_issues(similar.count)

        if use_ai:
            result = self._try_ai(context)
            if isinstance(result, PriorityAssessment):
                return result
            logger.info(f"AI priority unavailable ({result.reason}), falling back to rule-based")

        assessment = self.classifier.classify(context)
        logger.info(
            f"🎯 Rule-based priority {assessment.level.value} (score {assessment.score}) "
            f"for '{context.category}'"
        )
        return assessment

    def _try_ai(self, context: IssueContext) -> Union[PriorityAssessment, AIUnavailable]:
        try:
            return self.ai_assessor.assess(context)
        except Exception as e:
            logger.warning(f"AI priority assessment raised, falling back to rule-based: {e}")
            return AIUnavailable(str(e))


_orchestrator: Optional[PriorityOrchestrator] = None


def get_priority_orchestrator() -> PriorityOrchestrator:
    """
    Get or create the PriorityOrchestrator singleton wired from settings.
    """
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = PriorityOrchestrator(
            classifier=get_keyword_classifier(),
            ai_assessor=get_ai_priority_assessor(),
            finder=get_spatial_duplicate_finder(),
        )
    return _orchestrator


def evaluate(
    context: Union[IssueContext, Dict[str, Any]],
    use_ai: bool = True,
    resolve_similar: bool = True,
) -> PriorityAssessment:
    """Triage one issue with the default orchestrator."""
    return get_priority_orchestrator().evaluate(context, use_ai=use_ai, resolve_similar=resolve_similar)
