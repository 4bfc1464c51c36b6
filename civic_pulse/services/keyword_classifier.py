"""
Keyword Severity Classifier - rule-based priority scoring.

DESIGN PRINCIPLES:
- Pure function of the issue context and the injected tables
- Same input always gives the same assessment (no clock, no store, no network)
- Keyword tiers are mutually exclusive: critical > high > medium
- Matching is plain case-insensitive substring search.
  "not dangerous" still matches "dangerous"; there is no stemming or negation.
"""

from typing import List, Optional, Tuple
import logging

from civic_pulse.models.issue import AssessmentSource, IssueContext, PriorityAssessment
from civic_pulse.services.category_severity import DEFAULT_SEVERITY_TABLES, SeverityTables

logger = logging.getLogger(__name__)

# How many matched keywords are echoed back in the factors
MAX_KEYWORDS_IN_FACTOR = 3


def match_keywords(text: str, keywords: Tuple[str, ...]) -> List[str]:
    """Return the keywords found in text, in table order."""
    return [keyword for keyword in keywords if keyword.lower() in text]


class KeywordSeverityClassifier:
    """
    Scores an issue from its category, its wording and the number of similar nearby issues.

    Score = base severity + keyword tier bonus + cluster bonus, clamped to 0-100.
    """

    def __init__(self, tables: Optional[SeverityTables] = None):
        self.tables = tables or DEFAULT_SEVERITY_TABLES

    def classify(self, context: IssueContext) -> PriorityAssessment:
        tables = self.tables
        text = context.text
        factors = []

        # Factor 1: category base severity
        base = tables.base_severity(context.category)
        score = base
        factors.append(f"Category: {context.category} (base severity {base})")

        # Factor 2: keyword tier (first matching tier wins)
        tier_bonus, tier_factor = self._keyword_tier(text)
        score += tier_bonus
        if tier_factor:
            factors.append(tier_factor)

        # Factor 3: similar issues in the area
        cluster_bonus = self.cluster_bonus(context.similar_issues_count)
        score += cluster_bonus
        if context.similar_issues_count > 0:
            factors.append(f"{context.similar_issues_count} similar issue(s) in area (widespread problem)")

        assessment = PriorityAssessment.build(
            score=score,
            factors=factors,
            source=AssessmentSource.RULE_BASED,
        )
        logger.debug(f"Rule-based score {assessment.score} ({assessment.level.value}) for category {context.category}")
        return assessment

    def cluster_bonus(self, similar_issues_count: int) -> int:
        if similar_issues_count <= 0:
            return 0
        return min(similar_issues_count * self.tables.similar_issue_bonus, self.tables.similar_issue_bonus_cap)

    def _keyword_tier(self, text: str) -> Tuple[int, Optional[str]]:
        tables = self.tables

        critical = match_keywords(text, tables.critical_keywords)
        if critical:
            return tables.critical_bonus, f"Critical keywords detected: {self._summarize(critical)}"

        high = match_keywords(text, tables.high_keywords)
        if high:
            return tables.high_bonus, f"Urgency indicators: {self._summarize(high)}"

        medium = match_keywords(text, tables.medium_keywords)
        if medium:
            bonus = min(len(medium) * tables.medium_bonus_per_match, tables.medium_bonus_cap)
            return bonus, f"Attention indicators: {self._summarize(medium)}"

        return 0, None

    @staticmethod
    def _summarize(matches: List[str]) -> str:
        return ", ".join(matches[:MAX_KEYWORDS_IN_FACTOR])


_classifier: Optional[KeywordSeverityClassifier] = None


def get_keyword_classifier() -> KeywordSeverityClassifier:
    """Get or create the default-table classifier."""
    global _classifier
    if _classifier is None:
        _classifier = KeywordSeverityClassifier()
    return _classifier


def classify(context: IssueContext) -> PriorityAssessment:
    """Score an issue with the default tables."""
    return get_keyword_classifier().classify(context)
