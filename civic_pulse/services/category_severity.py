"""
Severity tables for rule-based triage.

Tables are immutable and injected into the classifier, so every evaluation
reads the same data and a test can swap in its own tables.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from civic_pulse.models.issue import IssueCategory

# Base severity per category (0-100)
CATEGORY_SEVERITY: Mapping[str, int] = MappingProxyType({
    IssueCategory.SAFETY_SECURITY.value: 90,
    IssueCategory.HEALTH_SANITATION.value: 85,
    IssueCategory.WATER_SUPPLY.value: 80,
    IssueCategory.ELECTRICITY.value: 75,
    IssueCategory.ROAD_INFRASTRUCTURE.value: 70,
    IssueCategory.STREET_LIGHTS.value: 65,
    IssueCategory.WASTE_MANAGEMENT.value: 60,
    IssueCategory.PUBLIC_TRANSPORT.value: 55,
    IssueCategory.EDUCATION.value: 50,
    IssueCategory.PARKS_RECREATION.value: 45,
    IssueCategory.OTHER.value: 40,
})

DEFAULT_CATEGORY_SEVERITY = 40

CRITICAL_KEYWORDS: Tuple[str, ...] = (
    "emergency",
    "urgent",
    "dangerous",
    "hazardous",
    "life-threatening",
    "critical",
    "severe",
    "immediate",
    "fatal",
    "death",
    "injury",
    "injured",
    "accident",
    "collapsed",
    "fire",
    "explosion",
    "leak",
    "flooding",
    "burst",
    "broken glass",
    "exposed wire",
    "live wire",
    "electric shock",
    "gas leak",
    "contaminated",
    "toxic",
    "overflow",
    "manholes",
    "open manhole",
)

HIGH_URGENCY_KEYWORDS: Tuple[str, ...] = (
    "broken",
    "damaged",
    "not working",
    "malfunctioning",
    "blocked",
    "overflowing",
    "stagnant",
    "foul smell",
    "spreading",
    "growing",
    "worse",
    "deteriorating",
    "multiple",
    "several",
    "many",
    "weeks",
    "days",
)

MEDIUM_URGENCY_KEYWORDS: Tuple[str, ...] = (
    "issue",
    "problem",
    "concern",
    "needs attention",
    "requires",
    "should be",
    "would be",
    "improvement",
    "repair",
    "fix",
    "maintenance",
)


@dataclass(frozen=True)
class SeverityTables:
    """
    Category base scores, keyword tiers and the score adjustments tied to them.
    """
    category_severity: Mapping[str, int] = field(default_factory=lambda: CATEGORY_SEVERITY)
    default_severity: int = DEFAULT_CATEGORY_SEVERITY
    critical_keywords: Tuple[str, ...] = CRITICAL_KEYWORDS
    high_keywords: Tuple[str, ...] = HIGH_URGENCY_KEYWORDS
    medium_keywords: Tuple[str, ...] = MEDIUM_URGENCY_KEYWORDS
    critical_bonus: int = 30
    high_bonus: int = 15
    medium_bonus_per_match: int = 5
    medium_bonus_cap: int = 10
    similar_issue_bonus: int = 2
    similar_issue_bonus_cap: int = 20

    def base_severity(self, category: str) -> int:
        return self.category_severity.get(category, self.default_severity)


DEFAULT_SEVERITY_TABLES = SeverityTables()
