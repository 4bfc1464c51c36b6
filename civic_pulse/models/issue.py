"""
Pydantic models for issue triage.

IssueContext is the immutable input of one evaluation.
PriorityAssessment is the terminal output; it is never revised.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator


class IssueCategory(str, Enum):
    """Civic categories known to the severity table."""
    SAFETY_SECURITY = "Safety & Security"
    HEALTH_SANITATION = "Health & Sanitation"
    WATER_SUPPLY = "Water Supply"
    ELECTRICITY = "Electricity"
    ROAD_INFRASTRUCTURE = "Road & Infrastructure"
    STREET_LIGHTS = "Street Lights"
    WASTE_MANAGEMENT = "Waste Management"
    PUBLIC_TRANSPORT = "Public Transport"
    EDUCATION = "Education"
    PARKS_RECREATION = "Parks & Recreation"
    OTHER = "Other"


class PriorityLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class AssessmentSource(str, Enum):
    RULE_BASED = "RuleBased"
    AI_ASSESSED = "AIAssessed"


# Lower bounds, highest first
LEVEL_THRESHOLDS = (
    (85, PriorityLevel.CRITICAL),
    (70, PriorityLevel.HIGH),
    (50, PriorityLevel.MEDIUM),
)


def priority_level_for_score(score: int) -> PriorityLevel:
    """Map a 0-100 score to its priority level."""
    for lower_bound, level in LEVEL_THRESHOLDS:
        if score >= lower_bound:
            return level
    return PriorityLevel.LOW


class InvalidIssueContext(ValueError):
    """Raised when an issue cannot be triaged because required input is missing or malformed."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class GeoPoint(BaseModel):
    """WGS-84 point. Stored as GeoJSON with longitude first."""
    longitude: float = Field(..., ge=-180, le=180)
    latitude: float = Field(..., ge=-90, le=90)

    class Config:
        frozen = True

    def to_geojson(self) -> Dict[str, Any]:
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}


class IssueContext(BaseModel):
    """
    Everything the engine needs to triage one newly submitted issue.

    Title and description may be empty strings but must be present.
    Category is free text; categories outside IssueCategory get the default base severity.
    """
    category: str = Field(..., min_length=1)
    title: str
    description: str
    location: GeoPoint
    similar_issues_count: int = Field(default=0, ge=0)
    photo_references: List[str] = Field(default_factory=list)

    class Config:
        frozen = True
        extra = "ignore"

    @field_validator("location", mode="before")
    @classmethod
    def _coerce_location(cls, value: Any) -> Any:
        # Accept GeoJSON points and (lon, lat) pairs as well as GeoPoint fields
        if isinstance(value, dict) and "coordinates" in value:
            value = value["coordinates"]
        if isinstance(value, (list, tuple)):
            if len(value) != 2:
                raise ValueError("location must be [longitude, latitude]")
            return {"longitude": value[0], "latitude": value[1]}
        return value

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "IssueContext":
        """Build a context from raw input, raising InvalidIssueContext on bad data."""
        try:
            return cls(**payload)
        except ValidationError as e:
            raise InvalidIssueContext(
                f"Invalid issue context: {e.error_count()} error(s)",
                errors=e.errors(include_url=False, include_context=False),
            )
        except TypeError as e:
            raise InvalidIssueContext(f"Invalid issue context: {e}")

    def with_similar_issues(self, count: int) -> "IssueContext":
        return self.model_copy(update={"similar_issues_count": max(0, int(count))})

    @property
    def text(self) -> str:
        return f"{self.title} {self.description}".lower()


class PriorityAssessment(BaseModel):
    """Terminal triage result. Score and level always agree."""
    score: int = Field(..., ge=0, le=100)
    level: PriorityLevel
    factors: List[str] = Field(default_factory=list)
    source: AssessmentSource
    ai_analysis: Optional[str] = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "score": 100,
                "level": "Critical",
                "factors": [
                    "Category: Electricity (base severity 75)",
                    "Critical keywords detected: live wire",
                ],
                "source": "RuleBased",
                "ai_analysis": None,
            }
        }

    @classmethod
    def build(
        cls,
        score: int,
        factors: List[str],
        source: AssessmentSource,
        ai_analysis: Optional[str] = None,
    ) -> "PriorityAssessment":
        """Clamp the score and derive the level so both stay consistent."""
        score = max(0, min(100, int(score)))
        return cls(
            score=score,
            level=priority_level_for_score(score),
            factors=list(factors),
            source=source,
            ai_analysis=ai_analysis if source == AssessmentSource.AI_ASSESSED else None,
        )

    @property
    def is_ai_assessed(self) -> bool:
        return self.source == AssessmentSource.AI_ASSESSED


class ImageAnalysis(BaseModel):
    """Optional photo signal. Never feeds the priority score."""
    severity: PriorityLevel
    description: str = ""
    detected_hazards: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class TriageRequest(BaseModel):
    """Body of POST /triage/evaluate."""
    category: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., max_length=300)
    description: str = Field(..., max_length=5000)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    photo_urls: List[str] = Field(default_factory=list)
    similar_issues_count: Optional[int] = Field(None, ge=0, description="Skip the spatial lookup when supplied")
    use_ai: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "category": "Electricity",
                "title": "Live wire exposed near school",
                "description": "Cable hanging low over the footpath",
                "latitude": 18.5074,
                "longitude": 73.8077,
                "photo_urls": ["https://example.com/photo.jpg"],
            }
        }
        extra = "ignore"

    def to_context(self) -> IssueContext:
        return IssueContext(
            category=self.category,
            title=self.title,
            description=self.description,
            location=GeoPoint(longitude=self.longitude, latitude=self.latitude),
            similar_issues_count=self.similar_issues_count or 0,
            photo_references=self.photo_urls,
        )


class ImageAnalysisRequest(BaseModel):
    photo_urls: List[str] = Field(default_factory=list)


class ImageAnalysisResponse(BaseModel):
    analysis: Optional[ImageAnalysis] = None
