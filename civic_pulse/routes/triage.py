"""
Triage endpoints - called by the issue-creation service before it stores an issue.
"""

import logging

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from civic_pulse.models.issue import (
    ImageAnalysisRequest,
    ImageAnalysisResponse,
    PriorityAssessment,
    TriageRequest,
)
from civic_pulse.services.image_analysis import get_image_analysis_service
from civic_pulse.services.priority_orchestrator import get_priority_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/triage", tags=["Triage"])


@router.post("/evaluate", response_model=PriorityAssessment)
async def evaluate_priority(request: TriageRequest):
    """
    Decide the priority of a newly submitted issue.

    Always returns an assessment for a valid body; AI and store
    failures degrade to the rule-based score. The similar-issue lookup is
    skipped when the body already carries similar_issues_count.
    """
    logger.info(f"📝 POST /triage/evaluate - category={request.category}")
    return await run_in_threadpool(
        get_priority_orchestrator().evaluate,
        request.to_context(),
        use_ai=request.use_ai,
        resolve_similar=request.similar_issues_count is None,
    )


@router.post("/images", response_model=ImageAnalysisResponse)
async def analyze_images(request: ImageAnalysisRequest):
    """
    Optional photo assessment. Returns {"analysis": null} when unavailable.
    """
    analysis = await run_in_threadpool(get_image_analysis_service().analyze_images, request.photo_urls)
    return ImageAnalysisResponse(analysis=analysis)
