"""REST API routes for pollenTracker.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: API (FastAPI route handlers).
# Pattern: Routes reach services via ``request.app.state`` (wired in
#          src/main.py); the caller's owner id comes from the
#          ``require_owner`` dependency.
#
# Endpoints:
#   POST /api/v1/feedback        : Submit feedback for the caller's location
#   GET  /api/v1/analysis        : Recompute and return the caller's analysis
#   GET  /api/v1/analysis/latest : Return the stored analysis, no recompute
#   GET  /api/v1/health          : Liveness + configured adapters (no auth)
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Request

from src.api.auth import require_owner
from src.api.schemas import (
    AnalysisResponse,
    CategoryStatResponse,
    HealthResponse,
    ReadingResponse,
    SubmitFeedbackResponse,
)
from src.models.analysis import CorrelationResult
from src.services.analysis_service import AnalysisService
from src.services.feedback_service import FeedbackService

logger = structlog.get_logger(logger_name=__name__)

router = APIRouter(prefix="/api/v1", tags=["pollen"])


# ── Service accessors ─────────────────────────────────────────────────
def _get_feedback_service(request: Request) -> FeedbackService:
    """Retrieve FeedbackService from app state; raise 503 if unavailable."""
    svc = getattr(request.app.state, "feedback_service", None)
    if svc is None:
        raise HTTPException(status_code=503, detail="Feedback service unavailable")
    return svc


def _get_analysis_service(request: Request) -> AnalysisService:
    """Retrieve AnalysisService from app state; raise 503 if unavailable."""
    svc = getattr(request.app.state, "analysis_service", None)
    if svc is None:
        raise HTTPException(status_code=503, detail="Analysis service unavailable")
    return svc


def _result_to_response(result: CorrelationResult) -> AnalysisResponse:
    """Map a CorrelationResult domain model to the API response schema."""
    return AnalysisResponse(
        owner_id=result.owner_id,
        data_points=result.data_points,
        correlations={
            category: CategoryStatResponse(
                correlation=stat.correlation,
                significance=stat.significance,
                significant=stat.significant,
                error=stat.error,
            )
            for category, stat in result.correlations.items()
        },
        analyzed_at=result.analyzed_at,
    )


# ── Submit feedback ───────────────────────────────────────────────────
# The body is taken as raw JSON so that missing or malformed fields are
# reported by the service with its own messages (400), not as a 422.
@router.post("/feedback", response_model=SubmitFeedbackResponse)
async def submit_feedback(
    request: Request,
    payload: Any = Body(default=None),
    owner_id: str = Depends(require_owner),
) -> SubmitFeedbackResponse:
    """Store a feedback score together with the current exposure readings."""
    svc = _get_feedback_service(request)
    result = await svc.submit_feedback(owner_id, payload)

    return SubmitFeedbackResponse(
        success=result.success,
        record_id=result.record_id,
        readings=[
            ReadingResponse(category=r.category, exposure_level=r.exposure_level)
            for r in result.readings
        ],
    )


# ── Analysis ──────────────────────────────────────────────────────────
@router.get("/analysis", response_model=AnalysisResponse)
async def get_analysis(
    request: Request,
    owner_id: str = Depends(require_owner),
) -> AnalysisResponse:
    """Recompute the caller's exposure/feedback correlations."""
    svc = _get_analysis_service(request)
    result = await svc.run_analysis(owner_id)
    return _result_to_response(result)


@router.get("/analysis/latest", response_model=AnalysisResponse)
async def get_latest_analysis(
    request: Request,
    owner_id: str = Depends(require_owner),
) -> AnalysisResponse:
    """Return the caller's last stored analysis without recomputing."""
    svc = _get_analysis_service(request)
    result = await svc.get_latest(owner_id)
    if result is None:
        raise HTTPException(status_code=404, detail="No analysis has been run yet")
    return _result_to_response(result)


# ── Health ────────────────────────────────────────────────────────────
@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Report liveness and which adapters are wired in."""
    store = getattr(request.app.state, "feedback_store", None)
    exposure = getattr(request.app.state, "exposure_provider", None)
    return HealthResponse(
        version=getattr(request.app, "version", "0.1.0"),
        store=store.get_provider_name() if store is not None else "none",
        exposure=exposure.get_provider_name() if exposure is not None else None,
        exposure_available=exposure.is_available() if exposure is not None else False,
    )
