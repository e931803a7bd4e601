#!/usr/bin/env python3
"""
Matching endpoints - trigger recalculation and read a job's ranked candidates.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.calculator.service import BatchCalculator
from ..config import get_config
from ..dependencies import get_db, get_calculator, require_employer, CurrentUser
from ..services.calculation_service import CalculationService
from ..services.match_service import MatchService
from ..models.responses import CalculateResponse, JobCandidatesResponse
from ..utils import parse_uuid

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/api/v1/matching", tags=["matching"])


def add_rate_limit_handlers(app):
    """Attach the limiter to the app; RateLimitExceeded is rendered by the exceptions module."""
    app.state.limiter = limiter


def calculate_rate_limit() -> str:
    return get_config().web.calculate_rate_limit


@router.post("/jobs/{job_id}/calculate", response_model=CalculateResponse)
@limiter.limit(calculate_rate_limit)
def calculate_job_matches(
    request: Request,
    job_id: str,
    user: CurrentUser = Depends(require_employer),
    db: Session = Depends(get_db),
    calculator: BatchCalculator = Depends(get_calculator)
):
    """
    Recalculate and store the ranked matches for a job.

    Only one calculation per job runs at a time; a concurrent request gets
    CALCULATION_IN_PROGRESS and may retry later.
    """
    job_uuid = parse_uuid(job_id, "job_id")
    service = CalculationService(
        db,
        calculator,
        timeout_seconds=get_config().matching.calculator.calculation_timeout_seconds
    )
    summary = service.calculate_for_employer(job_uuid, user.user_id)
    return CalculateResponse(success=True, data=summary)


@router.get("/jobs/{job_id}/candidates", response_model=JobCandidatesResponse)
def get_job_candidates(
    job_id: str,
    status: Optional[str] = Query(default=None, description="Workflow status filter"),
    min_score: Optional[float] = Query(default=None, alias="minScore", ge=0, le=100),
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    user: CurrentUser = Depends(require_employer),
    db: Session = Depends(get_db)
):
    """
    Get a job's candidates in rank order.

    Private profiles are never listed; anonymous profiles are listed with
    identity fields withheld.
    """
    job_uuid = parse_uuid(job_id, "job_id")
    service = MatchService(db, get_config().matching.listing)
    return service.get_job_candidates(
        job_uuid,
        user.user_id,
        status=status,
        min_score=min_score,
        page=page,
        limit=limit
    )
