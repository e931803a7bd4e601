#!/usr/bin/env python3
"""
Candidate endpoints - a candidate's own matches.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..config import get_config
from ..dependencies import get_db, require_candidate, CurrentUser
from ..services.match_service import MatchService
from ..models.responses import CandidateMatchesResponse, BrowseJobsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/matching/candidate", tags=["candidate"])


@router.get("/matches", response_model=CandidateMatchesResponse)
def get_candidate_matches(
    user: CurrentUser = Depends(require_candidate),
    db: Session = Depends(get_db)
):
    """Get every stored match for the calling candidate, best score first."""
    service = MatchService(db, get_config().matching.listing)
    return CandidateMatchesResponse(success=True, data=service.get_candidate_matches(user.user_id))


@router.get("/browse-jobs", response_model=BrowseJobsResponse)
def browse_jobs(
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    user: CurrentUser = Depends(require_candidate),
    db: Session = Depends(get_db)
):
    """Browse active jobs with the calling candidate's match score."""
    service = MatchService(db, get_config().matching.listing)
    jobs, page_info = service.browse_jobs(user.user_id, page=page, limit=limit)
    return BrowseJobsResponse(success=True, data=jobs, pagination=page_info)
