#!/usr/bin/env python3
"""
Match endpoints - employer workflow actions on a single match.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..config import get_config
from ..dependencies import get_db, require_employer, CurrentUser
from ..services.match_service import MatchService
from ..models.requests import StatusUpdateRequest
from ..models.responses import MatchResponse
from ..utils import parse_uuid

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/matching/matches", tags=["matches"])


@router.get("/{match_id}", response_model=MatchResponse)
def get_match_detail(
    match_id: str,
    user: CurrentUser = Depends(require_employer),
    db: Session = Depends(get_db)
):
    """
    Open a match. Marks it viewed (once) and promotes a fresh match to viewed.
    """
    match_uuid = parse_uuid(match_id, "match_id")
    service = MatchService(db, get_config().matching.listing)
    return MatchResponse(success=True, data=service.get_match_detail(match_uuid, user.user_id))


@router.put("/{match_id}/status", response_model=MatchResponse)
def update_match_status(
    match_id: str,
    body: StatusUpdateRequest,
    user: CurrentUser = Depends(require_employer),
    db: Session = Depends(get_db)
):
    """
    Set the match status. Any known status is accepted, including a reversal.
    """
    match_uuid = parse_uuid(match_id, "match_id")
    service = MatchService(db, get_config().matching.listing)
    return MatchResponse(success=True, data=service.update_status(match_uuid, user.user_id, body.status))


@router.post("/{match_id}/contact", response_model=MatchResponse)
def contact_candidate(
    match_id: str,
    user: CurrentUser = Depends(require_employer),
    db: Session = Depends(get_db)
):
    """
    Record that the employer contacted the candidate.

    Sets contactedAt once and moves a matched or viewed match to contacted.
    """
    match_uuid = parse_uuid(match_id, "match_id")
    service = MatchService(db, get_config().matching.listing)
    return MatchResponse(success=True, data=service.contact_candidate(match_uuid, user.user_id))
