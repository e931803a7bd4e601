#!/usr/bin/env python3
"""
Workflow Tracker - status changes and employer action side effects.

States: matched -> viewed -> contacted -> shortlisted -> {rejected, hired}.
Explicit status changes may jump or reverse between any of them; opening
a match and contacting a candidate are side effects that stamp their
timestamp once and only promote an earlier status.
"""

from datetime import datetime
from typing import Any, Optional
import logging

from core.utils import utcnow
from core.workflow.errors import InvalidStatusError, MatchNotFoundError
from database.models import JobMatch, MATCH_STATUSES
from database.repositories.match import MatchRepository

logger = logging.getLogger(__name__)

STATUS_MATCHED = 'matched'
STATUS_VIEWED = 'viewed'
STATUS_CONTACTED = 'contacted'
STATUS_SHORTLISTED = 'shortlisted'
STATUS_REJECTED = 'rejected'
STATUS_HIRED = 'hired'

VALID_STATUSES = frozenset(MATCH_STATUSES)

# A view never moves a match backwards from contacted or later
VIEW_PROMOTES_FROM = frozenset({STATUS_MATCHED})
CONTACT_PROMOTES_FROM = frozenset({STATUS_MATCHED, STATUS_VIEWED})


class WorkflowTracker:
    """
    Applies employer workflow actions to a match.

    Every mutation is a targeted UPDATE of workflow columns only, so it can
    interleave with a recalculation of the same job without losing either
    write.
    """

    def __init__(self, matches: MatchRepository):
        self.matches = matches

    def record_view(self, match_id: Any, now: Optional[datetime] = None) -> JobMatch:
        now = now or utcnow()
        match = self.matches.record_view(match_id, now, VIEW_PROMOTES_FROM)
        if match is None:
            raise MatchNotFoundError(f"Match {match_id} not found")
        logger.info(f"Match {match_id} viewed (status={match.status})")
        return match

    def record_contact(self, match_id: Any, now: Optional[datetime] = None) -> JobMatch:
        now = now or utcnow()
        match = self.matches.record_contact(match_id, now, CONTACT_PROMOTES_FROM)
        if match is None:
            raise MatchNotFoundError(f"Match {match_id} not found")
        logger.info(f"Match {match_id} contacted (status={match.status})")
        return match

    def change_status(self, match_id: Any, status: str, now: Optional[datetime] = None) -> JobMatch:
        """
        Set an explicit employer status.

        Any status, including a reversal, is accepted. Moving to viewed or
        contacted also stamps the matching timestamp if it is not set yet.

        Raises:
            InvalidStatusError: status is not a known workflow status
            MatchNotFoundError: match does not exist
        """
        if status not in VALID_STATUSES:
            raise InvalidStatusError(
                f"Invalid status '{status}'. Must be one of: {', '.join(MATCH_STATUSES)}"
            )

        now = now or utcnow()
        match = self.matches.update_status(
            match_id,
            status,
            now,
            stamp_viewed=status == STATUS_VIEWED,
            stamp_contacted=status == STATUS_CONTACTED,
        )
        if match is None:
            raise MatchNotFoundError(f"Match {match_id} not found")
        logger.info(f"Match {match_id} status set to {status}")
        return match
