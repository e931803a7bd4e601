#!/usr/bin/env python3
"""
Calculation service - runs a job's recalculation under a server-side deadline.
"""

import logging
import threading
import uuid

from sqlalchemy.orm import Session

from core.calculator.models import RecalculationResult
from core.calculator.service import BatchCalculator
from database.repositories.job import JobRepository
from ..exceptions import JobNotFoundException
from ..models.responses import CalculationSummary, TopMatch
from ..utils import safe_datetime_iso

logger = logging.getLogger(__name__)


class CalculationService:
    """
    Triggers recalculation on behalf of an employer.

    The run is abandoned once `timeout_seconds` elapse so a caller that
    has given up does not keep the data store busy.
    """

    def __init__(self, db: Session, calculator: BatchCalculator, timeout_seconds: float):
        self.db = db
        self.calculator = calculator
        self.timeout_seconds = timeout_seconds

    def calculate_for_employer(self, job_id: uuid.UUID, employer_id: uuid.UUID) -> CalculationSummary:
        """
        Raises:
            JobNotFoundException: Job missing or not owned by the employer's company
            CalculationError: Any failure of the run itself
        """
        if JobRepository(self.db).get_job_for_employer(job_id, employer_id) is None:
            raise JobNotFoundException(job_id)
        # Release the read transaction before the long run
        self.db.rollback()

        result = self.run_with_deadline(job_id)
        return self._to_summary(result)

    def run_with_deadline(self, job_id: uuid.UUID) -> RecalculationResult:
        stop_event = threading.Event()
        timer = threading.Timer(self.timeout_seconds, stop_event.set)
        timer.daemon = True
        timer.start()
        try:
            return self.calculator.recalculate(job_id, stop_event=stop_event)
        finally:
            timer.cancel()

    @staticmethod
    def _to_summary(result: RecalculationResult) -> CalculationSummary:
        return CalculationSummary(
            job_id=str(result.job_id),
            matches_written=result.matches_written,
            total_matches=result.matches_written,
            duration_ms=result.duration_ms,
            calculated_at=safe_datetime_iso(result.calculated_at),
            top_matches=[
                TopMatch(
                    user_id=str(match.user_id),
                    rank=match.rank,
                    overall_score=match.result.overall_score,
                    requirements_met=match.result.requirements_met,
                )
                for match in result.top_matches
            ],
        )
