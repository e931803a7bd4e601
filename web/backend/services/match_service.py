#!/usr/bin/env python3
"""
Match service - business logic for ranked match reads and workflow actions.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.config_loader import ListingConfig
from core.workflow import WorkflowTracker, InvalidStatusError, VALID_STATUSES
from database.models import JobMatch, Job, Company, User, CandidateProfile
from database.repositories.candidate import CandidateRepository
from database.repositories.job import JobRepository
from database.repositories.match import MatchRepository
from ..exceptions import JobNotFoundException, MatchNotFoundException
from ..models.responses import (
    BrowseJob,
    CandidateMatch,
    CandidateProfileSummary,
    JobCandidatesData,
    JobCandidatesResponse,
    JobSummary,
    MatchRecord,
    Pagination,
    RankedCandidate,
)
from ..utils import safe_float, optional_float, safe_datetime_iso, breakdown_items, pagination

logger = logging.getLogger(__name__)


class MatchService:
    """Service for reading ranked matches and applying employer actions."""

    def __init__(self, db: Session, listing: Optional[ListingConfig] = None):
        self.db = db
        self.listing = listing or ListingConfig()
        self.jobs = JobRepository(db)
        self.matches = MatchRepository(db)
        self.tracker = WorkflowTracker(self.matches)

    def _window(self, page: int, limit: Optional[int]) -> Tuple[int, int, int]:
        page = max(page, 1)
        limit = limit or self.listing.default_page_size
        limit = max(1, min(limit, self.listing.max_page_size))
        return page, limit, (page - 1) * limit

    def get_job_candidates(
        self,
        job_id: uuid.UUID,
        employer_id: uuid.UUID,
        status: Optional[str] = None,
        min_score: Optional[float] = None,
        page: int = 1,
        limit: Optional[int] = None
    ) -> JobCandidatesResponse:
        """
        Rank-ordered candidates for a job owned by the employer.

        Raises:
            JobNotFoundException: Job missing or owned by another company
            InvalidStatusError: Unknown status filter
        """
        job = self.jobs.get_job_for_employer(job_id, employer_id)
        if job is None:
            raise JobNotFoundException(job_id)

        if status and status not in VALID_STATUSES:
            raise InvalidStatusError(f"Invalid status filter '{status}'")

        page, limit, offset = self._window(page, limit)
        rows, total = self.matches.get_ranked_candidates(
            job_id,
            status=status,
            min_score=min_score,
            offset=offset,
            limit=limit
        )

        return JobCandidatesResponse(
            success=True,
            data=JobCandidatesData(
                job_id=str(job.job_id),
                job_title=job.title,
                candidates=[self._to_ranked_candidate(m, u, p) for m, u, p in rows],
            ),
            pagination=Pagination(**pagination(page, limit, total)),
        )

    def get_candidate_matches(self, user_id: uuid.UUID) -> List[CandidateMatch]:
        rows = self.matches.get_matches_for_candidate(user_id)
        return [
            CandidateMatch(
                match_id=str(match.match_id),
                job=self._to_job_summary(job, company),
                overall_score=safe_float(match.overall_score),
                rank=match.match_rank,
                requirements_met=bool(match.requirements_met),
                status=match.status,
                skill_breakdown=breakdown_items(match.skill_breakdown),
                calculated_at=safe_datetime_iso(match.calculated_at),
            )
            for match, job, company in rows
        ]

    def browse_jobs(
        self,
        user_id: uuid.UUID,
        page: int = 1,
        limit: Optional[int] = None
    ) -> Tuple[List[BrowseJob], Pagination]:
        """Active jobs the candidate has been scored against, best score first."""
        page, limit, offset = self._window(page, limit)
        rows = self.matches.get_matches_for_candidate(user_id, active_jobs_only=True)

        jobs = []
        for match, job, company in rows[offset:offset + limit]:
            breakdown = breakdown_items(match.skill_breakdown)
            required = [item for item in breakdown if item['required']]
            jobs.append(BrowseJob(
                job=self._to_job_summary(job, company),
                match_id=str(match.match_id),
                overall_score=safe_float(match.overall_score),
                requirements_met=bool(match.requirements_met),
                required_skills_met=sum(1 for item in required if item['met']),
                required_skills_total=len(required),
                skill_breakdown=breakdown,
            ))

        return jobs, Pagination(**pagination(page, limit, len(rows)))

    def get_match_detail(self, match_id: uuid.UUID, employer_id: uuid.UUID) -> MatchRecord:
        """Employer opens a match; records the view side effect."""
        self._require_employer_match(match_id, employer_id)
        match = self.tracker.record_view(match_id)
        self.db.commit()
        return self._to_match_record(match)

    def update_status(self, match_id: uuid.UUID, employer_id: uuid.UUID, status: str) -> MatchRecord:
        self._require_employer_match(match_id, employer_id)
        match = self.tracker.change_status(match_id, status)
        self.db.commit()
        return self._to_match_record(match)

    def contact_candidate(self, match_id: uuid.UUID, employer_id: uuid.UUID) -> MatchRecord:
        self._require_employer_match(match_id, employer_id)
        match = self.tracker.record_contact(match_id)
        self.db.commit()
        return self._to_match_record(match)

    def _require_employer_match(self, match_id: uuid.UUID, employer_id: uuid.UUID) -> JobMatch:
        match = self.matches.get_match_for_employer(match_id, employer_id)
        if match is None:
            raise MatchNotFoundException(match_id)
        return match

    @staticmethod
    def _to_ranked_candidate(match: JobMatch, user: User, profile: CandidateProfile) -> RankedCandidate:
        display = CandidateRepository.display_fields(user, profile)
        return RankedCandidate(
            match_id=str(match.match_id),
            user_id=str(match.user_id),
            rank=match.match_rank,
            overall_score=safe_float(match.overall_score),
            requirements_met=bool(match.requirements_met),
            status=match.status,
            viewed_at=safe_datetime_iso(match.viewed_at),
            contacted_at=safe_datetime_iso(match.contacted_at),
            profile_visibility=display['profile_visibility'],
            first_name=display['first_name'],
            last_name=display['last_name'],
            email=display['email'],
            profile=CandidateProfileSummary(
                headline=display['headline'],
                years_experience=display['years_experience'],
                city=display['city'],
                state=display['state'],
                remote_preference=display['remote_preference'],
            ),
            skill_breakdown=breakdown_items(match.skill_breakdown),
            created_at=safe_datetime_iso(match.created_at),
            calculated_at=safe_datetime_iso(match.calculated_at),
        )

    @staticmethod
    def _to_job_summary(job: Job, company: Optional[Company]) -> JobSummary:
        return JobSummary(
            job_id=str(job.job_id),
            title=job.title,
            company_name=company.name if company is not None else None,
            city=job.city,
            state=job.state,
            remote_option=job.remote_option,
            employment_type=job.employment_type,
            experience_level=job.experience_level,
            salary_min=optional_float(job.salary_min),
            salary_max=optional_float(job.salary_max),
            status=job.status,
        )

    @staticmethod
    def _to_match_record(match: JobMatch) -> MatchRecord:
        return MatchRecord(
            match_id=str(match.match_id),
            job_id=str(match.job_id),
            user_id=str(match.user_id),
            overall_score=safe_float(match.overall_score),
            rank=match.match_rank,
            requirements_met=bool(match.requirements_met),
            status=match.status,
            viewed_at=safe_datetime_iso(match.viewed_at),
            contacted_at=safe_datetime_iso(match.contacted_at),
            skill_breakdown=breakdown_items(match.skill_breakdown),
            created_at=safe_datetime_iso(match.created_at),
            updated_at=safe_datetime_iso(match.updated_at),
            calculated_at=safe_datetime_iso(match.calculated_at),
        )
