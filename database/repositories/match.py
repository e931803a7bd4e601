import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional, Tuple

from sqlalchemy import select, update, func, case

from core.calculator.models import RankedMatch
from database.models import JobMatch, Job, Company, CompanyUser, User, CandidateProfile
from database.repositories.base import BaseRepository
from database.repositories.candidate import VISIBILITY_PRIVATE

logger = logging.getLogger(__name__)

# Columns a recalculation may write on an existing row. Workflow columns
# (status, viewed_at, contacted_at) and created_at are deliberately absent.
SCORE_COLUMNS = (
    'overall_score',
    'match_rank',
    'skill_breakdown',
    'requirements_met',
    'updated_at',
    'calculated_at',
)


class MatchRepository(BaseRepository):
    def get_match_by_id(self, match_id: Any) -> Optional[JobMatch]:
        stmt = (
            select(JobMatch)
            .where(JobMatch.match_id == match_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_existing_match(self, job_id: Any, user_id: Any) -> Optional[JobMatch]:
        stmt = select(JobMatch).where(
            JobMatch.job_id == job_id,
            JobMatch.user_id == user_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_match_for_employer(self, match_id: Any, employer_id: Any) -> Optional[JobMatch]:
        """Return the match only if the employer belongs to the company owning its job."""
        stmt = (
            select(JobMatch)
            .join(Job, Job.job_id == JobMatch.job_id)
            .join(CompanyUser, CompanyUser.company_id == Job.company_id)
            .where(JobMatch.match_id == match_id, CompanyUser.user_id == employer_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_matches_for_job(self, job_id: Any) -> List[JobMatch]:
        stmt = (
            select(JobMatch)
            .where(JobMatch.job_id == job_id)
            .order_by(JobMatch.match_rank.asc().nulls_last(), JobMatch.user_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalars().all()

    def apply_rankings(
        self,
        job_id: Any,
        ranked: Iterable[RankedMatch],
        now: datetime,
        batch_size: int = 1000
    ) -> int:
        """
        Write a job's fresh ranking.

        Must run inside the caller's transaction so readers see either the
        previous ranking or this one in full. Existing rows only get their
        score columns updated; new rows start in status 'matched'. Rows of
        candidates missing from `ranked` lose their rank but keep their
        workflow state.

        Returns:
            Number of match rows written
        """
        self.db.execute(
            update(JobMatch)
            .where(JobMatch.job_id == job_id)
            .values(match_rank=None)
            .execution_options(synchronize_session=False)
        )

        rows = [
            {
                'job_id': job_id,
                'user_id': match.user_id,
                'overall_score': match.result.overall_score,
                'match_rank': match.rank,
                'skill_breakdown': match.result.breakdown_dicts(),
                'requirements_met': match.result.requirements_met,
                'status': 'matched',
                'created_at': now,
                'updated_at': now,
                'calculated_at': now,
            }
            for match in ranked
        ]
        if not rows:
            return 0

        insert_stmt = self.upsert_insert(JobMatch.__table__)
        upsert_stmt = insert_stmt.on_conflict_do_update(
            index_elements=['job_id', 'user_id'],
            set_={column: insert_stmt.excluded[column] for column in SCORE_COLUMNS}
        )

        for start in range(0, len(rows), batch_size):
            self.db.execute(upsert_stmt, rows[start:start + batch_size])

        logger.info(f"Wrote {len(rows)} ranked matches for job {job_id}")
        return len(rows)

    def get_ranked_candidates(
        self,
        job_id: Any,
        status: Optional[str] = None,
        min_score: Optional[float] = None,
        offset: int = 0,
        limit: int = 20
    ) -> Tuple[List[Tuple[JobMatch, User, CandidateProfile]], int]:
        """
        Rank-ordered employer listing for a job, private profiles excluded.

        Returns:
            (page of (match, user, profile) rows, total matching rows)
        """
        conditions = [
            JobMatch.job_id == job_id,
            JobMatch.match_rank.is_not(None),
            CandidateProfile.profile_visibility != VISIBILITY_PRIVATE,
        ]
        if status:
            conditions.append(JobMatch.status == status)
        if min_score is not None:
            conditions.append(JobMatch.overall_score >= min_score)

        base = (
            select(JobMatch, User, CandidateProfile)
            .join(User, User.user_id == JobMatch.user_id)
            .join(CandidateProfile, CandidateProfile.user_id == JobMatch.user_id)
            .where(*conditions)
        )

        total = self.db.execute(
            select(func.count()).select_from(base.subquery())
        ).scalar_one()

        page = self.db.execute(
            base.order_by(JobMatch.match_rank.asc()).offset(offset).limit(limit)
        ).all()

        return [tuple(row) for row in page], total

    def get_matches_for_candidate(
        self,
        user_id: Any,
        active_jobs_only: bool = False
    ) -> List[Tuple[JobMatch, Job, Company]]:
        """Candidate-facing view: the candidate's ranked matches, best score first."""
        stmt = (
            select(JobMatch, Job, Company)
            .join(Job, Job.job_id == JobMatch.job_id)
            .join(Company, Company.company_id == Job.company_id)
            .where(JobMatch.user_id == user_id, JobMatch.match_rank.is_not(None))
        )
        if active_jobs_only:
            stmt = stmt.where(Job.status == 'active')

        stmt = stmt.order_by(JobMatch.overall_score.desc(), Job.created_at.desc())
        return [tuple(row) for row in self.db.execute(stmt).all()]

    def record_view(
        self,
        match_id: Any,
        now: datetime,
        promote_from: Iterable[str]
    ) -> Optional[JobMatch]:
        """Stamp viewed_at once and promote status; score columns untouched."""
        self.db.execute(
            update(JobMatch)
            .where(JobMatch.match_id == match_id)
            .values(
                viewed_at=func.coalesce(JobMatch.viewed_at, now),
                status=case(
                    (JobMatch.status.in_(list(promote_from)), 'viewed'),
                    else_=JobMatch.status
                ),
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return self.get_match_by_id(match_id)

    def record_contact(
        self,
        match_id: Any,
        now: datetime,
        promote_from: Iterable[str]
    ) -> Optional[JobMatch]:
        """Stamp contacted_at once and promote status; score columns untouched."""
        self.db.execute(
            update(JobMatch)
            .where(JobMatch.match_id == match_id)
            .values(
                contacted_at=func.coalesce(JobMatch.contacted_at, now),
                status=case(
                    (JobMatch.status.in_(list(promote_from)), 'contacted'),
                    else_=JobMatch.status
                ),
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return self.get_match_by_id(match_id)

    def update_status(
        self,
        match_id: Any,
        status: str,
        now: datetime,
        stamp_viewed: bool = False,
        stamp_contacted: bool = False
    ) -> Optional[JobMatch]:
        values = {'status': status, 'updated_at': now}
        if stamp_viewed:
            values['viewed_at'] = func.coalesce(JobMatch.viewed_at, now)
        if stamp_contacted:
            values['contacted_at'] = func.coalesce(JobMatch.contacted_at, now)

        self.db.execute(
            update(JobMatch)
            .where(JobMatch.match_id == match_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return self.get_match_by_id(match_id)
