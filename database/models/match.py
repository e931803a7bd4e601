import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Numeric, Uuid, UniqueConstraint, Index, CheckConstraint, func
from sqlalchemy.orm import relationship

from .base import Base, JSONType


MATCH_STATUSES = ('matched', 'viewed', 'contacted', 'shortlisted', 'rejected', 'hired')


class JobMatch(Base):
    """
    Stores the ranked match of one candidate against one job.

    Two disjoint field sets:
    - Score fields (overall_score, match_rank, skill_breakdown,
      requirements_met, calculated_at) are rewritten by every recalculation.
    - Workflow fields (status, viewed_at, contacted_at) are only written by
      employer actions and survive recalculation.

    match_rank is dense (1..N) per job among rows of the latest calculation;
    rows of candidates that left the eligible pool keep their workflow state
    with match_rank NULL.
    """
    __tablename__ = 'job_matches'

    match_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('jobs.job_id', ondelete='CASCADE'), nullable=False)
    user_id = Column(Uuid, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)

    overall_score = Column(Numeric(5, 2), nullable=False)
    match_rank = Column(Integer, nullable=True)
    skill_breakdown = Column(JSONType, nullable=False, default=list)
    requirements_met = Column(Boolean, nullable=False, default=False)

    status = Column(Text, nullable=False, default='matched')
    viewed_at = Column(TIMESTAMP(timezone=True), nullable=True)
    contacted_at = Column(TIMESTAMP(timezone=True), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    calculated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    job = relationship("Job")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('job_id', 'user_id', name='uq_job_matches_job_user'),
        CheckConstraint(
            "status IN ('matched', 'viewed', 'contacted', 'shortlisted', 'rejected', 'hired')",
            name='ck_job_matches_status'
        ),
        Index('idx_job_matches_rank', 'job_id', 'match_rank'),
        Index('idx_job_matches_user_id', 'user_id'),
        Index('idx_job_matches_status', 'status'),
    )


# Serves rank-ordered paginated reads per job
Index('idx_job_matches_job_score', JobMatch.job_id, JobMatch.overall_score.desc())


class MatchCalculationLock(Base):
    """
    Per-job recalculation guard.

    A run owns the job while calculating is true. started_at doubles as a
    lease so a crashed worker does not block the job forever.
    """
    __tablename__ = 'match_calculation_locks'

    job_id = Column(Uuid, ForeignKey('jobs.job_id', ondelete='CASCADE'), primary_key=True)
    calculating = Column(Boolean, nullable=False, default=False)
    owner = Column(Text, nullable=True)
    started_at = Column(TIMESTAMP(timezone=True), nullable=True)
    finished_at = Column(TIMESTAMP(timezone=True), nullable=True)
