import logging

from sqlalchemy.orm import Session

from database.repositories import (
    JobRepository,
    RequirementRepository,
    CandidateRepository,
    SkillScoreRepository,
    MatchRepository,
    CalculationLockRepository,
)

logger = logging.getLogger(__name__)


class MatchingRepository:
    """Facade over the per-store repositories sharing one Session."""

    def __init__(self, db: Session):
        self.db = db
        self.jobs = JobRepository(db)
        self.requirements = RequirementRepository(db)
        self.candidates = CandidateRepository(db)
        self.skill_scores = SkillScoreRepository(db)
        self.matches = MatchRepository(db)
        self.locks = CalculationLockRepository(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
