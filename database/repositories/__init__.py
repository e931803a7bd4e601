from database.repositories.base import BaseRepository
from database.repositories.job import JobRepository
from database.repositories.requirement import RequirementRepository
from database.repositories.candidate import CandidateRepository
from database.repositories.skill_score import SkillScoreRepository
from database.repositories.match import MatchRepository
from database.repositories.calculation_lock import CalculationLockRepository

__all__ = [
    'BaseRepository',
    'JobRepository',
    'RequirementRepository',
    'CandidateRepository',
    'SkillScoreRepository',
    'MatchRepository',
    'CalculationLockRepository',
]
