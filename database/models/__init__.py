from .base import Base, JSONType
from .user import User, CandidateProfile
from .skill import Skill, UserSkillScore
from .job import Company, CompanyUser, Job, JobSkill
from .match import JobMatch, MatchCalculationLock, MATCH_STATUSES

__all__ = [
    'Base',
    'JSONType',
    'User',
    'CandidateProfile',
    'Skill',
    'UserSkillScore',
    'Company',
    'CompanyUser',
    'Job',
    'JobSkill',
    'JobMatch',
    'MatchCalculationLock',
    'MATCH_STATUSES',
]
