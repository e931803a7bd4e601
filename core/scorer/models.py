#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring input and results.

These are plain dataclasses so they can cross thread and session
boundaries; repositories build them from ORM rows.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.utils import ensure_utc


@dataclass(frozen=True)
class SkillRequirement:
    """A (job, skill) requirement with weight, threshold and required flag."""
    skill_id: Any
    weight: float
    minimum_score: float
    required: bool
    skill_name: Optional[str] = None
    job_id: Any = None


@dataclass(frozen=True)
class SkillScore:
    """A candidate's proficiency score for one skill, valid until expires_at."""
    user_id: Any
    skill_id: Any
    score: float
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return ensure_utc(self.expires_at) > ensure_utc(now)


@dataclass
class BreakdownEntry:
    """Per-requirement explanation of a score."""
    skill_id: Any
    weight: float
    candidate_score: Optional[float]
    minimum_score: float
    required: bool
    met: bool
    skill_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'skillId': str(self.skill_id),
            'skillName': self.skill_name,
            'weight': self.weight,
            'candidateScore': self.candidate_score,
            'minimumScore': self.minimum_score,
            'required': self.required,
            'met': self.met,
        }


@dataclass
class ScoreResult:
    """Outcome of scoring one candidate against one job."""
    overall_score: float
    breakdown: List[BreakdownEntry] = field(default_factory=list)
    requirements_met: bool = False
    required_met_count: int = 0
    # Breakdown entries with met=True, optional absent skills included
    skills_met_count: int = 0

    def breakdown_dicts(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.breakdown]
