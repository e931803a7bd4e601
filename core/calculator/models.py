#!/usr/bin/env python3
"""
Calculator Models - Snapshot and result structures for batch calculation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.scorer.models import ScoreResult, SkillRequirement, SkillScore


@dataclass(frozen=True)
class CandidateSummary:
    """Minimal identity of an eligible candidate."""
    user_id: Any
    created_at: datetime
    profile_visibility: str = 'public'


@dataclass
class CandidatePoolSnapshot:
    """
    Everything one recalculation scores against, captured once.

    Scoring never re-queries the store, so a run is a pure function of
    this snapshot.
    """
    job_id: Any
    taken_at: datetime
    requirements: List[SkillRequirement]
    candidates: List[CandidateSummary]
    # user_id -> skill_id -> SkillScore
    scores: Dict[Any, Dict[Any, SkillScore]] = field(default_factory=dict)

    def scores_for(self, user_id: Any) -> Dict[Any, SkillScore]:
        return self.scores.get(user_id, {})


@dataclass
class ScoredCandidate:
    candidate: CandidateSummary
    result: ScoreResult


@dataclass
class RankedMatch:
    """A scored candidate with its dense rank for the job."""
    user_id: Any
    rank: int
    result: ScoreResult


@dataclass
class RecalculationResult:
    job_id: Any
    matches_written: int
    duration_ms: int
    top_matches: List[RankedMatch] = field(default_factory=list)
    calculated_at: Optional[datetime] = None
