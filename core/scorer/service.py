#!/usr/bin/env python3
"""
Scoring Service - deterministic weighted skill scoring.

Maps (job requirements, one candidate's skill scores) to an overall score
on a 0-100 scale, a per-requirement breakdown and a requirements-met flag.

The service is a pure function of its inputs plus the `now` used for
expiry checks, so it is safe to call from many threads at once.
"""

from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional
import logging

from core.config_loader import ScorerConfig
from core.scorer import formula
from core.scorer.models import BreakdownEntry, ScoreResult, SkillRequirement, SkillScore
from core.utils import utcnow

logger = logging.getLogger(__name__)


class ZeroTotalWeightError(ValueError):
    """Raised when a job has no requirement with a positive weight."""


def scorable_requirements(requirements: Iterable[SkillRequirement]) -> List[SkillRequirement]:
    """Drop requirements whose weight is not positive."""
    kept = []
    for req in requirements:
        if req.weight is None or req.weight <= 0:
            logger.warning(
                f"Ignoring requirement for skill {req.skill_id} on job {req.job_id}: "
                f"non-positive weight {req.weight}"
            )
            continue
        kept.append(req)
    return kept


def order_requirements(requirements: Iterable[SkillRequirement]) -> List[SkillRequirement]:
    """Order by descending weight, ties broken by skill id ascending."""
    return sorted(requirements, key=lambda r: (-r.weight, str(r.skill_id)))


class ScoringService:
    """
    Scores one candidate against one job's requirements.

    Public API:
        score(requirements, candidate_scores, now) -> ScoreResult
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    def score(
        self,
        requirements: Iterable[SkillRequirement],
        candidate_scores: Mapping[Any, SkillScore],
        now: Optional[datetime] = None
    ) -> ScoreResult:
        """
        Score a candidate.

        Args:
            requirements: The job's skill requirements
            candidate_scores: skill_id -> SkillScore for this candidate; expired
                entries are treated exactly like missing ones
            now: Reference time for expiry checks (defaults to current UTC time)

        Returns:
            ScoreResult with overall score, ordered breakdown and met counts

        Raises:
            ZeroTotalWeightError: If no requirement has a positive weight
        """
        now = now or utcnow()
        reqs = order_requirements(scorable_requirements(requirements))
        total_weight = sum(r.weight for r in reqs)
        if not reqs or total_weight <= 0:
            raise ZeroTotalWeightError("No requirement with a positive weight to score against")

        breakdown = []
        total_contribution = 0.0
        required_met = 0
        all_required_met = True

        for req in reqs:
            skill_score = candidate_scores.get(req.skill_id)
            candidate_score = None
            if skill_score is not None and skill_score.is_valid(now):
                candidate_score = float(skill_score.score)

            if candidate_score is None:
                # Optional and absent contributes nothing but is not a failure
                met = not req.required
            else:
                met = candidate_score >= req.minimum_score

            if req.required:
                if met:
                    required_met += 1
                else:
                    all_required_met = False

            total_contribution += formula.contribution(req.weight, candidate_score)
            breakdown.append(BreakdownEntry(
                skill_id=req.skill_id,
                skill_name=req.skill_name,
                weight=req.weight,
                candidate_score=candidate_score,
                minimum_score=req.minimum_score,
                required=req.required,
                met=met,
            ))

        overall = formula.normalize(total_contribution, total_weight, self.config.score_precision)

        return ScoreResult(
            overall_score=overall,
            breakdown=breakdown,
            requirements_met=all_required_met,
            required_met_count=required_met,
            skills_met_count=sum(1 for entry in breakdown if entry.met),
        )
