#!/usr/bin/env python3
"""
Scoring Module - weighted skill scoring for one candidate against one job.

Public API:
- ScoringService: Scores a candidate's valid skill scores against requirements
- SkillRequirement, SkillScore: Scoring inputs
- ScoreResult, BreakdownEntry: Scoring outputs

Modules:
- models.py: Data structures
- formula.py: Contribution and normalization formula
- service.py: ScoringService
"""

from core.scorer.models import BreakdownEntry, ScoreResult, SkillRequirement, SkillScore
from core.scorer.service import ScoringService, ZeroTotalWeightError

__all__ = [
    'ScoringService',
    'ZeroTotalWeightError',
    'SkillRequirement',
    'SkillScore',
    'ScoreResult',
    'BreakdownEntry',
]
