#!/usr/bin/env python3
"""
Ranking - total ordering and dense rank assignment.

Order, highest first:
1. overall score
2. required skills met
3. any skills met (with a valid score behind them)
4. account creation time, earlier first
5. user id, ascending

The last key makes the order total, so ranks are reproducible for
unchanged inputs.
"""

from typing import List, Tuple

from core.calculator.models import RankedMatch, ScoredCandidate
from core.utils import ensure_utc


def ranking_key(scored: ScoredCandidate) -> Tuple:
    result = scored.result
    return (
        -result.overall_score,
        -result.required_met_count,
        -result.skills_met_count,
        ensure_utc(scored.candidate.created_at),
        str(scored.candidate.user_id),
    )


def rank_candidates(scored: List[ScoredCandidate]) -> List[RankedMatch]:
    """Sort scored candidates and assign dense ranks 1..N."""
    ordered = sorted(scored, key=ranking_key)
    return [
        RankedMatch(user_id=s.candidate.user_id, rank=position, result=s.result)
        for position, s in enumerate(ordered, start=1)
    ]
