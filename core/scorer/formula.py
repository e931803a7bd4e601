#!/usr/bin/env python3
"""
Scoring Formula - Weighted partial-credit contribution and normalization.

Formula:
    contribution_r = weight_r * min(candidate_score_r / 100, 1.0)
    overall        = round(sum(contribution_r) / sum(weight_r) * 100, precision)

Absent or expired scores contribute 0. The result is clamped to [0, 100].
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

MAX_SCORE = 100.0


def contribution(weight: float, candidate_score: Optional[float]) -> float:
    """Weighted contribution of one requirement, proportional to raw skill strength."""
    if candidate_score is None:
        return 0.0
    strength = max(0.0, min(candidate_score / MAX_SCORE, 1.0))
    return weight * strength


def round_score(value: float, precision: int = 2) -> float:
    """Round half-up on the decimal representation, not the binary float."""
    quantum = Decimal(1).scaleb(-precision)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def normalize(total_contribution: float, total_weight: float, precision: int = 2) -> float:
    """
    Normalize summed contributions to a 0-100 score.

    Args:
        total_contribution: Sum of per-requirement contributions
        total_weight: Sum of requirement weights, must be positive
        precision: Decimal places to keep

    Returns:
        Score in [0, 100]
    """
    if total_weight <= 0:
        raise ValueError("total_weight must be positive")
    raw = total_contribution / total_weight * MAX_SCORE
    return max(0.0, min(MAX_SCORE, round_score(raw, precision)))
