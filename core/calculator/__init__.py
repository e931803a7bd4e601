#!/usr/bin/env python3
"""
Batch Calculation Module - score, rank and persist a job's candidate pool.

- models.py: Snapshot and result structures
- ranking.py: Total ordering and dense ranks
- errors.py: Error taxonomy
- service.py: BatchCalculator (imports the database layer, import it directly)
"""

from core.calculator.errors import (
    CalculationError,
    JobNotFoundError,
    NoActiveRequirementsError,
    CalculationInProgressError,
    CalculationCancelledError,
    PersistenceError,
)
from core.calculator.models import (
    CandidateSummary,
    CandidatePoolSnapshot,
    ScoredCandidate,
    RankedMatch,
    RecalculationResult,
)
from core.calculator.ranking import rank_candidates

__all__ = [
    'CalculationError',
    'JobNotFoundError',
    'NoActiveRequirementsError',
    'CalculationInProgressError',
    'CalculationCancelledError',
    'PersistenceError',
    'CandidateSummary',
    'CandidatePoolSnapshot',
    'ScoredCandidate',
    'RankedMatch',
    'RecalculationResult',
    'rank_candidates',
]
