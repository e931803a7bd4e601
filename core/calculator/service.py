#!/usr/bin/env python3
"""
Batch Calculator - score, rank and persist one job's candidate pool.

A run is:
1. Claim the per-job calculation lock (held in the data store)
2. Capture a snapshot: active requirements, eligible candidates and their
   valid skill scores, all evaluated against a single `now`
3. Score every candidate (fanned out over a bounded thread pool)
4. Rank with a total ordering and dense ranks
5. Write all match rows in one transaction
6. Release the lock

Only one run per job may hold the lock; a concurrent request is rejected
with CalculationInProgressError.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional
import logging
import os
import socket
import threading
import time
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core.calculator.errors import (
    CalculationCancelledError,
    CalculationInProgressError,
    JobNotFoundError,
    NoActiveRequirementsError,
    PersistenceError,
)
from core.calculator.models import (
    CandidatePoolSnapshot,
    CandidateSummary,
    RankedMatch,
    RecalculationResult,
    ScoredCandidate,
)
from core.calculator.ranking import rank_candidates
from core.config_loader import CalculatorConfig
from core.scorer import ScoringService, ZeroTotalWeightError
from core.scorer.service import scorable_requirements
from core.utils import utcnow
from database.uow import matching_uow

logger = logging.getLogger(__name__)

TOP_MATCHES_PREVIEW = 10


def _lock_owner() -> str:
    return f"{socket.gethostname()}:{os.getpid()}:{uuid.uuid4().hex[:8]}"


class BatchCalculator:
    """
    Recalculates the ranked matches of one job.

    Public API:
        recalculate(job_id, stop_event) -> RecalculationResult
        load_snapshot(job_id) -> CandidatePoolSnapshot
        score_pool(snapshot, stop_event) -> List[ScoredCandidate]
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        scoring_service: Optional[ScoringService] = None,
        config: Optional[CalculatorConfig] = None
    ):
        self.session_factory = session_factory
        self.scoring_service = scoring_service or ScoringService()
        self.config = config or CalculatorConfig()

    def recalculate(
        self,
        job_id: Any,
        stop_event: Optional[threading.Event] = None
    ) -> RecalculationResult:
        """
        Recalculate and persist the full ranking for a job.

        Args:
            job_id: Job to recalculate
            stop_event: Set by the caller to abandon the run; checked between
                phases and scoring chunks

        Returns:
            RecalculationResult with write count, duration and top matches

        Raises:
            JobNotFoundError: Job does not exist
            CalculationInProgressError: Another run holds the job's lock, or took
                it over as stale before this run wrote
            NoActiveRequirementsError: Job has nothing to score against
            CalculationCancelledError: stop_event was set before the write
            PersistenceError: Batch write failed and was rolled back
        """
        if stop_event is None:
            stop_event = threading.Event()

        started = time.monotonic()
        owner = _lock_owner()

        with matching_uow(self.session_factory) as repo:
            if not repo.jobs.exists(job_id):
                raise JobNotFoundError(f"Job {job_id} not found")
            acquired = repo.locks.try_acquire(
                job_id, owner, utcnow(), self.config.lock_stale_after_seconds
            )

        if not acquired:
            raise CalculationInProgressError(
                f"A match calculation is already running for job {job_id}"
            )

        logger.info(f"Starting match calculation for job {job_id}")
        try:
            return self._run(job_id, owner, stop_event, started)
        finally:
            self._release(job_id, owner)

    def _run(
        self,
        job_id: Any,
        owner: str,
        stop_event: threading.Event,
        started: float
    ) -> RecalculationResult:
        self._check_cancelled(job_id, stop_event, "loading")
        snapshot = self.load_snapshot(job_id)
        if not snapshot.requirements:
            raise NoActiveRequirementsError(f"Job {job_id} has no active skill requirements")

        logger.info(
            f"Job {job_id}: scoring {len(snapshot.candidates)} candidates "
            f"against {len(snapshot.requirements)} requirements"
        )

        scored = self.score_pool(snapshot, stop_event)
        ranked = rank_candidates(scored)

        self._check_cancelled(job_id, stop_event, "writing")
        calculated_at = utcnow()
        written = self._write(job_id, owner, ranked, calculated_at)

        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(f"Match calculation for job {job_id} wrote {written} matches in {duration_ms}ms")

        return RecalculationResult(
            job_id=job_id,
            matches_written=written,
            duration_ms=duration_ms,
            top_matches=ranked[:TOP_MATCHES_PREVIEW],
            calculated_at=calculated_at,
        )

    def load_snapshot(self, job_id: Any) -> CandidatePoolSnapshot:
        """Capture requirements, pool and valid scores against one `now`."""
        now = utcnow()
        exclude_private = self.config.exclude_private_profiles

        with matching_uow(self.session_factory) as repo:
            requirements = scorable_requirements(repo.requirements.get_for_job(job_id))
            if not requirements:
                return CandidatePoolSnapshot(job_id=job_id, taken_at=now, requirements=[], candidates=[])

            candidates = repo.candidates.get_eligible_candidates(exclude_private)
            scores = repo.skill_scores.get_valid_scores(
                [r.skill_id for r in requirements],
                now,
                exclude_private=exclude_private,
                yield_per=self.config.write_batch_size,
            )

        return CandidatePoolSnapshot(
            job_id=job_id,
            taken_at=now,
            requirements=requirements,
            candidates=candidates,
            scores=scores,
        )

    def score_pool(
        self,
        snapshot: CandidatePoolSnapshot,
        stop_event: Optional[threading.Event] = None
    ) -> List[ScoredCandidate]:
        """Score every candidate in the snapshot, preserving snapshot order."""
        if stop_event is None:
            stop_event = threading.Event()

        size = self.config.scoring_chunk_size
        chunks = [
            snapshot.candidates[i:i + size]
            for i in range(0, len(snapshot.candidates), size)
        ]
        if not chunks:
            return []

        scored: List[ScoredCandidate] = []
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = [executor.submit(self._score_chunk, snapshot, chunk) for chunk in chunks]
            try:
                for future in futures:
                    self._check_cancelled(snapshot.job_id, stop_event, "scoring")
                    scored.extend(future.result())
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

        return scored

    def _score_chunk(
        self,
        snapshot: CandidatePoolSnapshot,
        chunk: List[CandidateSummary]
    ) -> List[ScoredCandidate]:
        results = []
        for candidate in chunk:
            try:
                result = self.scoring_service.score(
                    snapshot.requirements,
                    snapshot.scores_for(candidate.user_id),
                    now=snapshot.taken_at,
                )
            except ZeroTotalWeightError as e:
                raise NoActiveRequirementsError(str(e)) from e
            results.append(ScoredCandidate(candidate=candidate, result=result))
        return results

    def _write(self, job_id: Any, owner: str, ranked: List[RankedMatch], calculated_at) -> int:
        try:
            with matching_uow(self.session_factory) as repo:
                # A run that outlived its lease may have been taken over
                if not repo.locks.renew(job_id, owner, calculated_at):
                    raise CalculationInProgressError(
                        f"Match calculation for job {job_id} lost its lock to another run"
                    )
                return repo.matches.apply_rankings(
                    job_id, ranked, calculated_at, batch_size=self.config.write_batch_size
                )
        except SQLAlchemyError as e:
            logger.error(f"Failed to write matches for job {job_id}, batch rolled back: {e}")
            raise PersistenceError(f"Failed to persist matches for job {job_id}") from e

    def _release(self, job_id: Any, owner: str) -> None:
        try:
            with matching_uow(self.session_factory) as repo:
                repo.locks.release(job_id, owner, utcnow())
        except SQLAlchemyError as e:
            # The lease expires after lock_stale_after_seconds
            logger.error(f"Failed to release calculation lock for job {job_id}: {e}")

    @staticmethod
    def _check_cancelled(job_id: Any, stop_event: threading.Event, phase: str) -> None:
        if stop_event.is_set():
            logger.warning(f"Match calculation for job {job_id} cancelled before {phase}")
            raise CalculationCancelledError(f"Match calculation for job {job_id} was cancelled")
