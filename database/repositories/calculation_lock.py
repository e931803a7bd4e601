import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import select, update, or_

from database.models import MatchCalculationLock
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CalculationLockRepository(BaseRepository):
    """
    Per-job recalculation guard held in the data store.

    Acquisition is a guarded UPDATE, so it holds across processes and hosts.
    Callers commit right after acquire/release so other workers see it.
    """

    def try_acquire(
        self,
        job_id: Any,
        owner: str,
        now: datetime,
        stale_after_seconds: int = 600
    ) -> bool:
        """
        Claim the job for `owner`.

        Returns:
            True if claimed, False if another run holds a live claim
        """
        seed = self.upsert_insert(MatchCalculationLock.__table__).values(
            job_id=job_id,
            calculating=False,
        ).on_conflict_do_nothing(index_elements=['job_id'])
        self.db.execute(seed)

        stale_cutoff = now - timedelta(seconds=stale_after_seconds)
        result = self.db.execute(
            update(MatchCalculationLock)
            .where(
                MatchCalculationLock.job_id == job_id,
                or_(
                    MatchCalculationLock.calculating.is_(False),
                    MatchCalculationLock.started_at < stale_cutoff,
                )
            )
            .values(calculating=True, owner=owner, started_at=now, finished_at=None)
            .execution_options(synchronize_session=False)
        )
        acquired = result.rowcount == 1
        if not acquired:
            logger.info(f"Calculation lock for job {job_id} is held by another run")
        return acquired

    def renew(self, job_id: Any, owner: str, now: datetime) -> bool:
        """
        Confirm `owner` still holds the claim and restart its lease.

        Run inside the write transaction: on PostgreSQL the updated row stays
        locked until commit, so a takeover cannot slip in before the write.

        Returns:
            False if the claim was lost (e.g. taken over as stale)
        """
        result = self.db.execute(
            update(MatchCalculationLock)
            .where(
                MatchCalculationLock.job_id == job_id,
                MatchCalculationLock.owner == owner,
                MatchCalculationLock.calculating.is_(True),
            )
            .values(started_at=now)
            .execution_options(synchronize_session=False)
        )
        renewed = result.rowcount == 1
        if not renewed:
            logger.warning(f"Calculation lock for job {job_id} is no longer owned by {owner}")
        return renewed

    def release(self, job_id: Any, owner: str, now: datetime) -> bool:
        result = self.db.execute(
            update(MatchCalculationLock)
            .where(
                MatchCalculationLock.job_id == job_id,
                MatchCalculationLock.owner == owner,
                MatchCalculationLock.calculating.is_(True),
            )
            .values(calculating=False, owner=None, finished_at=now)
            .execution_options(synchronize_session=False)
        )
        released = result.rowcount == 1
        if not released:
            logger.warning(f"Calculation lock for job {job_id} was no longer owned by {owner}")
        return released

    def get_lock(self, job_id: Any) -> Optional[MatchCalculationLock]:
        stmt = (
            select(MatchCalculationLock)
            .where(MatchCalculationLock.job_id == job_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()
