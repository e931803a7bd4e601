import logging
from typing import Any, Optional

from sqlalchemy import select

from database.models import Job, CompanyUser
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class JobRepository(BaseRepository):
    def get_job(self, job_id: Any) -> Optional[Job]:
        stmt = select(Job).where(Job.job_id == job_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def exists(self, job_id: Any) -> bool:
        stmt = select(Job.job_id).where(Job.job_id == job_id)
        return self.db.execute(stmt).first() is not None

    def get_job_for_employer(self, job_id: Any, employer_id: Any) -> Optional[Job]:
        """Return the job only if the employer belongs to the owning company."""
        stmt = (
            select(Job)
            .join(CompanyUser, CompanyUser.company_id == Job.company_id)
            .where(Job.job_id == job_id, CompanyUser.user_id == employer_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()
