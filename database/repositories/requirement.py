import logging
from typing import Any, List

from sqlalchemy import select

from core.scorer.models import SkillRequirement
from core.utils import to_float
from database.models import JobSkill, Skill
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class RequirementRepository(BaseRepository):
    def get_for_job(self, job_id: Any) -> List[SkillRequirement]:
        """
        Load a job's active skill requirements in one query.

        Requirements on skills retired from the registry are not active.
        """
        stmt = (
            select(JobSkill, Skill.name)
            .join(Skill, Skill.skill_id == JobSkill.skill_id)
            .where(JobSkill.job_id == job_id, Skill.active.is_(True))
        )
        return [
            SkillRequirement(
                skill_id=job_skill.skill_id,
                skill_name=skill_name,
                weight=to_float(job_skill.weight),
                minimum_score=to_float(job_skill.minimum_score),
                required=bool(job_skill.required),
                job_id=job_skill.job_id,
            )
            for job_skill, skill_name in self.db.execute(stmt).all()
        ]
