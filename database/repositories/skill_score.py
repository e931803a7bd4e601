import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable

from sqlalchemy import select

from core.scorer.models import SkillScore
from core.utils import ensure_utc, to_float
from database.models import User, CandidateProfile, UserSkillScore
from database.repositories.base import BaseRepository
from database.repositories.candidate import eligibility_conditions

logger = logging.getLogger(__name__)


class SkillScoreRepository(BaseRepository):
    def get_valid_scores(
        self,
        skill_ids: Iterable[Any],
        now: datetime,
        exclude_private: bool = True,
        yield_per: int = 1000
    ) -> Dict[Any, Dict[Any, SkillScore]]:
        """
        Load every eligible candidate's valid scores for the given skills.

        One set-oriented query for the whole pool, streamed in chunks.

        Returns:
            user_id -> skill_id -> SkillScore
        """
        skill_ids = list(skill_ids)
        if not skill_ids:
            return {}

        stmt = (
            select(
                UserSkillScore.user_id,
                UserSkillScore.skill_id,
                UserSkillScore.score,
                UserSkillScore.expires_at,
            )
            .join(User, User.user_id == UserSkillScore.user_id)
            .join(CandidateProfile, CandidateProfile.user_id == User.user_id)
            .where(
                UserSkillScore.skill_id.in_(skill_ids),
                UserSkillScore.expires_at > now,
                *eligibility_conditions(exclude_private)
            )
            .execution_options(yield_per=yield_per)
        )

        scores: Dict[Any, Dict[Any, SkillScore]] = defaultdict(dict)
        count = 0
        for user_id, skill_id, score, expires_at in self.db.execute(stmt):
            scores[user_id][skill_id] = SkillScore(
                user_id=user_id,
                skill_id=skill_id,
                score=to_float(score),
                expires_at=ensure_utc(expires_at),
            )
            count += 1

        logger.debug(f"Loaded {count} valid skill scores for {len(scores)} candidates")
        return dict(scores)
