import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from core.calculator.models import CandidateSummary
from core.utils import ensure_utc
from database.models import User, CandidateProfile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

VISIBILITY_PUBLIC = 'public'
VISIBILITY_PRIVATE = 'private'
VISIBILITY_ANONYMOUS = 'anonymous'


def eligibility_conditions(exclude_private: bool = True) -> list:
    """WHERE conditions for the eligible pool; callers join users to candidate_profiles."""
    conditions = [
        User.role == 'candidate',
        User.active.is_(True),
    ]
    if exclude_private:
        conditions.append(CandidateProfile.profile_visibility != VISIBILITY_PRIVATE)
    return conditions


class CandidateRepository(BaseRepository):
    def get_eligible_candidates(self, exclude_private: bool = True) -> List[CandidateSummary]:
        stmt = (
            select(User.user_id, User.created_at, CandidateProfile.profile_visibility)
            .join(CandidateProfile, CandidateProfile.user_id == User.user_id)
            .where(*eligibility_conditions(exclude_private))
        )
        return [
            CandidateSummary(
                user_id=user_id,
                created_at=ensure_utc(created_at),
                profile_visibility=visibility or VISIBILITY_PUBLIC,
            )
            for user_id, created_at, visibility in self.db.execute(stmt).all()
        ]

    @staticmethod
    def display_fields(user: User, profile: Optional[CandidateProfile]) -> Dict[str, Any]:
        """
        Candidate display fields for employer listings.

        Anonymous profiles keep their professional fields but identity
        (name, email) is withheld until revealed.
        """
        visibility = profile.profile_visibility if profile is not None else VISIBILITY_PUBLIC
        anonymous = visibility == VISIBILITY_ANONYMOUS
        return {
            'profile_visibility': visibility,
            'first_name': None if anonymous else user.first_name,
            'last_name': None if anonymous else user.last_name,
            'email': None if anonymous else user.email,
            'headline': profile.headline if profile is not None else None,
            'years_experience': profile.years_experience if profile is not None else None,
            'city': profile.city if profile is not None else None,
            'state': profile.state if profile is not None else None,
            'remote_preference': profile.remote_preference if profile is not None else None,
        }
