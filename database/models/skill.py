import uuid

from sqlalchemy import Column, Text, Boolean, Numeric, TIMESTAMP, ForeignKey, Uuid, UniqueConstraint, Index, func

from .base import Base


class Skill(Base):
    """Canonical skill identity from the skill registry."""
    __tablename__ = 'skills'

    skill_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    category = Column(Text, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index('idx_skills_active', 'active'),
    )


class UserSkillScore(Base):
    """
    A candidate's current score (0-100) for one skill.

    One live value per (user, skill). Rows past expires_at are kept for
    display but never contribute to a match.
    """
    __tablename__ = 'user_skill_scores'

    user_skill_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    skill_id = Column(Uuid, ForeignKey('skills.skill_id', ondelete='CASCADE'), nullable=False)
    score = Column(Numeric(5, 2), nullable=False)
    percentile = Column(Numeric(5, 2))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'skill_id', name='uq_user_skill_scores_user_skill'),
        Index('idx_user_skill_scores_skill_expires', 'skill_id', 'expires_at'),
        Index('idx_user_skill_scores_user_skill_valid', 'user_id', 'skill_id', 'expires_at'),
    )
