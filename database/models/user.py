import uuid

from sqlalchemy import Column, Text, Boolean, Integer, TIMESTAMP, ForeignKey, Uuid, CheckConstraint, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    """
    Account owned by the auth collaborator. Read-only for matching.
    """
    __tablename__ = 'users'

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    role = Column(Text, nullable=False)  # candidate|employer|admin
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    profile = relationship("CandidateProfile", back_populates="user", uselist=False)

    __table_args__ = (
        CheckConstraint("role IN ('candidate', 'employer', 'admin')", name='ck_users_role'),
        Index('idx_users_role', 'role'),
    )


class CandidateProfile(Base):
    """
    Candidate profile owned by the profile collaborator.

    profile_visibility is passed through to employer listings:
    public | private | anonymous
    """
    __tablename__ = 'candidate_profiles'

    profile_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False, unique=True)
    headline = Column(Text)
    years_experience = Column(Integer)
    city = Column(Text)
    state = Column(Text)
    remote_preference = Column(Text)
    profile_visibility = Column(Text, nullable=False, default='public')
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="profile")

    __table_args__ = (
        CheckConstraint(
            "profile_visibility IN ('public', 'private', 'anonymous')",
            name='ck_candidate_profiles_visibility'
        ),
    )
