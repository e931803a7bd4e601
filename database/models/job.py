import uuid

from sqlalchemy import Column, Integer, Text, Boolean, Numeric, TIMESTAMP, ForeignKey, Uuid, UniqueConstraint, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class Company(Base):
    __tablename__ = 'companies'

    company_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    industry = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())


class CompanyUser(Base):
    """Employer membership in a company; grants access to its jobs."""
    __tablename__ = 'company_users'

    company_id = Column(Uuid, ForeignKey('companies.company_id', ondelete='CASCADE'), primary_key=True)
    user_id = Column(Uuid, ForeignKey('users.user_id', ondelete='CASCADE'), primary_key=True)


class Job(Base):
    """Job posting owned by the job management collaborator."""
    __tablename__ = 'jobs'

    job_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(Uuid, ForeignKey('companies.company_id', ondelete='CASCADE'), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text)
    city = Column(Text)
    state = Column(Text)
    remote_option = Column(Text)
    salary_min = Column(Integer)
    salary_max = Column(Integer)
    employment_type = Column(Text)
    experience_level = Column(Text)
    status = Column(Text, nullable=False, default='draft')  # draft|active|closed|cancelled
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    company = relationship("Company")
    skills = relationship("JobSkill", back_populates="job", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_jobs_company_id', 'company_id'),
        Index('idx_jobs_status', 'status'),
    )


class JobSkill(Base):
    """
    Weighted skill requirement of a job.

    weight is in (0, 1] and need not sum to 1 across a job.
    """
    __tablename__ = 'job_skills'

    job_skill_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('jobs.job_id', ondelete='CASCADE'), nullable=False)
    skill_id = Column(Uuid, ForeignKey('skills.skill_id', ondelete='CASCADE'), nullable=False)
    weight = Column(Numeric(3, 2), nullable=False, default=1.0)
    minimum_score = Column(Numeric(5, 2), nullable=False, default=60.0)
    required = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    job = relationship("Job", back_populates="skills")
    skill = relationship("Skill")

    __table_args__ = (
        UniqueConstraint('job_id', 'skill_id', name='uq_job_skills_job_skill'),
        Index('idx_job_skills_job_id', 'job_id'),
    )
