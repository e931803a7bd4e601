#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Run only tests that need no database
    python -m pytest tests/ -v -m "not db"

Database tests run against SQLite built from the models (the models use
portable column types). Set TEST_DATABASE_URL to run the same tests
against PostgreSQL instead.
"""

import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from database.models import (
    Base,
    User,
    CandidateProfile,
    Skill,
    UserSkillScore,
    Company,
    CompanyUser,
    Job,
    JobSkill,
    JobMatch,
)

TEST_DB_URL = os.environ.get("TEST_DATABASE_URL")

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def create_test_engine(path: Optional[str] = None) -> Engine:
    """
    Engine with every table created.

    Args:
        path: SQLite file for tests that use several connections from
            several threads; in-memory with one shared connection otherwise.
    """
    if TEST_DB_URL:
        engine = create_engine(TEST_DB_URL)
    elif path:
        engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"check_same_thread": False, "timeout": 30}
        )
    else:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    return engine


def create_test_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


class MatchingDataBuilder:
    """Inserts collaborator-owned rows (users, skills, jobs, scores) for tests."""

    def __init__(self, session: Session):
        self.session = session

    def company(self, name: str = "Acme") -> Company:
        company = Company(company_id=uuid.uuid4(), name=name)
        self.session.add(company)
        self.session.flush()
        return company

    def employer(self, company: Company, email: Optional[str] = None) -> User:
        user = User(
            user_id=uuid.uuid4(),
            email=email or f"employer-{uuid.uuid4().hex[:8]}@example.com",
            first_name="Erin",
            last_name="Employer",
            role="employer",
            active=True,
            created_at=NOW - timedelta(days=100),
        )
        self.session.add(user)
        self.session.flush()
        self.session.add(CompanyUser(company_id=company.company_id, user_id=user.user_id))
        self.session.flush()
        return user

    def candidate(
        self,
        first_name: str = "Casey",
        created_at: Optional[datetime] = None,
        visibility: str = "public",
        active: bool = True,
        headline: str = "Engineer"
    ) -> User:
        user = User(
            user_id=uuid.uuid4(),
            email=f"{first_name.lower()}-{uuid.uuid4().hex[:8]}@example.com",
            first_name=first_name,
            last_name="Candidate",
            role="candidate",
            active=active,
            created_at=created_at or NOW - timedelta(days=30),
        )
        self.session.add(user)
        self.session.flush()
        self.session.add(CandidateProfile(
            user_id=user.user_id,
            headline=headline,
            years_experience=5,
            city="Austin",
            state="TX",
            remote_preference="hybrid",
            profile_visibility=visibility,
        ))
        self.session.flush()
        return user

    def skill(self, name: str, active: bool = True) -> Skill:
        skill = Skill(skill_id=uuid.uuid4(), name=name, category="technical", active=active)
        self.session.add(skill)
        self.session.flush()
        return skill

    def job(self, company: Company, title: str = "Backend Engineer", status: str = "active") -> Job:
        job = Job(
            job_id=uuid.uuid4(),
            company_id=company.company_id,
            title=title,
            city="Austin",
            state="TX",
            remote_option="hybrid",
            salary_min=100000,
            salary_max=150000,
            employment_type="full-time",
            experience_level="mid",
            status=status,
        )
        self.session.add(job)
        self.session.flush()
        return job

    def requirement(
        self,
        job: Job,
        skill: Skill,
        weight: float,
        minimum_score: float = 60,
        required: bool = True
    ) -> JobSkill:
        req = JobSkill(
            job_id=job.job_id,
            skill_id=skill.skill_id,
            weight=weight,
            minimum_score=minimum_score,
            required=required,
        )
        self.session.add(req)
        self.session.flush()
        return req

    def score(
        self,
        user: User,
        skill: Skill,
        score: float,
        expires_at: Optional[datetime] = None
    ) -> UserSkillScore:
        row = UserSkillScore(
            user_id=user.user_id,
            skill_id=skill.skill_id,
            score=score,
            expires_at=expires_at or datetime.now(timezone.utc) + timedelta(days=180),
        )
        self.session.add(row)
        self.session.flush()
        return row

    def match(self, job: Job, user: User, overall_score: float = 50.0, rank: Optional[int] = 1,
              status: str = "matched") -> JobMatch:
        match = JobMatch(
            match_id=uuid.uuid4(),
            job_id=job.job_id,
            user_id=user.user_id,
            overall_score=overall_score,
            match_rank=rank,
            skill_breakdown=[],
            requirements_met=False,
            status=status,
        )
        self.session.add(match)
        self.session.flush()
        return match
