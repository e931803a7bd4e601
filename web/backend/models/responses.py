#!/usr/bin/env python3
"""
Response models for API endpoints.

Fields are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional


class ApiModel(BaseModel):
    """Base model serialised with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SkillBreakdownItem(ApiModel):
    """One requirement's contribution to a match score."""
    skill_id: str
    skill_name: Optional[str] = None
    weight: float
    candidate_score: Optional[float] = None
    minimum_score: float
    required: bool
    met: bool


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int


class TopMatch(ApiModel):
    """Preview entry in a calculation summary."""
    user_id: str
    rank: int
    overall_score: float = Field(ge=0, le=100)
    requirements_met: bool


class CalculationSummary(ApiModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "jobId": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                "matchesWritten": 2,
                "totalMatches": 2,
                "durationMs": 41,
                "calculatedAt": "2026-02-01T12:00:00+00:00",
                "topMatches": [
                    {"userId": "550e8400-e29b-41d4-a716-446655440000", "rank": 1,
                     "overallScore": 88.0, "requirementsMet": True}
                ]
            }
        }
    )

    job_id: str
    matches_written: int
    total_matches: int
    duration_ms: int
    calculated_at: Optional[str] = None
    top_matches: List[TopMatch] = Field(default_factory=list)


class CalculateResponse(ApiModel):
    success: bool = True
    data: CalculationSummary


class CandidateProfileSummary(ApiModel):
    headline: Optional[str] = None
    years_experience: Optional[int] = None
    city: Optional[str] = None
    state: Optional[str] = None
    remote_preference: Optional[str] = None


class RankedCandidate(ApiModel):
    """A candidate in a job's ranked listing (employer view)."""
    match_id: str
    user_id: str
    rank: int
    overall_score: float = Field(ge=0, le=100)
    requirements_met: bool
    status: str
    viewed_at: Optional[str] = None
    contacted_at: Optional[str] = None
    # Opaque visibility token passed through from the candidate profile
    profile_visibility: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    profile: CandidateProfileSummary
    skill_breakdown: List[SkillBreakdownItem] = Field(default_factory=list)
    created_at: Optional[str] = None
    calculated_at: Optional[str] = None


class JobCandidatesData(ApiModel):
    job_id: str
    job_title: str
    candidates: List[RankedCandidate]


class JobCandidatesResponse(ApiModel):
    success: bool = True
    data: JobCandidatesData
    pagination: Pagination


class JobSummary(ApiModel):
    job_id: str
    title: str
    company_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    remote_option: Optional[str] = None
    employment_type: Optional[str] = None
    experience_level: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    status: str


class CandidateMatch(ApiModel):
    """A stored match seen from the candidate's side."""
    match_id: str
    job: JobSummary
    overall_score: float = Field(ge=0, le=100)
    rank: Optional[int] = None
    requirements_met: bool
    status: str
    skill_breakdown: List[SkillBreakdownItem] = Field(default_factory=list)
    calculated_at: Optional[str] = None


class CandidateMatchesResponse(ApiModel):
    success: bool = True
    data: List[CandidateMatch]


class BrowseJob(ApiModel):
    """An active job with the candidate's stored score."""
    job: JobSummary
    match_id: str
    overall_score: float = Field(ge=0, le=100)
    requirements_met: bool
    required_skills_met: int
    required_skills_total: int
    skill_breakdown: List[SkillBreakdownItem] = Field(default_factory=list)


class BrowseJobsResponse(ApiModel):
    success: bool = True
    data: List[BrowseJob]
    pagination: Pagination


class MatchRecord(ApiModel):
    match_id: str
    job_id: str
    user_id: str
    overall_score: float = Field(ge=0, le=100)
    rank: Optional[int] = None
    requirements_met: bool
    status: str
    viewed_at: Optional[str] = None
    contacted_at: Optional[str] = None
    skill_breakdown: List[SkillBreakdownItem] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    calculated_at: Optional[str] = None


class MatchResponse(ApiModel):
    success: bool = True
    data: MatchRecord
