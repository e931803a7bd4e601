#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field


class StatusUpdateRequest(BaseModel):
    """Request to set a match's workflow status."""
    status: str = Field(
        ...,
        description="One of: matched, viewed, contacted, shortlisted, rejected, hired"
    )
