#!/usr/bin/env python3
"""
Workflow State Tracker - employer-driven match status lifecycle.

Status never changes on recalculation; only employer actions move it.
"""

from core.workflow.errors import WorkflowError, MatchNotFoundError, InvalidStatusError
from core.workflow.tracker import (
    WorkflowTracker,
    STATUS_MATCHED,
    STATUS_VIEWED,
    STATUS_CONTACTED,
    STATUS_SHORTLISTED,
    STATUS_REJECTED,
    STATUS_HIRED,
    VALID_STATUSES,
    VIEW_PROMOTES_FROM,
    CONTACT_PROMOTES_FROM,
)

__all__ = [
    'WorkflowError',
    'MatchNotFoundError',
    'InvalidStatusError',
    'WorkflowTracker',
    'STATUS_MATCHED',
    'STATUS_VIEWED',
    'STATUS_CONTACTED',
    'STATUS_SHORTLISTED',
    'STATUS_REJECTED',
    'STATUS_HIRED',
    'VALID_STATUSES',
    'VIEW_PROMOTES_FROM',
    'CONTACT_PROMOTES_FROM',
]
