#!/usr/bin/env python3
"""
Utility functions for the web application.
"""

import math
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional
from datetime import datetime

from core.utils import ensure_utc
from .exceptions import ServiceException


def safe_float(value: Optional[Any], default: float = 0.0) -> float:
    """
    Safely convert value to float.

    Args:
        value: Value to convert (can be Decimal, int, float, or None).
        default: Default value if conversion fails or value is None.
    """
    if value is None:
        return default

    if isinstance(value, Decimal):
        return float(value)

    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def optional_float(value: Optional[Any]) -> Optional[float]:
    return None if value is None else safe_float(value)


def safe_datetime_iso(dt: Optional[datetime]) -> Optional[str]:
    """Convert a datetime to an ISO string in UTC."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()


def parse_uuid(value: str, field: str) -> uuid.UUID:
    """Validate a path parameter as a UUID."""
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError):
        raise ServiceException(
            f"Invalid {field} format: {value}. Must be a valid UUID.",
            code='VALIDATION_ERROR'
        )


def breakdown_items(raw: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Normalise a stored skill_breakdown JSON list for response models."""
    items = []
    for entry in raw or []:
        items.append({
            'skill_id': str(entry.get('skillId')),
            'skill_name': entry.get('skillName'),
            'weight': safe_float(entry.get('weight')),
            'candidate_score': optional_float(entry.get('candidateScore')),
            'minimum_score': safe_float(entry.get('minimumScore')),
            'required': bool(entry.get('required')),
            'met': bool(entry.get('met')),
        })
    return items


def pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'total_pages': math.ceil(total / limit) if limit else 0,
    }
