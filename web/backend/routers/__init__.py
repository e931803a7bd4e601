"""API route handlers."""

from .matching import router as matching_router
from .candidate import router as candidate_router
from .matches import router as matches_router
