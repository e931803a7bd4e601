"""Business logic services."""

from .calculation_service import CalculationService
from .match_service import MatchService
