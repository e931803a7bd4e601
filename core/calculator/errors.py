"""Batch calculation error taxonomy.

Input errors (JobNotFoundError, NoActiveRequirementsError) are reported
synchronously and never retried. CalculationInProgressError is a
contention signal the caller may retry. PersistenceError means the batch
write was rolled back and no partial ranking is visible.
"""


class CalculationError(Exception):
    """Base class for batch calculation failures."""
    code = 'INTERNAL_ERROR'


class JobNotFoundError(CalculationError):
    code = 'JOB_NOT_FOUND'


class NoActiveRequirementsError(CalculationError):
    code = 'NO_REQUIREMENTS'


class CalculationInProgressError(CalculationError):
    code = 'CALCULATION_IN_PROGRESS'


class CalculationCancelledError(CalculationError):
    code = 'CALCULATION_TIMEOUT'


class PersistenceError(CalculationError):
    code = 'INTERNAL_ERROR'
