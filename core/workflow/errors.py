class WorkflowError(Exception):
    """Base class for match workflow failures."""
    code = 'INTERNAL_ERROR'


class MatchNotFoundError(WorkflowError):
    code = 'MATCH_NOT_FOUND'


class InvalidStatusError(WorkflowError):
    code = 'INVALID_STATUS'
