import contextlib
import logging

from sqlalchemy.orm import sessionmaker

from database.repository import MatchingRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def matching_uow(session_factory: sessionmaker = None):
    """Per-unit-of-work transaction scope.

    Yields a MatchingRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with matching_uow() as repo:
            requirements = repo.requirements.get_for_job(job_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    if session_factory is None:
        from database.database import get_session_factory
        session_factory = get_session_factory()

    session = session_factory()
    try:
        repo = MatchingRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
