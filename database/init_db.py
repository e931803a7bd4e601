import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine
from tenacity import retry, stop_after_attempt, wait_fixed, before_sleep_log

from database.models import Base

logger = logging.getLogger(__name__)


@retry(
    stop=stop_after_attempt(10),
    wait=wait_fixed(3),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True
)
def wait_for_database(engine: Engine) -> None:
    """Block until the database accepts connections."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def init_db(engine: Engine = None) -> None:
    """Create every table the matching service reads or owns, if missing."""
    if engine is None:
        from database.database import get_engine
        engine = get_engine()

    wait_for_database(engine)
    Base.metadata.create_all(engine)
    logger.info("Database tables created")
