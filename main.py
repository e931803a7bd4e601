import logging
import signal
import sys
import threading
import uuid
import argparse

from core.config_loader import load_config
from core.calculator.errors import CalculationError
from core.calculator.service import BatchCalculator
from core.scorer import ScoringService
from database.database import get_engine, get_session_factory
from database.init_db import init_db

logger = logging.getLogger(__name__)

# Set on SIGINT/SIGTERM so a running recalculation stops before its write
stop_event = threading.Event()


def signal_handler(sig, frame):
    logger.info("Shutdown signal received")
    stop_event.set()


def configure_logging(config) -> None:
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format=config.logging.format
    )


def run_serve(config, args) -> int:
    from web.backend.app import main as serve_main
    serve_main()
    return 0


def run_init_db(config, args) -> int:
    init_db(get_engine())
    return 0


def run_recalculate(config, args) -> int:
    """Manual recalculation, for jobs whose automatic trigger failed or timed out."""
    try:
        job_id = uuid.UUID(args.job_id)
    except ValueError:
        logger.error(f"Invalid job id: {args.job_id}")
        return 2

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    calculator = BatchCalculator(
        session_factory=get_session_factory(),
        scoring_service=ScoringService(config.matching.scorer),
        config=config.matching.calculator
    )

    # Stop before the lock lease goes stale and another run may take the job over
    timeout = args.timeout or config.matching.calculator.lock_stale_after_seconds
    timer = threading.Timer(timeout, stop_event.set)
    timer.daemon = True
    timer.start()
    try:
        result = calculator.recalculate(job_id, stop_event=stop_event)
    except CalculationError as e:
        logger.error(f"Recalculation of job {job_id} failed [{e.code}]: {e}")
        return 1
    finally:
        timer.cancel()

    logger.info(f"Recalculated job {job_id}: {result.matches_written} matches in {result.duration_ms}ms")
    for match in result.top_matches:
        logger.info(
            f"  #{match.rank} user={match.user_id} score={match.result.overall_score:.2f} "
            f"requirements_met={match.result.requirements_met}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Matching Service")
    subparsers = parser.add_subparsers(dest='command', required=True)

    serve = subparsers.add_parser('serve', help='Run the matching API server')
    serve.set_defaults(handler=run_serve)

    init = subparsers.add_parser('init-db', help='Create database tables (waits for the database)')
    init.set_defaults(handler=run_init_db)

    recalc = subparsers.add_parser('recalculate', help='Recalculate the ranked matches of one job')
    recalc.add_argument('job_id', type=str, help='Job UUID')
    recalc.add_argument(
        '--timeout', type=float, default=None,
        help='Seconds before the run is cancelled (default: the lock lease, lock_stale_after_seconds)'
    )
    recalc.set_defaults(handler=run_recalculate)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config()
    configure_logging(config)
    return args.handler(config, args)


if __name__ == "__main__":
    sys.exit(main())
