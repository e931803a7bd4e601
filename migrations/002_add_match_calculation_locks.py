#!/usr/bin/env python3
"""
Migration: Add match_calculation_locks table

One row per job guards its recalculation. A run claims the row with
UPDATE ... WHERE calculating = false OR started_at < stale cutoff, so the
guard holds across every service instance.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import create_engine, text
from core.config_loader import load_config


def migrate():
    """Create the match_calculation_locks table."""
    engine = create_engine(load_config().database.url)

    with engine.connect() as conn:
        conn.execute(text("""
            CREATE TABLE IF NOT EXISTS match_calculation_locks (
                job_id UUID PRIMARY KEY REFERENCES jobs(job_id) ON DELETE CASCADE,
                calculating BOOLEAN NOT NULL DEFAULT FALSE,
                owner TEXT,
                started_at TIMESTAMPTZ,
                finished_at TIMESTAMPTZ
            )
        """))

        conn.commit()
        print("Successfully created 'match_calculation_locks' table")


def rollback():
    """Drop the match_calculation_locks table."""
    engine = create_engine(load_config().database.url)

    with engine.connect() as conn:
        conn.execute(text("DROP TABLE IF EXISTS match_calculation_locks"))
        conn.commit()
        print("Successfully dropped 'match_calculation_locks' table")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Migration for match_calculation_locks table")
    parser.add_argument("--rollback", action="store_true", help="Rollback the migration")

    args = parser.parse_args()

    if args.rollback:
        rollback()
    else:
        migrate()
