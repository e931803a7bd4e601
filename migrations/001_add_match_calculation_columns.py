#!/usr/bin/env python3
"""
Migration: Add calculation columns to job_matches

Adds requirements_met and calculated_at, lets match_rank be NULL for
candidates that dropped out of a job's pool, and adds the
(job_id, overall_score DESC) index that serves ranked reads.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import create_engine, text
from core.config_loader import load_config


def migrate():
    """Add calculation columns and ranked-read index to job_matches."""
    engine = create_engine(load_config().database.url)

    with engine.connect() as conn:
        result = conn.execute(text("""
            SELECT column_name
            FROM information_schema.columns
            WHERE table_name = 'job_matches' AND column_name = 'calculated_at'
        """))

        if result.fetchone():
            print("Column 'calculated_at' already exists in job_matches table. Skipping migration.")
            return

        conn.execute(text("""
            ALTER TABLE job_matches
            ADD COLUMN requirements_met BOOLEAN NOT NULL DEFAULT FALSE,
            ADD COLUMN calculated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        """))

        conn.execute(text("""
            ALTER TABLE job_matches
            ALTER COLUMN match_rank DROP NOT NULL
        """))

        conn.execute(text("""
            CREATE INDEX IF NOT EXISTS idx_job_matches_job_score
            ON job_matches (job_id, overall_score DESC)
        """))

        conn.execute(text("""
            CREATE INDEX IF NOT EXISTS idx_job_matches_rank
            ON job_matches (job_id, match_rank)
        """))

        conn.commit()
        print("Successfully added calculation columns to job_matches table")
        print("Successfully created indexes 'idx_job_matches_job_score', 'idx_job_matches_rank'")


def rollback():
    """
    Remove calculation columns and indexes from job_matches.

    Unranked rows cannot exist once match_rank is NOT NULL again, so they
    are deleted first.
    """
    engine = create_engine(load_config().database.url)

    with engine.connect() as conn:
        deleted = conn.execute(text("DELETE FROM job_matches WHERE match_rank IS NULL"))
        print(f"Deleted {deleted.rowcount} unranked rows from job_matches")

        conn.execute(text("""
            ALTER TABLE job_matches
            ALTER COLUMN match_rank SET NOT NULL
        """))

        conn.execute(text("DROP INDEX IF EXISTS idx_job_matches_rank"))
        conn.execute(text("DROP INDEX IF EXISTS idx_job_matches_job_score"))

        conn.execute(text("""
            ALTER TABLE job_matches
            DROP COLUMN IF EXISTS calculated_at,
            DROP COLUMN IF EXISTS requirements_met
        """))

        conn.commit()
        print("Successfully removed calculation columns from job_matches table")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Migration for job_matches calculation columns")
    parser.add_argument("--rollback", action="store_true", help="Rollback the migration")

    args = parser.parse_args()

    if args.rollback:
        rollback()
    else:
        migrate()
