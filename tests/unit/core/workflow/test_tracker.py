#!/usr/bin/env python3
"""
Tests for the match workflow: view/contact side effects and status changes.
"""

import unittest
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from core.utils import ensure_utc
from core.workflow import (
    WorkflowTracker,
    MatchNotFoundError,
    InvalidStatusError,
    VIEW_PROMOTES_FROM,
    CONTACT_PROMOTES_FROM,
)
from database.repositories.match import MatchRepository
from tests import MatchingDataBuilder, create_test_engine, create_test_session_factory

T1 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
T2 = T1 + timedelta(hours=3)


class TestWorkflowTrackerUnit(unittest.TestCase):
    """Tracker behaviour with a mocked repository."""

    def setUp(self):
        self.matches = MagicMock()
        self.tracker = WorkflowTracker(self.matches)

    def test_invalid_status_rejected_before_any_write(self):
        with self.assertRaises(InvalidStatusError):
            self.tracker.change_status(uuid.uuid4(), "archived")
        self.matches.update_status.assert_not_called()

    def test_missing_match(self):
        self.matches.record_view.return_value = None
        with self.assertRaises(MatchNotFoundError):
            self.tracker.record_view(uuid.uuid4())

    def test_view_and_contact_promotion_sets(self):
        match_id = uuid.uuid4()
        self.tracker.record_view(match_id, now=T1)
        self.tracker.record_contact(match_id, now=T1)

        self.matches.record_view.assert_called_once_with(match_id, T1, VIEW_PROMOTES_FROM)
        self.matches.record_contact.assert_called_once_with(match_id, T1, CONTACT_PROMOTES_FROM)

    def test_status_change_stamps_matching_timestamp(self):
        match_id = uuid.uuid4()
        self.tracker.change_status(match_id, "contacted", now=T1)
        self.matches.update_status.assert_called_once_with(
            match_id, "contacted", T1, stamp_viewed=False, stamp_contacted=True
        )


@pytest.mark.db
class TestWorkflowTrackerDatabase(unittest.TestCase):
    """Tracker behaviour against real conditional updates."""

    def setUp(self):
        self.engine = create_test_engine()
        self.session = create_test_session_factory(self.engine)()
        data = MatchingDataBuilder(self.session)
        company = data.company()
        job = data.job(company)
        candidate = data.candidate()
        self.match = data.match(job, candidate, overall_score=72.5, rank=1)
        self.session.commit()
        self.tracker = WorkflowTracker(MatchRepository(self.session))

    def tearDown(self):
        self.session.close()
        self.engine.dispose()

    def test_first_view_promotes_and_stamps(self):
        match = self.tracker.record_view(self.match.match_id, now=T1)
        self.assertEqual(match.status, 'viewed')
        self.assertEqual(ensure_utc(match.viewed_at), T1)

    def test_repeat_view_keeps_first_timestamp(self):
        self.tracker.record_view(self.match.match_id, now=T1)
        match = self.tracker.record_view(self.match.match_id, now=T2)
        self.assertEqual(ensure_utc(match.viewed_at), T1)

    def test_view_never_demotes(self):
        self.tracker.change_status(self.match.match_id, 'shortlisted', now=T1)
        match = self.tracker.record_view(self.match.match_id, now=T2)

        self.assertEqual(match.status, 'shortlisted')
        self.assertEqual(ensure_utc(match.viewed_at), T2)

    def test_contact_promotes_from_viewed(self):
        self.tracker.record_view(self.match.match_id, now=T1)
        match = self.tracker.record_contact(self.match.match_id, now=T2)

        self.assertEqual(match.status, 'contacted')
        self.assertEqual(ensure_utc(match.contacted_at), T2)
        self.assertEqual(ensure_utc(match.viewed_at), T1)

    def test_contact_after_rejection_keeps_status(self):
        self.tracker.change_status(self.match.match_id, 'rejected', now=T1)
        match = self.tracker.record_contact(self.match.match_id, now=T2)

        self.assertEqual(match.status, 'rejected')
        self.assertEqual(ensure_utc(match.contacted_at), T2)

    def test_direct_rejection_and_reversal_allowed(self):
        match = self.tracker.change_status(self.match.match_id, 'rejected', now=T1)
        self.assertEqual(match.status, 'rejected')

        match = self.tracker.change_status(self.match.match_id, 'shortlisted', now=T2)
        self.assertEqual(match.status, 'shortlisted')

    def test_status_viewed_stamps_once(self):
        self.tracker.record_view(self.match.match_id, now=T1)
        match = self.tracker.change_status(self.match.match_id, 'viewed', now=T2)
        self.assertEqual(ensure_utc(match.viewed_at), T1)

    def test_workflow_changes_leave_scores_alone(self):
        match = self.tracker.change_status(self.match.match_id, 'hired', now=T1)
        self.assertEqual(float(match.overall_score), 72.5)
        self.assertEqual(match.match_rank, 1)

    def test_unknown_match(self):
        with self.assertRaises(MatchNotFoundError):
            self.tracker.record_contact(uuid.uuid4(), now=T1)


if __name__ == '__main__':
    unittest.main()
