#!/usr/bin/env python3
"""
Tests for the operator CLI in main.py.
"""

import unittest
import uuid
from unittest.mock import MagicMock, patch

import main
from core.calculator.errors import CalculationInProgressError
from core.config_loader import AppConfig


class TestRecalculateCommand(unittest.TestCase):

    def setUp(self):
        self.config = AppConfig()
        self.job_id = str(uuid.uuid4())
        main.stop_event.clear()

        patches = [
            patch.object(main, "get_session_factory"),
            patch.object(main.signal, "signal"),
            patch.object(main, "BatchCalculator"),
            patch.object(main.threading, "Timer"),
        ]
        mocks = [p.start() for p in patches]
        for p in patches:
            self.addCleanup(p.stop)
        _, _, self.calculator_cls, self.timer_cls = mocks
        self.calculator = self.calculator_cls.return_value
        self.calculator.recalculate.return_value = MagicMock(matches_written=3, duration_ms=12, top_matches=[])

    def run_command(self, *extra):
        args = main.build_parser().parse_args(["recalculate", self.job_id, *extra])
        return main.run_recalculate(self.config, args)

    def test_deadline_defaults_to_lock_lease(self):
        self.assertEqual(self.run_command(), 0)

        self.timer_cls.assert_called_once_with(
            self.config.matching.calculator.lock_stale_after_seconds, main.stop_event.set
        )
        self.timer_cls.return_value.start.assert_called_once()
        self.timer_cls.return_value.cancel.assert_called_once()
        self.calculator.recalculate.assert_called_once_with(uuid.UUID(self.job_id), stop_event=main.stop_event)

    def test_explicit_timeout(self):
        self.run_command("--timeout", "45")
        self.timer_cls.assert_called_once_with(45.0, main.stop_event.set)

    def test_failed_run_returns_error_and_cancels_timer(self):
        self.calculator.recalculate.side_effect = CalculationInProgressError("busy")

        self.assertEqual(self.run_command(), 1)
        self.timer_cls.return_value.cancel.assert_called_once()

    def test_invalid_job_id(self):
        args = main.build_parser().parse_args(["recalculate", "not-a-uuid"])
        self.assertEqual(main.run_recalculate(self.config, args), 2)
        self.calculator.recalculate.assert_not_called()


if __name__ == '__main__':
    unittest.main()
