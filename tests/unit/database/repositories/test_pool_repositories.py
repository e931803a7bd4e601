#!/usr/bin/env python3
"""
Tests for the snapshot reads: requirements, eligible candidates and valid scores.
"""

import unittest
from datetime import datetime, timedelta, timezone

import pytest

from database.repositories.candidate import CandidateRepository
from database.repositories.job import JobRepository
from database.repositories.requirement import RequirementRepository
from database.repositories.skill_score import SkillScoreRepository
from tests import MatchingDataBuilder, create_test_engine, create_test_session_factory


@pytest.mark.db
class TestPoolRepositories(unittest.TestCase):

    def setUp(self):
        self.engine = create_test_engine()
        self.session = create_test_session_factory(self.engine)()
        data = MatchingDataBuilder(self.session)
        self.now = datetime.now(timezone.utc)

        company = data.company()
        self.owner = data.employer(company)
        self.outsider = data.employer(data.company("Other"))
        self.job = data.job(company)
        self.python = data.skill("Python")
        self.go = data.skill("Go")
        self.retired = data.skill("Perl", active=False)
        data.requirement(self.job, self.python, weight=0.7)
        data.requirement(self.job, self.go, weight=0.3, required=False)
        data.requirement(self.job, self.retired, weight=0.5)

        self.visible = data.candidate("Vera")
        self.anonymous = data.candidate("Ana", visibility="anonymous")
        self.private = data.candidate("Priv", visibility="private")
        self.inactive = data.candidate("Ina", active=False)

        data.score(self.visible, self.python, 80)
        data.score(self.visible, self.go, 40, expires_at=self.now - timedelta(minutes=1))
        data.score(self.anonymous, self.go, 65)
        data.score(self.private, self.python, 99)
        data.score(self.inactive, self.python, 99)
        self.session.commit()

    def tearDown(self):
        self.session.close()
        self.engine.dispose()

    def test_requirements_skip_inactive_skills(self):
        reqs = RequirementRepository(self.session).get_for_job(self.job.job_id)
        self.assertEqual({r.skill_name for r in reqs}, {"Python", "Go"})
        go = [r for r in reqs if r.skill_name == "Go"][0]
        self.assertAlmostEqual(go.weight, 0.3)
        self.assertFalse(go.required)

    def test_eligible_candidates(self):
        repo = CandidateRepository(self.session)

        ids = {c.user_id for c in repo.get_eligible_candidates()}
        self.assertEqual(ids, {self.visible.user_id, self.anonymous.user_id})

        with_private = {c.user_id for c in repo.get_eligible_candidates(exclude_private=False)}
        self.assertEqual(with_private, {self.visible.user_id, self.anonymous.user_id, self.private.user_id})

    def test_valid_scores_only(self):
        scores = SkillScoreRepository(self.session).get_valid_scores(
            [self.python.skill_id, self.go.skill_id], self.now
        )

        self.assertEqual(set(scores), {self.visible.user_id, self.anonymous.user_id})
        self.assertEqual(set(scores[self.visible.user_id]), {self.python.skill_id})
        self.assertEqual(scores[self.visible.user_id][self.python.skill_id].score, 80.0)
        self.assertEqual(scores[self.anonymous.user_id][self.go.skill_id].score, 65.0)

    def test_valid_scores_without_skills(self):
        self.assertEqual(SkillScoreRepository(self.session).get_valid_scores([], self.now), {})

    def test_job_ownership(self):
        jobs = JobRepository(self.session)
        self.assertIsNotNone(jobs.get_job_for_employer(self.job.job_id, self.owner.user_id))
        self.assertIsNone(jobs.get_job_for_employer(self.job.job_id, self.outsider.user_id))
        self.assertTrue(jobs.exists(self.job.job_id))

    def test_anonymous_display_fields_withhold_identity(self):
        profile = self.anonymous.profile
        fields = CandidateRepository.display_fields(self.anonymous, profile)

        self.assertEqual(fields['profile_visibility'], 'anonymous')
        self.assertIsNone(fields['first_name'])
        self.assertIsNone(fields['email'])
        self.assertEqual(fields['headline'], "Engineer")

        public = CandidateRepository.display_fields(self.visible, self.visible.profile)
        self.assertEqual(public['first_name'], "Vera")


if __name__ == '__main__':
    unittest.main()
