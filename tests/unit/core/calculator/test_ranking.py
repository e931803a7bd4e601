#!/usr/bin/env python3
"""
Tests for candidate ranking order and dense rank assignment.
"""

import random
import unittest
import uuid
from datetime import datetime, timedelta, timezone

from core.calculator import CandidateSummary, ScoredCandidate, rank_candidates
from core.scorer import ScoreResult, ScoringService, SkillRequirement, SkillScore

BASE = datetime(2025, 1, 1, tzinfo=timezone.utc)


def scored(score, created_days=0, required_met=0, skills_met=0, user_id=None):
    candidate = CandidateSummary(
        user_id=user_id or uuid.uuid4(),
        created_at=BASE + timedelta(days=created_days),
    )
    result = ScoreResult(
        overall_score=score,
        required_met_count=required_met,
        skills_met_count=skills_met,
    )
    return ScoredCandidate(candidate=candidate, result=result)


class TestRankCandidates(unittest.TestCase):

    def test_score_order_and_creation_tie_break(self):
        first = scored(88.0, created_days=5)
        second = scored(54.0, created_days=10)
        earlier_tied = scored(54.0, created_days=1)

        ranked = rank_candidates([second, first, earlier_tied])

        self.assertEqual(
            [(r.user_id, r.rank) for r in ranked],
            [
                (first.candidate.user_id, 1),
                (earlier_tied.candidate.user_id, 2),
                (second.candidate.user_id, 3),
            ]
        )

    def test_required_met_beats_skills_met_and_age(self):
        more_required = scored(70.0, created_days=9, required_met=2, skills_met=2)
        more_skills = scored(70.0, created_days=0, required_met=1, skills_met=3)

        ranked = rank_candidates([more_skills, more_required])
        self.assertEqual(ranked[0].user_id, more_required.candidate.user_id)

    def test_skills_met_beats_age(self):
        more_skills = scored(70.0, created_days=9, required_met=1, skills_met=3)
        older = scored(70.0, created_days=0, required_met=1, skills_met=2)

        ranked = rank_candidates([older, more_skills])
        self.assertEqual(ranked[0].user_id, more_skills.candidate.user_id)

    def test_absent_optional_skill_counts_as_met_for_tie_break(self):
        required = uuid.uuid4()
        optional = uuid.uuid4()
        reqs = [
            SkillRequirement(skill_id=required, weight=0.5, minimum_score=0, required=True),
            SkillRequirement(skill_id=optional, weight=0.5, minimum_score=0, required=False),
        ]
        scorer = ScoringService()
        expires = BASE + timedelta(days=365)

        def candidate(created_days, scores):
            user_id = uuid.uuid4()
            valid = {
                skill_id: SkillScore(user_id=user_id, skill_id=skill_id, score=value, expires_at=expires)
                for skill_id, value in scores.items()
            }
            return ScoredCandidate(
                candidate=CandidateSummary(user_id=user_id, created_at=BASE + timedelta(days=created_days)),
                result=scorer.score(reqs, valid, now=BASE),
            )

        older = candidate(0, {required: 100})
        newer = candidate(5, {required: 50, optional: 50})

        self.assertEqual(older.result.overall_score, newer.result.overall_score)
        self.assertEqual(older.result.skills_met_count, newer.result.skills_met_count)

        ranked = rank_candidates([newer, older])
        self.assertEqual([r.user_id for r in ranked], [older.candidate.user_id, newer.candidate.user_id])

    def test_full_tie_falls_back_to_user_id(self):
        low = uuid.UUID("00000000-0000-0000-0000-000000000001")
        high = uuid.UUID("00000000-0000-0000-0000-000000000002")

        ranked = rank_candidates([scored(50.0, user_id=high), scored(50.0, user_id=low)])
        self.assertEqual([r.user_id for r in ranked], [low, high])

    def test_ranks_are_dense_and_order_independent(self):
        pool = [scored(float(random.randint(0, 5)), created_days=random.randint(0, 3)) for _ in range(50)]

        ranked = rank_candidates(pool)
        shuffled = list(pool)
        random.shuffle(shuffled)
        reranked = rank_candidates(shuffled)

        self.assertEqual([r.rank for r in ranked], list(range(1, 51)))
        self.assertEqual([r.user_id for r in ranked], [r.user_id for r in reranked])

    def test_empty_pool(self):
        self.assertEqual(rank_candidates([]), [])


if __name__ == '__main__':
    unittest.main()
