"""
Tests for instructor grading.
"""

import ddt
from django.db import DatabaseError
from mock import patch
import pytest

from peerreview.assessment.api import staff as staff_api
from peerreview.assessment.errors import (PeerReviewInternalError, PeerReviewPermissionError, PeerReviewRequestError,
                                          PeerReviewWorkflowError, ScoreOutOfRangeError, SubmissionNotGradableError)
from peerreview.test_utils import INSTRUCTOR, PeerReviewTestCase
from peerreview.tests.factories import PeerReviewFactory, SubmissionFactory
from peerreview.workflow.errors import SubmissionNotFoundError
from peerreview.workflow.models import Submission


@ddt.ddt
class TestGradeSubmission(PeerReviewTestCase):
    """ Tests for grade_submission. """

    def setUp(self):
        super().setUp()
        self.assignment = self._published_assignment(max_points=100)
        self.alice, self.bob = self._submitted(self.assignment, "alice", "bob")

    def _complete_review(self, submission, reviewer_id, total_score):
        PeerReviewFactory(submission=submission, reviewer_id=reviewer_id, is_completed=True, total_score=total_score)

    def test_blend(self):
        self._complete_review(self.alice, "bob", 70.0)

        graded = staff_api.grade_submission(self.alice.id, INSTRUCTOR, 90, feedback="Solid work")

        self.assertEqual(graded["peer_score"], 70.0)
        self.assertEqual(graded["instructor_score"], 90.0)
        self.assertAlmostEqual(graded["final_score"], 84.0)
        self.assertEqual(graded["status"], Submission.STATUS.approved)
        self.assertEqual(graded["instructor_feedback"], "Solid work")
        self.assertIsNotNone(graded["graded_at"])

    def test_without_peer_score(self):
        graded = staff_api.grade_submission(self.alice.id, INSTRUCTOR, 77.5)

        self.assertIsNone(graded["peer_score"])
        self.assertEqual(graded["final_score"], 77.5)
        self.assertEqual(graded["status"], Submission.STATUS.approved)

    def test_peer_score_recomputed_before_blending(self):
        self._complete_review(self.alice, "bob", 60.0)
        self._complete_review(self.alice, "carol", 80.0)

        graded = staff_api.grade_submission(self.alice.id, INSTRUCTOR, 100)

        self.assertEqual(graded["peer_score"], 70.0)
        self.assertAlmostEqual(graded["final_score"], 100 * 0.7 + 70 * 0.3)

    def test_regrade(self):
        staff_api.grade_submission(self.alice.id, INSTRUCTOR, 50)
        graded = staff_api.grade_submission(self.alice.id, INSTRUCTOR, 60)

        self.assertEqual(graded["final_score"], 60.0)
        self.assertEqual(Submission.objects.get(pk=self.alice.id).instructor_score, 60.0)

    def test_grading_does_not_wait_for_reviews(self):
        PeerReviewFactory(submission=self.alice, reviewer_id="bob")

        graded = staff_api.grade_submission(self.alice.id, INSTRUCTOR, 80)

        self.assertEqual(graded["status"], Submission.STATUS.approved)
        self.assertEqual(graded["final_score"], 80.0)

    def test_not_the_instructor(self):
        with pytest.raises(PeerReviewPermissionError):
            staff_api.grade_submission(self.alice.id, "alice", 100)
        self.assertIsNone(Submission.objects.get(pk=self.alice.id).instructor_score)

    @ddt.data(-0.5, 100.5, None, float("nan"), float("inf"), "abc")
    def test_score_out_of_range(self, score):
        with pytest.raises(ScoreOutOfRangeError):
            staff_api.grade_submission(self.alice.id, INSTRUCTOR, score)

        submission = Submission.objects.get(pk=self.alice.id)
        self.assertEqual(submission.status, Submission.STATUS.submitted)
        self.assertIsNone(submission.instructor_score)

    @ddt.data(0, 100)
    def test_score_bounds_are_inclusive(self, score):
        graded = staff_api.grade_submission(self.alice.id, INSTRUCTOR, score)
        self.assertEqual(graded["instructor_score"], float(score))

    def test_numeric_string_score(self):
        graded = staff_api.grade_submission(self.alice.id, INSTRUCTOR, "90")
        self.assertEqual(graded["instructor_score"], 90.0)

    def test_out_of_range_is_a_request_error(self):
        with pytest.raises(PeerReviewRequestError):
            staff_api.grade_submission(self.alice.id, INSTRUCTOR, 101)

    def test_draft_cannot_be_graded(self):
        draft = SubmissionFactory(
            assignment=self.assignment, student_id="carol", status=Submission.STATUS.draft, submitted_at=None
        )
        with pytest.raises(SubmissionNotGradableError):
            staff_api.grade_submission(draft.id, INSTRUCTOR, 50)

        with pytest.raises(PeerReviewWorkflowError):
            staff_api.grade_submission(draft.id, INSTRUCTOR, 50)

    def test_submission_not_found(self):
        with pytest.raises(SubmissionNotFoundError):
            staff_api.grade_submission(9999, INSTRUCTOR, 50)

    @patch("peerreview.notifications.send_notification")
    def test_learner_notified(self, mock_send):
        with self.captureOnCommitCallbacks(execute=True):
            staff_api.grade_submission(self.alice.id, INSTRUCTOR, 90)

        mock_send.assert_called_once_with("graded", student_id="alice", submission_id=self.alice.id, final_score=90.0)

    @patch.object(Submission, "save")
    def test_database_error(self, mock_save):
        mock_save.side_effect = DatabaseError("Bad things happened")
        with pytest.raises(PeerReviewInternalError):
            staff_api.grade_submission(self.alice.id, INSTRUCTOR, 90)
