"""
Tests for completing and rating peer reviews.
"""

import ddt
from django.db import DatabaseError
from mock import patch
import pytest

from peerreview.assessment.api import peer as peer_api
from peerreview.assessment.errors import (InvalidCriterionError, PeerReviewInternalError, PeerReviewPermissionError,
                                          PeerReviewRequestError, PeerReviewWorkflowError,
                                          ReviewAlreadyCompletedError, ReviewNotFoundError, ScoreOutOfRangeError)
from peerreview.assessment.models import CriteriaScore, PeerReview
from peerreview.test_utils import PeerReviewTestCase
from peerreview.tests.factories import CriterionFactory, PeerReviewFactory
from peerreview.workflow.models import Submission


@ddt.ddt
class TestSubmitReview(PeerReviewTestCase):
    """ Tests for submit_review. """

    def setUp(self):
        super().setUp()
        self.assignment = self._published_assignment(reviews_required=2)
        self.argument = CriterionFactory(assignment=self.assignment, name="Argument", max_score=10, weight=1)
        self.style = CriterionFactory(assignment=self.assignment, name="Style", max_score=10, weight=2)
        self.alice, self.bob, self.carol = self._submitted(self.assignment, "alice", "bob", "carol")
        self.review = PeerReviewFactory(submission=self.alice, reviewer_id="bob")

    def _scores(self, argument=8, style=6):
        return [
            {"criterion_id": self.argument.id, "score": argument},
            {"criterion_id": self.style.id, "score": style, "feedback": "Hard to follow in places."},
        ]

    def test_weighted_total(self):
        review = peer_api.submit_review(
            self.review.id, "bob", self._scores(), overall_feedback="Nice work", strengths_note="Clear thesis"
        )

        # (80 * 1 + 60 * 2) / 3
        self.assertAlmostEqual(review["total_score"], 66.67, places=2)
        self.assertTrue(review["is_completed"])
        self.assertEqual(review["status"], PeerReview.COMPLETED)
        self.assertEqual(review["overall_feedback"], "Nice work")
        self.assertEqual(review["strengths_note"], "Clear thesis")
        self.assertEqual(len(review["criteria_scores"]), 2)

        stored = PeerReview.objects.get(pk=self.review.id)
        self.assertTrue(stored.is_completed)
        self.assertIsNotNone(stored.completed_at)
        self.assertEqual(
            CriteriaScore.objects.get(review=stored, criterion=self.style).feedback,
            "Hard to follow in places."
        )

    def test_subset_of_criteria(self):
        review = peer_api.submit_review(
            self.review.id, "bob", [{"criterion_id": self.style.id, "score": 6}]
        )
        # Only the scored criterion enters the weighted mean
        self.assertAlmostEqual(review["total_score"], 60.0)

    def test_peer_score_and_status(self):
        peer_api.submit_review(self.review.id, "bob", self._scores(10, 10))

        submission = Submission.objects.get(pk=self.alice.id)
        self.assertEqual(submission.peer_score, 100.0)
        self.assertEqual(submission.status, Submission.STATUS.reviewed)
        self.assertIsNone(submission.final_score)

        second = PeerReviewFactory(submission=self.alice, reviewer_id="carol")
        peer_api.submit_review(second.id, "carol", self._scores(5, 5))

        submission = Submission.objects.get(pk=self.alice.id)
        self.assertEqual(submission.peer_score, 75.0)

    def test_pending_reviews_do_not_count(self):
        PeerReviewFactory(submission=self.alice, reviewer_id="carol")
        peer_api.submit_review(self.review.id, "bob", self._scores(8, 8))

        self.assertEqual(Submission.objects.get(pk=self.alice.id).peer_score, 80.0)

    def test_approved_submission_stays_approved(self):
        self.alice.instructor_score = 90.0
        self.alice.status = Submission.STATUS.approved
        self.alice.save()

        peer_api.submit_review(self.review.id, "bob", self._scores(7, 7))

        submission = Submission.objects.get(pk=self.alice.id)
        self.assertEqual(submission.status, Submission.STATUS.approved)
        self.assertAlmostEqual(submission.final_score, 90 * 0.7 + 70 * 0.3)

    def test_already_completed(self):
        peer_api.submit_review(self.review.id, "bob", self._scores())

        with pytest.raises(ReviewAlreadyCompletedError):
            peer_api.submit_review(self.review.id, "bob", self._scores(10, 10))

        self.assertAlmostEqual(PeerReview.objects.get(pk=self.review.id).total_score, 66.67, places=2)
        self.assertEqual(CriteriaScore.objects.filter(review=self.review).count(), 2)

    def test_not_the_reviewer(self):
        with pytest.raises(PeerReviewPermissionError):
            peer_api.submit_review(self.review.id, "carol", self._scores())
        self.assertFalse(PeerReview.objects.get(pk=self.review.id).is_completed)

    def test_review_not_found(self):
        with pytest.raises(ReviewNotFoundError):
            peer_api.submit_review(9999, "bob", self._scores())

    def test_criterion_of_another_assignment(self):
        other = CriterionFactory()
        with pytest.raises(InvalidCriterionError):
            peer_api.submit_review(self.review.id, "bob", [{"criterion_id": other.id, "score": 5}])
        self.assertFalse(CriteriaScore.objects.exists())

    @ddt.data(-1, 10.5, 11)
    def test_score_out_of_range(self, score):
        with pytest.raises(ScoreOutOfRangeError):
            peer_api.submit_review(self.review.id, "bob", self._scores(argument=score))
        self.assertFalse(PeerReview.objects.get(pk=self.review.id).is_completed)
        self.assertFalse(CriteriaScore.objects.exists())

    @ddt.data(0, 10)
    def test_score_bounds_are_inclusive(self, score):
        review = peer_api.submit_review(self.review.id, "bob", self._scores(score, score))
        self.assertAlmostEqual(review["total_score"], score * 10.0)

    def test_out_of_range_is_a_request_error(self):
        with pytest.raises(PeerReviewRequestError):
            peer_api.submit_review(self.review.id, "bob", self._scores(argument=-1))

    @ddt.data(
        [],
        [{"criterion_id": 1}],
        [{"score": 3}],
    )
    def test_malformed_scores(self, criteria_scores):
        with pytest.raises(PeerReviewRequestError):
            peer_api.submit_review(self.review.id, "bob", criteria_scores)

    def test_duplicate_criterion(self):
        scores = [
            {"criterion_id": self.argument.id, "score": 4},
            {"criterion_id": self.argument.id, "score": 5},
        ]
        with pytest.raises(PeerReviewRequestError):
            peer_api.submit_review(self.review.id, "bob", scores)

    @patch("peerreview.notifications.send_notification")
    def test_author_notified(self, mock_send):
        with self.captureOnCommitCallbacks(execute=True):
            peer_api.submit_review(self.review.id, "bob", self._scores())

        mock_send.assert_called_once_with("review_received", student_id="alice", submission_id=self.alice.id)

    @patch.object(PeerReview, "complete")
    def test_database_error(self, mock_complete):
        mock_complete.side_effect = DatabaseError("Bad things happened")
        with pytest.raises(PeerReviewInternalError):
            peer_api.submit_review(self.review.id, "bob", self._scores())


class TestReviewQueue(PeerReviewTestCase):
    """ Tests for the reviewer's view of their assigned reviews. """

    def setUp(self):
        super().setUp()
        self.assignment = self._published_assignment(title="Essay", anonymous_reviews=True)
        self.criterion = CriterionFactory(assignment=self.assignment, name="Argument")
        self.alice, self.bob = self._submitted(self.assignment, "alice", "bob")
        self.review = PeerReviewFactory(submission=self.alice, reviewer_id="bob")

    def test_pending_reviews(self):
        pending = peer_api.get_pending_reviews("bob")

        self.assertEqual(len(pending), 1)
        self.assertEqual(pending[0]["review_id"], self.review.id)
        self.assertEqual(pending[0]["submission_id"], self.alice.id)
        self.assertEqual(pending[0]["assignment_id"], self.assignment.id)
        self.assertEqual(pending[0]["assignment_title"], "Essay")

    def test_completed_reviews_are_not_pending(self):
        peer_api.submit_review(self.review.id, "bob", [{"criterion_id": self.criterion.id, "score": 5}])
        self.assertEqual(peer_api.get_pending_reviews("bob"), [])

    def test_review_to_complete_hides_author(self):
        data = peer_api.get_review_to_complete(self.review.id, "bob")

        self.assertIsNone(data["submission"]["student_id"])
        self.assertEqual(data["submission"]["content"], self.alice.content)
        self.assertEqual([criterion["name"] for criterion in data["criteria"]], ["Argument"])
        self.assertEqual(data["review"]["status"], PeerReview.PENDING)

    def test_review_to_complete_shows_author(self):
        self.assignment.anonymous_reviews = False
        self.assignment.save()

        data = peer_api.get_review_to_complete(self.review.id, "bob")
        self.assertEqual(data["submission"]["student_id"], "alice")

    def test_review_to_complete_not_the_reviewer(self):
        with pytest.raises(PeerReviewPermissionError):
            peer_api.get_review_to_complete(self.review.id, "alice")


@ddt.ddt
class TestRateReviewHelpfulness(PeerReviewTestCase):
    """ Tests for rate_review_helpfulness. """

    def setUp(self):
        super().setUp()
        self.assignment = self._published_assignment(anonymous_reviews=True)
        self.criterion = CriterionFactory(assignment=self.assignment)
        self.alice, self.bob = self._submitted(self.assignment, "alice", "bob")
        self.review = PeerReviewFactory(submission=self.alice, reviewer_id="bob")

    def _complete(self):
        peer_api.submit_review(self.review.id, "bob", [{"criterion_id": self.criterion.id, "score": 5}])

    @ddt.data(1, 5)
    def test_rate(self, rating):
        self._complete()

        review = peer_api.rate_review_helpfulness(self.review.id, "alice", rating)

        self.assertEqual(review["helpfulness_rating"], rating)
        self.assertIsNone(review["reviewer_id"])
        self.assertEqual(PeerReview.objects.get(pk=self.review.id).helpfulness_rating, rating)

    def test_rating_does_not_change_scores(self):
        self._complete()
        peer_api.rate_review_helpfulness(self.review.id, "alice", 1)

        self.assertEqual(Submission.objects.get(pk=self.alice.id).peer_score, 50.0)

    @ddt.data(0, 6)
    def test_rating_out_of_range(self, rating):
        self._complete()
        with pytest.raises(PeerReviewRequestError):
            peer_api.rate_review_helpfulness(self.review.id, "alice", rating)

    def test_only_author_rates(self):
        self._complete()
        with pytest.raises(PeerReviewPermissionError):
            peer_api.rate_review_helpfulness(self.review.id, "bob", 4)

    def test_pending_review_cannot_be_rated(self):
        with pytest.raises(PeerReviewWorkflowError):
            peer_api.rate_review_helpfulness(self.review.id, "alice", 4)

    def test_review_not_found(self):
        with pytest.raises(ReviewNotFoundError):
            peer_api.rate_review_helpfulness(9999, "alice", 4)
