"""
Tests for the peer review Django admin.
"""

from django.contrib.admin.sites import AdminSite

from peerreview.assessment.admin import PeerReviewAdmin
from peerreview.assessment.models import PeerReview
from peerreview.test_utils import CacheResetTest
from peerreview.tests.factories import CriteriaScoreFactory, CriterionFactory, PeerReviewFactory


class PeerReviewAdminTest(CacheResetTest):
    """ Tests for the read-only PeerReview admin. """

    def setUp(self):
        super().setUp()
        self.admin = PeerReviewAdmin(PeerReview, AdminSite())
        self.review = PeerReviewFactory(is_completed=True, total_score=80.0)

    def test_submission_link(self):
        link = self.admin.submission_link(self.review)
        self.assertIn("/admin/workflow/submission/{}/change/".format(self.review.submission_id), link)

    def test_scores_summary(self):
        criterion = CriterionFactory(assignment=self.review.submission.assignment, name="Argument", max_score=5)
        CriteriaScoreFactory(review=self.review, criterion=criterion, score=4, feedback="Convincing")

        self.assertEqual(self.admin.scores_summary(self.review), "Argument: 4.0/5 - Convincing")
