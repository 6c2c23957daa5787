"""tests for the management command that runs peer review allocation"""

from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from mock import patch
import pytest

from peerreview.assessment.models import PeerReview
from peerreview.management.commands import allocate_peer_reviews
from peerreview.test_utils import PeerReviewTestCase


class AllocatePeerReviewsTest(PeerReviewTestCase):

    def test_allocate_inline(self):
        assignment = self._published_assignment(reviews_required=1)
        self._submitted(assignment, "alice", "bob")

        out = StringIO()
        call_command("allocate_peer_reviews", assignment_id=assignment.id, stdout=out)

        self.assertEqual(PeerReview.objects.count(), 2)
        self.assertIn("Created 2 peer reviews", out.getvalue())

    def test_allocate_reports_under_reviewed(self):
        assignment = self._published_assignment(reviews_required=3)
        self._submitted(assignment, "alice", "bob")

        out = StringIO()
        call_command("allocate_peer_reviews", assignment_id=assignment.id, stdout=out)

        self.assertIn("has 1 of 3 reviewers", out.getvalue())

    @patch('peerreview.management.commands.allocate_peer_reviews.tasks.'
           'allocate_peer_reviews_task.apply_async')
    def test_allocate_async(self, mock_allocate):
        command = allocate_peer_reviews.Command()
        command.handle(assignment_id=42, run_async=True)
        mock_allocate.assert_called_with([42])

    def test_missing_assignment_id(self):
        command = allocate_peer_reviews.Command()
        with pytest.raises(CommandError):
            command.handle()

    def test_unknown_assignment(self):
        with pytest.raises(CommandError):
            call_command("allocate_peer_reviews", assignment_id=9999)
