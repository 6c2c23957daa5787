"""
Run a peer review allocation pass for an assignment
"""
import logging

from django.core.management.base import BaseCommand, CommandError

from peerreview import tasks
from peerreview.assessment.api import allocation
from peerreview.assessment.errors import PeerReviewError

log = logging.getLogger(__name__)


class Command(BaseCommand):
    """
    Pair submitted learners with submissions that still need reviewers
    """

    def add_arguments(self, parser):
        """
        Entry point for subclassed commands to add custom arguments.
        """
        parser.add_argument(
            '--assignment_id',
            dest='assignment_id',
            type=int,
            help='Assignment to allocate reviewers for',
        )

        parser.add_argument(
            '--async',
            dest='run_async',
            action='store_true',
            default=False,
            help='Queue the pass as a celery task instead of running it now',
        )

    def handle(self, *args, **options):
        assignment_id = options.get("assignment_id")
        if assignment_id is None:
            raise CommandError("--assignment_id is required")

        if options.get("run_async"):
            result = tasks.allocate_peer_reviews_task.apply_async([assignment_id])
            log.info("Created %s[%s] with arguments %s",
                     tasks.allocate_peer_reviews_task.name,
                     result.task_id,
                     [assignment_id]
                     )
            return

        try:
            result = allocation.allocate_peer_reviews(assignment_id)
        except PeerReviewError as ex:
            raise CommandError(str(ex)) from ex

        self.stdout.write(
            "Created {} peer reviews for assignment {}".format(len(result["created"]), assignment_id)
        )
        for item in result["under_reviewed"]:
            log.info("Submission %s is under-reviewed: %s of %s reviewers",
                     item["submission_id"], item["existing_count"], item["reviews_required"])
            self.stdout.write(
                "Submission {submission_id} has {existing_count} of {reviews_required} reviewers".format(**item)
            )
