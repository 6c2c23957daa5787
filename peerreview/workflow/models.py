"""
Workflow models track where a learner's submission is in the peer review
process, and hold the aggregate grades computed for it.

The status only ever moves forward:

    draft -> submitted -> in_review -> reviewed -> approved

NOTE: We use migrations, so if you make any edits to this file, you
need to then generate a matching migration for it using:

    ./manage.py makemigrations workflow

"""


import logging

from django.db import models
from django.utils.timezone import now

from model_utils import Choices
from model_utils.models import StatusModel, TimeStampedModel

logger = logging.getLogger('peerreview.workflow.models')  # pylint: disable=invalid-name


class Submission(TimeStampedModel, StatusModel):
    """One learner's work product for an assignment.

    There is exactly one submission per (assignment, student). Resubmitting
    overwrites the content of the existing row. The status is advanced by the
    peer review engine only; nothing outside this package sets it directly.
    """
    STATUS = Choices('draft', 'submitted', 'in_review', 'reviewed', 'approved')  # implicit "status" field

    # Position of each status in the lifecycle, used to refuse backward moves.
    STATUS_ORDER = {name: index for index, (name, __) in enumerate(STATUS)}

    # Statuses the allocation engine assigns new reviewers to
    ALLOCATABLE_STATUSES = (STATUS.submitted, STATUS.in_review)

    # Statuses of learners that have handed in work and so may review others
    SUBMITTED_STATUSES = (STATUS.submitted, STATUS.in_review, STATUS.reviewed, STATUS.approved)

    # Fixed blend of instructor and peer grades into the final score
    INSTRUCTOR_WEIGHT = 0.7
    PEER_WEIGHT = 0.3

    assignment = models.ForeignKey(
        'assessment.Assignment', related_name='submissions', on_delete=models.CASCADE
    )
    student_id = models.CharField(max_length=40, db_index=True)

    content = models.TextField(blank=True, default="")
    file_url = models.CharField(max_length=1024, blank=True, default="")
    file_name = models.CharField(max_length=255, blank=True, default="")
    file_size = models.PositiveIntegerField(null=True, blank=True)
    self_assessment = models.TextField(blank=True, default="")

    submitted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    peer_score = models.FloatField(null=True, blank=True)
    instructor_score = models.FloatField(null=True, blank=True)
    instructor_feedback = models.TextField(blank=True, default="")
    final_score = models.FloatField(null=True, blank=True)
    graded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-submitted_at", "-id"]
        app_label = "workflow"
        unique_together = ("assignment", "student_id")

    @property
    def is_submitted(self):
        return self.status in self.SUBMITTED_STATUSES

    @property
    def has_completed_reviews(self):
        return self.STATUS_ORDER[self.status] >= self.STATUS_ORDER[self.STATUS.reviewed]

    def advance(self, status):
        """
        Move the submission forward to `status`.

        Requests that would move the submission backward, or leave it where it
        is, are ignored.

        Returns:
            bool: True if the status changed.
        """
        if self.STATUS_ORDER[status] <= self.STATUS_ORDER[self.status]:
            return False

        logger.info(
            "Submission %s moved from %s to %s", self.id, self.status, status
        )
        self.status = status
        return True

    def update_peer_score(self):
        """
        Recompute the peer score from the completed reviews.

        The completed review set is read from the database every time, so
        reviews completed concurrently by other reviewers are never lost.
        The first completed review moves the submission to "reviewed".

        Note: this does not save the submission.

        Returns:
            float or None
        """
        totals = list(
            self.received_reviews.filter(is_completed=True).values_list('total_score', flat=True)
        )
        if not totals:
            return self.peer_score

        self.peer_score = sum(total or 0.0 for total in totals) / len(totals)
        self.advance(self.STATUS.reviewed)
        self.update_final_score()
        return self.peer_score

    def update_final_score(self):
        """
        Blend the instructor and peer scores into the final score.

        Without an instructor score there is no final score. Without a peer
        score the instructor score stands alone.

        Note: this does not save the submission.
        """
        if self.instructor_score is None:
            self.final_score = None
        elif self.peer_score is None:
            self.final_score = self.instructor_score
        else:
            self.final_score = (
                self.instructor_score * self.INSTRUCTOR_WEIGHT +
                self.peer_score * self.PEER_WEIGHT
            )
        return self.final_score

    def record_instructor_score(self, score, feedback=""):
        """
        Store the instructor's grade and approve the submission.

        Note: this does not save the submission.
        """
        self.instructor_score = score
        self.instructor_feedback = feedback or ""
        self.graded_at = now()
        self.update_final_score()
        self.advance(self.STATUS.approved)
        return self.final_score

    def __repr__(self):
        return (
            "Submission(id={0.id}, assignment_id={0.assignment_id}, "
            "student_id={0.student_id}, status={0.status}, "
            "peer_score={0.peer_score}, final_score={0.final_score})"
        ).format(self)

    def __str__(self):
        return repr(self)
