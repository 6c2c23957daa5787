"""
Django models specific to peer reviews.

A :class:`PeerReview` is the pairing of one reviewer with one submission. It is
created by the allocation engine in the pending state and becomes terminal
once the reviewer submits :class:`CriteriaScore` rows for it.

NOTE: We use migrations, so if you make any edits to this file, you
need to then generate a matching migration for it using:

    ./manage.py makemigrations assessment

"""


import logging

from django.db import models
from django.utils.timezone import now

from peerreview.assessment.errors import SelfReviewError
from peerreview.assessment.models.base import Criterion

logger = logging.getLogger("peerreview.assessment.models")  # pylint: disable=invalid-name


def weighted_total_score(scored_criteria):
    """
    Compute the normalized total of a review.

    Each score is scaled onto 0-100 against its criterion's ``max_score`` and
    the result is the weighted mean of the scaled scores. Only the criteria
    that were actually scored contribute to the denominator.

    Args:
        scored_criteria (iterable): ``(Criterion, score)`` pairs.

    Returns:
        float, or None if nothing was scored.

    Examples:
        >>> weighted_total_score([(content, 8), (clarity, 6)])
        66.66666666666667

    """
    weighted_sum = 0.0
    total_weight = 0.0
    for criterion, score in scored_criteria:
        weighted_sum += criterion.normalize(score) * criterion.weight
        total_weight += criterion.weight

    if total_weight <= 0:
        return None
    return weighted_sum / total_weight


class PeerReview(models.Model):
    """One reviewer's evaluation of one submission.

    The (submission, reviewer) pair is unique: the database constraint is what
    gives the allocation engine its insert-if-absent behaviour. A reviewer is
    never the author of the submission they review.
    """
    PENDING = "pending"
    COMPLETED = "completed"

    MAX_FEEDBACK_SIZE = 10000
    MIN_HELPFULNESS_RATING = 1
    MAX_HELPFULNESS_RATING = 5

    submission = models.ForeignKey(
        "workflow.Submission", related_name="received_reviews", on_delete=models.CASCADE
    )
    reviewer_id = models.CharField(max_length=40, db_index=True)
    created_at = models.DateTimeField(default=now, db_index=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    is_completed = models.BooleanField(default=False, db_index=True)
    total_score = models.FloatField(null=True, blank=True)

    overall_feedback = models.TextField(max_length=MAX_FEEDBACK_SIZE, blank=True, default="")
    strengths_note = models.TextField(max_length=MAX_FEEDBACK_SIZE, blank=True, default="")
    improvements_note = models.TextField(max_length=MAX_FEEDBACK_SIZE, blank=True, default="")

    helpfulness_rating = models.PositiveSmallIntegerField(null=True, blank=True)

    class Meta:
        ordering = ["created_at", "id"]
        app_label = "assessment"
        unique_together = ("submission", "reviewer_id")

    @property
    def status(self):
        return self.COMPLETED if self.is_completed else self.PENDING

    def save(self, *args, **kwargs):  # pylint: disable=arguments-differ
        if self.reviewer_id == self.submission.student_id:
            raise SelfReviewError(
                "Learner {} cannot review their own submission {}".format(
                    self.reviewer_id, self.submission_id
                )
            )
        super().save(*args, **kwargs)

    def complete(self, scored_criteria, overall_feedback="", strengths_note="", improvements_note=""):
        """
        Record the reviewer's scores and close the review.

        Note: call this inside a transaction; the criterion scores and the
        review row are written separately.

        Args:
            scored_criteria (list): ``(Criterion, score, feedback)`` tuples,
                already validated against the assignment.

        Returns:
            float: the normalized total score.
        """
        CriteriaScore.objects.bulk_create([
            CriteriaScore(review=self, criterion=criterion, score=score, feedback=feedback or "")
            for criterion, score, feedback in scored_criteria
        ])

        self.total_score = weighted_total_score(
            (criterion, score) for criterion, score, __ in scored_criteria
        )
        self.overall_feedback = overall_feedback or ""
        self.strengths_note = strengths_note or ""
        self.improvements_note = improvements_note or ""
        self.is_completed = True
        self.completed_at = now()
        self.save()
        return self.total_score

    def __repr__(self):
        return (
            "PeerReview(id={0.id}, submission_id={0.submission_id}, "
            "reviewer_id={0.reviewer_id}, is_completed={0.is_completed}, "
            "total_score={0.total_score})"
        ).format(self)

    def __str__(self):
        return repr(self)


class CriteriaScore(models.Model):
    """The score a reviewer gave one criterion, with optional feedback."""
    review = models.ForeignKey(PeerReview, related_name="criteria_scores", on_delete=models.CASCADE)
    criterion = models.ForeignKey(Criterion, related_name="+", on_delete=models.CASCADE)
    score = models.FloatField()
    feedback = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["id"]
        app_label = "assessment"
        unique_together = ("review", "criterion")

    @property
    def normalized_score(self):
        return self.criterion.normalize(self.score)
