"""
Django models describing what is being peer reviewed.

An :class:`Assignment` carries the peer review configuration (how many reviews
a submission needs, how many reviews a student may be asked to perform) and
owns the ordered list of :class:`Criterion` objects reviewers score against.

NOTE: We use migrations, so if you make any edits to this file, you
need to then generate a matching migration for it using:

    ./manage.py makemigrations assessment

"""


import logging

from django.core.validators import MinValueValidator
from django.db import models

from model_utils import Choices
from model_utils.models import StatusModel, TimeStampedModel

logger = logging.getLogger("peerreview.assessment.models")  # pylint: disable=invalid-name


DEFAULT_CRITERIA = [
    {"name": "Content quality", "max_score": 10, "weight": 1.0},
    {"name": "Clarity", "max_score": 10, "weight": 1.0},
    {"name": "Originality", "max_score": 10, "weight": 1.0},
]


class Assignment(TimeStampedModel, StatusModel):
    """A gradable unit of coursework that supports peer review.

    Peer review only runs while the assignment is published. The
    ``reviews_required`` target applies to every submission; the
    ``reviews_per_student`` capacity caps how many reviews any one
    student is assigned across the whole assignment.
    """
    STATUS = Choices('draft', 'published', 'closed')  # implicit "status" field

    DEFAULT_MAX_POINTS = 100
    DEFAULT_REVIEWS_REQUIRED = 3
    DEFAULT_REVIEWS_PER_STUDENT = 3

    course_id = models.CharField(max_length=255, db_index=True)
    lesson_id = models.CharField(max_length=255, blank=True, null=True)
    instructor_id = models.CharField(max_length=40, db_index=True)

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    instructions = models.TextField(blank=True, default="")

    due_date = models.DateTimeField(null=True, blank=True)
    review_due_date = models.DateTimeField(null=True, blank=True)

    max_points = models.PositiveIntegerField(default=DEFAULT_MAX_POINTS)
    min_word_count = models.PositiveIntegerField(null=True, blank=True)
    max_word_count = models.PositiveIntegerField(null=True, blank=True)

    peer_review_enabled = models.BooleanField(default=True)
    reviews_required = models.PositiveIntegerField(
        default=DEFAULT_REVIEWS_REQUIRED, validators=[MinValueValidator(1)]
    )
    reviews_per_student = models.PositiveIntegerField(
        default=DEFAULT_REVIEWS_PER_STUDENT, validators=[MinValueValidator(1)]
    )
    anonymous_reviews = models.BooleanField(default=True)

    class Meta:
        ordering = ["-created", "-id"]
        app_label = "assessment"

    @property
    def is_published(self):
        return self.status == self.STATUS.published

    @property
    def allocates_reviews(self):
        """True when the allocation engine is allowed to run for this assignment."""
        return self.is_published and self.peer_review_enabled

    def is_instructor(self, user_id):
        return self.instructor_id == user_id

    def __repr__(self):
        return (
            "Assignment(id={0.id}, course_id={0.course_id}, status={0.status}, "
            "reviews_required={0.reviews_required}, "
            "reviews_per_student={0.reviews_per_student})"
        ).format(self)

    def __str__(self):
        return self.title


class Criterion(models.Model):
    """A named, weighted scoring dimension of an assignment.

    ``order_num`` is used for display only; the weighted mean of a review does
    not depend on criterion order.
    """
    DEFAULT_MAX_SCORE = 10
    DEFAULT_WEIGHT = 1.0

    assignment = models.ForeignKey(Assignment, related_name="criteria", on_delete=models.CASCADE)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, default="")
    max_score = models.PositiveIntegerField(default=DEFAULT_MAX_SCORE, validators=[MinValueValidator(1)])
    weight = models.FloatField(default=DEFAULT_WEIGHT)
    order_num = models.PositiveIntegerField()

    class Meta:
        ordering = ["assignment", "order_num"]
        app_label = "assessment"

    def normalize(self, score):
        """Scale a raw score for this criterion onto 0-100."""
        return float(score) / self.max_score * 100

    def __repr__(self):
        return (
            "Criterion(name={0.name}, max_score={0.max_score}, weight={0.weight})"
        ).format(self)

    def __str__(self):
        return self.name
