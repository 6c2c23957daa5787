"""
Create factories for assignments, submissions and peer reviews.
"""


import datetime

import factory
from factory.django import DjangoModelFactory
from pytz import UTC

from peerreview.assessment.models import Assignment, CriteriaScore, Criterion, PeerReview
from peerreview.workflow.models import Submission


class AssignmentFactory(DjangoModelFactory):
    """ Create mock Assignment models. """
    class Meta:
        model = Assignment

    course_id = factory.Sequence(lambda n: 'course-v1:Demo+{}'.format(n))  # pylint: disable=unnecessary-lambda
    lesson_id = factory.Sequence(lambda n: 'lesson_{}'.format(n))  # pylint: disable=unnecessary-lambda
    instructor_id = 'instructor'
    title = factory.Sequence(lambda n: 'Assignment {}'.format(n))  # pylint: disable=unnecessary-lambda
    description = 'Write an essay.'
    status = Assignment.STATUS.draft
    reviews_required = 3
    reviews_per_student = 3


class CriterionFactory(DjangoModelFactory):
    """ Create mock Criterion models. """
    class Meta:
        model = Criterion

    assignment = factory.SubFactory(AssignmentFactory)
    name = factory.Sequence(lambda n: 'criterion_{}'.format(n))  # pylint: disable=unnecessary-lambda
    description = 'This is a fake criterion.'
    max_score = 10
    weight = 1.0
    order_num = factory.Sequence(lambda n: n)


class SubmissionFactory(DjangoModelFactory):
    """ Create mock Submission models. """
    class Meta:
        model = Submission

    assignment = factory.SubFactory(AssignmentFactory, status=Assignment.STATUS.published)
    student_id = factory.Sequence(lambda n: 'student_{}'.format(n))  # pylint: disable=unnecessary-lambda
    content = 'Lorem ipsum dolor sit amet'
    status = Submission.STATUS.submitted
    submitted_at = factory.Sequence(
        lambda n: datetime.datetime(2024, 1, 1, tzinfo=UTC) + datetime.timedelta(minutes=n)
    )


class PeerReviewFactory(DjangoModelFactory):
    """ Create mock PeerReview models. """
    class Meta:
        model = PeerReview

    submission = factory.SubFactory(SubmissionFactory)
    reviewer_id = factory.Sequence(lambda n: 'reviewer_{}'.format(n))  # pylint: disable=unnecessary-lambda


class CriteriaScoreFactory(DjangoModelFactory):
    """ Create mock CriteriaScore models. """
    class Meta:
        model = CriteriaScore

    review = factory.SubFactory(PeerReviewFactory)
    criterion = factory.SubFactory(CriterionFactory)
    score = 5
    feedback = ''
