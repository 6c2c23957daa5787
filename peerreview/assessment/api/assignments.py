"""
Public interface for instructors managing peer reviewed assignments.

Assignments are created as drafts, published to open them for submissions
and peer review, and closed when the work is over.
"""


import logging

from django.db import DatabaseError, transaction
from django.db.models import Count, Q

from peerreview.assessment.errors import (AssignmentNotFoundError, PeerReviewInternalError, PeerReviewPermissionError,
                                          PeerReviewRequestError, PeerReviewWorkflowError)
from peerreview.assessment.models import Assignment
from peerreview.assessment.serializers import (AssignmentSerializer, InvalidAssignment, assignment_from_dict,
                                               serialize_reviews)
from peerreview.workflow.models import Submission
from peerreview.workflow.serializers import SubmissionSerializer

logger = logging.getLogger("peerreview.assessment.api.assignments")  # pylint: disable=invalid-name

# Fields an instructor may change after creating an assignment
UPDATABLE_FIELDS = (
    'title', 'description', 'instructions', 'due_date', 'review_due_date',
    'max_points', 'min_word_count', 'max_word_count', 'peer_review_enabled',
    'reviews_required', 'reviews_per_student', 'anonymous_reviews',
)


def create_assignment(instructor_id, assignment_dict):
    """
    Create a draft assignment, with its criteria.

    Args:
        instructor_id (str): The instructor who owns the assignment.
        assignment_dict (dict): Assignment fields. ``criteria`` is an ordered
            list of dicts with ``name`` and optionally ``description``,
            ``max_score`` and ``weight``. Without criteria the assignment
            gets the default ones.

    Returns:
        dict: the assignment, serialized.

    Raises:
        PeerReviewRequestError: The assignment definition is invalid.
        PeerReviewInternalError

    Examples:
        >>> create_assignment("instructor", {
        ...     "course_id": "course-v1:Demo",
        ...     "title": "Essay",
        ...     "reviews_required": 2,
        ...     "criteria": [{"name": "Argument", "max_score": 10, "weight": 2}],
        ... })
        {'id': 1, 'status': 'draft', 'criteria': [...], ...}
    """
    assignment_dict = dict(assignment_dict, instructor_id=instructor_id)
    try:
        with transaction.atomic():
            assignment = assignment_from_dict(assignment_dict)
    except InvalidAssignment as ex:
        msg = "The assignment definition is not valid."
        logger.warning(msg, exc_info=True)
        raise PeerReviewRequestError(msg) from ex
    except DatabaseError as ex:
        error_message = "An error occurred while creating an assignment for instructor {}".format(instructor_id)
        logger.exception(error_message)
        raise PeerReviewInternalError(error_message) from ex

    logger.info("Instructor %s created assignment %s", instructor_id, assignment.id)
    return AssignmentSerializer(assignment).data


def get_assignment(assignment_id, student_id=None):
    """
    Retrieve an assignment and, optionally, a learner's own submission to it.

    Args:
        assignment_id (int)

    Keyword Args:
        student_id (str): If given, include this learner's submission and the
            completed reviews it received. Reviewer ids are hidden when the
            assignment is anonymous.

    Returns:
        dict: the assignment, serialized, with a ``user_submission`` key.

    Raises:
        AssignmentNotFoundError
    """
    assignment = _get_assignment(assignment_id)
    assignment_dict = dict(AssignmentSerializer(assignment).data)
    assignment_dict["submission_count"] = assignment.submissions.count()
    assignment_dict["user_submission"] = None

    if student_id is not None:
        submission = assignment.submissions.filter(student_id=student_id).first()
        if submission is not None:
            submission_dict = dict(SubmissionSerializer(submission).data)
            submission_dict["received_reviews"] = serialize_reviews(
                submission.received_reviews.filter(is_completed=True),
                anonymize=assignment.anonymous_reviews,
            )
            assignment_dict["user_submission"] = submission_dict

    return assignment_dict


def get_assignments(course_id=None, instructor_id=None, status=None):
    """
    List assignments, newest first.

    Keyword Args:
        course_id (str): Only assignments of this course.
        instructor_id (str): Only assignments owned by this instructor.
        status (str): Only assignments in this status.

    Returns:
        list of dict: serialized assignments, each with ``submission_count``
            and ``criteria_count``.

    Raises:
        PeerReviewRequestError: The status is not an assignment status.
    """
    assignments = Assignment.objects.all()
    if course_id is not None:
        assignments = assignments.filter(course_id=course_id)
    if instructor_id is not None:
        assignments = assignments.filter(instructor_id=instructor_id)
    if status is not None:
        if status not in Assignment.STATUS:
            raise PeerReviewRequestError("Unknown assignment status {}".format(status))
        assignments = assignments.filter(status=status)

    assignments = assignments.annotate(
        submission_count=Count("submissions", distinct=True),
        criteria_count=Count("criteria", distinct=True),
    ).prefetch_related("criteria").order_by("-created", "-id")

    return [
        dict(
            AssignmentSerializer(assignment).data,
            submission_count=assignment.submission_count,
            criteria_count=assignment.criteria_count,
        )
        for assignment in assignments
    ]


def update_assignment(assignment_id, instructor_id, changes):
    """
    Change the settings of an assignment.

    Criteria cannot be changed here, and neither can the status; use
    :func:`publish_assignment` and :func:`close_assignment` for that.

    Args:
        assignment_id (int)
        instructor_id (str): Must be the assignment's instructor.
        changes (dict): Any of ``UPDATABLE_FIELDS``.

    Returns:
        dict: the updated assignment, serialized.

    Raises:
        AssignmentNotFoundError
        PeerReviewPermissionError
        PeerReviewRequestError: A field is unknown, not updatable or invalid.
    """
    assignment = _get_assignment_for_instructor(assignment_id, instructor_id)

    unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
    if unknown:
        raise PeerReviewRequestError("These fields cannot be updated: {}".format(", ".join(unknown)))

    serializer = AssignmentSerializer(assignment, data=changes, partial=True)
    if not serializer.is_valid():
        msg = "Invalid assignment update: {}".format(serializer.errors)
        logger.warning(msg)
        raise PeerReviewRequestError(msg)

    try:
        assignment = serializer.save()
    except DatabaseError as ex:
        error_message = "An error occurred while updating assignment {}".format(assignment_id)
        logger.exception(error_message)
        raise PeerReviewInternalError(error_message) from ex

    return AssignmentSerializer(assignment).data


def publish_assignment(assignment_id, instructor_id):
    """
    Open a draft assignment for submissions and peer review.

    Raises:
        AssignmentNotFoundError
        PeerReviewPermissionError
        PeerReviewWorkflowError: The assignment is not a draft.
    """
    return _change_status(assignment_id, instructor_id, Assignment.STATUS.draft, Assignment.STATUS.published)


def close_assignment(assignment_id, instructor_id):
    """
    Stop accepting submissions and allocating reviewers for an assignment.

    Raises:
        AssignmentNotFoundError
        PeerReviewPermissionError
        PeerReviewWorkflowError: The assignment is not published.
    """
    return _change_status(assignment_id, instructor_id, Assignment.STATUS.published, Assignment.STATUS.closed)


def get_assignment_submissions(assignment_id, instructor_id):
    """
    List every submission to an assignment, newest first.

    Each submission includes the number of completed reviews it received.

    Raises:
        AssignmentNotFoundError
        PeerReviewPermissionError
    """
    assignment = _get_assignment_for_instructor(assignment_id, instructor_id)
    submissions = Submission.objects.filter(assignment=assignment).annotate(
        completed_review_count=Count('received_reviews', filter=Q(received_reviews__is_completed=True))
    ).order_by("-submitted_at", "-id")
    return SubmissionSerializer(submissions, many=True).data


def _change_status(assignment_id, instructor_id, from_status, to_status):
    with transaction.atomic():
        assignment = _get_assignment_for_instructor(
            assignment_id, instructor_id, Assignment.objects.select_for_update()
        )
        if assignment.status != from_status:
            raise PeerReviewWorkflowError(
                "Assignment {} is {}; only a {} assignment can become {}".format(
                    assignment_id, assignment.status, from_status, to_status
                )
            )
        assignment.status = to_status
        assignment.save()

    logger.info("Assignment %s is now %s", assignment_id, to_status)
    return AssignmentSerializer(assignment).data


def _get_assignment(assignment_id, queryset=None):
    queryset = Assignment.objects.all() if queryset is None else queryset
    try:
        return queryset.get(pk=assignment_id)
    except Assignment.DoesNotExist as ex:
        raise AssignmentNotFoundError("No assignment exists with id {}".format(assignment_id)) from ex


def _get_assignment_for_instructor(assignment_id, instructor_id, queryset=None):
    assignment = _get_assignment(assignment_id, queryset)
    if not assignment.is_instructor(instructor_id):
        msg = "User {} is not the instructor of assignment {}".format(instructor_id, assignment_id)
        logger.warning(msg)
        raise PeerReviewPermissionError(msg)
    return assignment
