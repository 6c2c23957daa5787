"""
Public interface for the submission workflow.

Learners save drafts and submit their work through this API. Submitting
starts (or continues) peer review for the assignment by triggering an
allocation pass.
"""


import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Count, Q
from django.utils.timezone import now

from peerreview.assessment.api.allocation import allocate_peer_reviews
from peerreview.assessment.errors import (AssignmentNotFoundError, PeerReviewInternalError, PeerReviewPermissionError,
                                          PeerReviewRequestError, PeerReviewWorkflowError)
from peerreview.assessment.models import Assignment
from peerreview.assessment.serializers import serialize_reviews

from .errors import SubmissionClosedError, SubmissionNotFoundError
from .models import Submission
from .serializers import AnswerSerializer, SubmissionSerializer

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


def save_draft(assignment_id, student_id, answer):
    """
    Save a learner's work without submitting it.

    Args:
        assignment_id (int): The assignment being answered.
        student_id (str): The learner.
        answer (dict): Any of ``content``, ``file_url``, ``file_name``,
            ``file_size`` and ``self_assessment``.

    Returns:
        dict: the draft submission, serialized.

    Raises:
        AssignmentNotFoundError
        SubmissionClosedError: The assignment is not open, or the learner
            already submitted.
        PeerReviewRequestError: The answer is malformed.
    """
    answer = _validate_answer(answer)
    try:
        with transaction.atomic():
            assignment = _get_open_assignment(assignment_id)
            submission, __ = Submission.objects.select_for_update().get_or_create(
                assignment=assignment, student_id=student_id
            )
            if submission.status != Submission.STATUS.draft:
                raise SubmissionClosedError(
                    "Learner {} has already submitted to assignment {}".format(student_id, assignment_id)
                )
            _set_answer(submission, answer)
            submission.save()
    except DatabaseError as ex:
        error_message = "An error occurred while saving a draft for learner {}".format(student_id)
        logger.exception(error_message)
        raise PeerReviewInternalError(error_message) from ex

    return SubmissionSerializer(submission).data


def submit(assignment_id, student_id, answer):
    """
    Submit a learner's work for peer review.

    Submitting again before any review of the work has been completed
    replaces the content and re-stamps ``submitted_at``; the status never
    moves backward. Every submission triggers an allocation pass for the
    assignment.

    Args:
        assignment_id (int): The assignment being answered.
        student_id (str): The learner.
        answer (dict): Any of ``content``, ``file_url``, ``file_name``,
            ``file_size`` and ``self_assessment``.

    Returns:
        dict: the submission, serialized.

    Raises:
        AssignmentNotFoundError
        SubmissionClosedError: The assignment is not published, is past its
            due date, or the submission has already been reviewed.
        PeerReviewRequestError: The answer is malformed or outside the word
            count limits.
        PeerReviewInternalError

    Examples:
        >>> submit(42, "Tim", {"content": "Tim's essay"})
        {'id': 3, 'status': 'submitted', 'student_id': 'Tim', ...}
    """
    answer = _validate_answer(answer)
    try:
        with transaction.atomic():
            assignment = _get_open_assignment(assignment_id)
            if assignment.due_date and now() > assignment.due_date:
                raise SubmissionClosedError("The due date of assignment {} has passed".format(assignment_id))
            _check_word_count(assignment, answer.get("content"))

            submission, __ = Submission.objects.select_for_update().get_or_create(
                assignment=assignment, student_id=student_id
            )
            if submission.has_completed_reviews:
                raise SubmissionClosedError(
                    "Submission {} has already been reviewed and cannot be changed".format(submission.id)
                )

            _set_answer(submission, answer)
            submission.submitted_at = now()
            submission.advance(Submission.STATUS.submitted)
            submission.save()
    except DatabaseError as ex:
        error_message = "An error occurred while submitting for learner {}".format(student_id)
        logger.exception(error_message)
        raise PeerReviewInternalError(error_message) from ex

    logger.info("Learner %s submitted submission %s to assignment %s", student_id, submission.id, assignment_id)
    _trigger_allocation(assignment_id)

    submission.refresh_from_db()
    return SubmissionSerializer(submission).data


def get_submission(submission_id, user_id):
    """
    Retrieve a submission with the completed reviews it received.

    Only the author and the assignment's instructor may see a submission.
    The author does not see who reviewed them when reviews are anonymous.

    Raises:
        SubmissionNotFoundError
        PeerReviewPermissionError
    """
    submission = _get_submission(submission_id)
    assignment = submission.assignment
    is_author = submission.student_id == user_id
    if not is_author and not assignment.is_instructor(user_id):
        msg = "User {} is not allowed to view submission {}".format(user_id, submission_id)
        logger.warning(msg)
        raise PeerReviewPermissionError(msg)

    submission_dict = dict(SubmissionSerializer(submission).data)
    submission_dict["received_reviews"] = serialize_reviews(
        submission.received_reviews.filter(is_completed=True),
        anonymize=is_author and assignment.anonymous_reviews,
    )
    return submission_dict


def get_student_submissions(student_id):
    """
    List a learner's submissions across assignments, newest first.
    """
    submissions = Submission.objects.filter(student_id=student_id).annotate(
        completed_review_count=Count('received_reviews', filter=Q(received_reviews__is_completed=True))
    ).order_by("-submitted_at", "-id")
    return SubmissionSerializer(submissions, many=True).data


def get_review_status(submission_id):
    """
    Report how many reviews a submission has against its target.

    When ``existing_count`` stays below ``reviews_required`` after an
    allocation pass, the pass ran out of eligible reviewers.

    Returns:
        dict with ``submission_id``, ``status``, ``existing_count``,
        ``completed_count`` and ``reviews_required``.

    Raises:
        SubmissionNotFoundError
    """
    submission = _get_submission(submission_id)
    counts = submission.received_reviews.aggregate(
        existing_count=Count('id'),
        completed_count=Count('id', filter=Q(is_completed=True)),
    )
    return {
        "submission_id": submission.id,
        "status": submission.status,
        "existing_count": counts["existing_count"],
        "completed_count": counts["completed_count"],
        "reviews_required": submission.assignment.reviews_required,
    }


def _trigger_allocation(assignment_id):
    """
    Run an allocation pass now, or queue one when allocation is asynchronous.
    """
    if getattr(settings, 'PEER_REVIEW_ALLOCATE_ASYNC', False):
        from peerreview.tasks import allocate_peer_reviews_task
        transaction.on_commit(lambda: allocate_peer_reviews_task.delay(assignment_id))
    else:
        try:
            allocate_peer_reviews(assignment_id)
        except PeerReviewWorkflowError:
            # The assignment was closed after the submission committed
            logger.warning("Skipped allocation for assignment %s", assignment_id, exc_info=True)
        except PeerReviewInternalError:
            # The submission is saved; the next pass picks up its reviewers
            logger.warning("Allocation for assignment %s failed after a submission", assignment_id, exc_info=True)


def _validate_answer(answer):
    """
    Validate an answer, keeping only the fields the learner supplied.
    """
    answer = answer or {}
    serializer = AnswerSerializer(data=answer)
    if not serializer.is_valid():
        msg = "Invalid answer: {}".format(serializer.errors)
        logger.warning(msg)
        raise PeerReviewRequestError(msg)
    return {field: value for field, value in serializer.validated_data.items() if field in answer}


def _check_word_count(assignment, content):
    if not content:
        return

    word_count = len(content.split())
    if assignment.min_word_count and word_count < assignment.min_word_count:
        raise PeerReviewRequestError("Minimum word count is {}".format(assignment.min_word_count))
    if assignment.max_word_count and word_count > assignment.max_word_count:
        raise PeerReviewRequestError("Maximum word count is {}".format(assignment.max_word_count))


def _set_answer(submission, answer):
    for field, value in answer.items():
        setattr(submission, field, value)


def _get_open_assignment(assignment_id):
    try:
        assignment = Assignment.objects.get(pk=assignment_id)
    except Assignment.DoesNotExist as ex:
        raise AssignmentNotFoundError("No assignment exists with id {}".format(assignment_id)) from ex

    if not assignment.is_published:
        raise SubmissionClosedError("Assignment {} is not open for submissions".format(assignment_id))
    return assignment


def _get_submission(submission_id):
    try:
        return Submission.objects.select_related("assignment").get(pk=submission_id)
    except Submission.DoesNotExist as ex:
        raise SubmissionNotFoundError("No submission exists with id {}".format(submission_id)) from ex
