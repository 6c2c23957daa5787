"""
Public interface for instructor grading of submissions.
"""


import logging

from django.db import DatabaseError, transaction

from peerreview import notifications
from peerreview.assessment.errors import (PeerReviewInternalError, PeerReviewPermissionError, ScoreOutOfRangeError,
                                          SubmissionNotGradableError)
from peerreview.assessment.serializers import GradeRequestSerializer
from peerreview.workflow.errors import SubmissionNotFoundError
from peerreview.workflow.models import Submission
from peerreview.workflow.serializers import SubmissionSerializer

logger = logging.getLogger("peerreview.assessment.api.staff")  # pylint: disable=invalid-name


def grade_submission(submission_id, instructor_id, score, feedback=""):
    """
    Record the instructor's grade for a submission and approve it.

    The final score blends the instructor score (70%) with the peer score
    (30%). When the submission has no peer score yet, the instructor score is
    the final score. Grading does not wait for peer reviews to finish.

    Args:
        submission_id (int): The submission being graded.
        instructor_id (str): The instructor of the submission's assignment.
        score (float): Between 0 and the assignment's ``max_points``.

    Keyword Args:
        feedback (unicode): Instructor feedback for the learner.

    Returns:
        dict: the graded submission, serialized.

    Raises:
        SubmissionNotFoundError
        PeerReviewPermissionError: The caller is not the assignment's instructor.
        SubmissionNotGradableError: The submission is still a draft.
        ScoreOutOfRangeError: The score is not a number in ``[0, max_points]``.
        PeerReviewInternalError

    Examples:
        >>> grade_submission(3, "instructor", 90, feedback="Solid work")
        {'id': 3, 'instructor_score': 90.0, 'peer_score': 70.0, 'final_score': 84.0, 'status': 'approved', ...}
    """
    request = GradeRequestSerializer(data={"score": score, "feedback": feedback or ""})
    if not request.is_valid():
        msg = "Invalid grade for submission {}: {}".format(submission_id, request.errors)
        logger.warning(msg)
        raise ScoreOutOfRangeError(msg)
    score = request.validated_data["score"]
    feedback = request.validated_data["feedback"]

    try:
        with transaction.atomic():
            try:
                submission = Submission.objects.select_for_update().select_related("assignment").get(
                    pk=submission_id
                )
            except Submission.DoesNotExist as ex:
                raise SubmissionNotFoundError(
                    "No submission exists with id {}".format(submission_id)
                ) from ex

            assignment = submission.assignment
            if not assignment.is_instructor(instructor_id):
                msg = "User {} is not the instructor of assignment {}".format(instructor_id, assignment.id)
                logger.warning(msg)
                raise PeerReviewPermissionError(msg)

            if not submission.is_submitted:
                raise SubmissionNotGradableError(
                    "Submission {} has not been submitted and cannot be graded".format(submission_id)
                )

            if score < 0 or score > assignment.max_points:
                raise ScoreOutOfRangeError(
                    "Score must be between 0 and {}, got {}".format(assignment.max_points, score)
                )

            # The peer score is recomputed so the blend never uses a stale value
            submission.update_peer_score()
            submission.record_instructor_score(score, feedback)
            submission.save()

            notifications.notify_graded(submission.student_id, submission.id, submission.final_score)
    except DatabaseError as ex:
        error_message = "An error occurred while grading submission {}".format(submission_id)
        logger.exception(error_message)
        raise PeerReviewInternalError(error_message) from ex

    logger.info(
        "Instructor %s graded submission %s: instructor score %s, peer score %s, final score %s",
        instructor_id, submission.id, submission.instructor_score, submission.peer_score, submission.final_score
    )
    return SubmissionSerializer(submission).data
