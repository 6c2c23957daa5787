"""Public interface for reviewers completing their peer reviews.

Reviews are created by the allocation engine; this API lets a reviewer look
at what they have been assigned, submit criterion scores once, and lets the
submission's author rate how helpful a completed review was.

"""


import logging

from django.db import DatabaseError, transaction

from peerreview import notifications
from peerreview.assessment.errors import (InvalidCriterionError, PeerReviewInternalError, PeerReviewPermissionError,
                                          PeerReviewRequestError, PeerReviewWorkflowError,
                                          ReviewAlreadyCompletedError, ReviewNotFoundError, ScoreOutOfRangeError)
from peerreview.assessment.models import PeerReview
from peerreview.assessment.serializers import CriterionSerializer, ReviewRequestSerializer, full_review_dict
from peerreview.workflow.models import Submission

logger = logging.getLogger("peerreview.assessment.api.peer")  # pylint: disable=invalid-name


def submit_review(
        review_id,
        reviewer_id,
        criteria_scores,
        overall_feedback="",
        strengths_note="",
        improvements_note="",
):
    """
    Complete a peer review with the reviewer's criterion scores.

    Each score is scaled onto 0-100 against its criterion's maximum and the
    review's total is the weighted mean of the scaled scores. Only the
    criteria that were scored count towards the total. Completing a review
    recomputes the peer score of the reviewed submission.

    Args:
        review_id (int): The review being completed.
        reviewer_id (str): The learner completing the review. Must be the
            learner the review was assigned to.
        criteria_scores (list): Dicts with the keys ``criterion_id``,
            ``score`` and optionally ``feedback``.

    Keyword Args:
        overall_feedback (unicode): Free-form feedback on the submission.
        strengths_note (unicode): What the submission does well.
        improvements_note (unicode): What the submission could improve.

    Returns:
        dict: the completed review, serialized.

    Raises:
        ReviewNotFoundError: No review with this id exists.
        PeerReviewPermissionError: The review is assigned to someone else.
        ReviewAlreadyCompletedError: The review was already submitted.
        InvalidCriterionError: A score references a criterion of another assignment.
        ScoreOutOfRangeError: A score is negative or above the criterion maximum.
        PeerReviewRequestError: The scores are malformed.
        PeerReviewInternalError: The review could not be saved.

    Examples:
        >>> criteria_scores = [
        ...     {"criterion_id": 1, "score": 8},
        ...     {"criterion_id": 2, "score": 6, "feedback": "Hard to follow in places."},
        ... ]
        >>> submit_review(12, "Tim", criteria_scores, overall_feedback="Nice work")
        {'id': 12, 'total_score': 66.66666666666667, 'is_completed': True, ...}
    """
    try:
        with transaction.atomic():
            review = _complete_review(
                review_id,
                reviewer_id,
                criteria_scores,
                overall_feedback,
                strengths_note,
                improvements_note,
            )
    except DatabaseError as ex:
        error_message = (
            "An error occurred while completing review {} by reviewer {}"
        ).format(review_id, reviewer_id)
        logger.exception(error_message)
        raise PeerReviewInternalError(error_message) from ex

    _log_review(review)
    return full_review_dict(review)


def _complete_review(review_id, reviewer_id, criteria_scores, overall_feedback, strengths_note, improvements_note):
    """
    Internal function for atomic review completion. Must run inside a transaction.
    """
    # Lock the review so two concurrent submissions cannot both complete it
    review = _get_review(review_id, PeerReview.objects.select_for_update(of=('self',)))

    if review.reviewer_id != reviewer_id:
        msg = "Learner {} is not the reviewer assigned to review {}".format(reviewer_id, review_id)
        logger.warning(msg)
        raise PeerReviewPermissionError(msg)

    if review.is_completed:
        msg = "Review {} has already been completed".format(review_id)
        logger.warning(msg)
        raise ReviewAlreadyCompletedError(msg)

    request = ReviewRequestSerializer(data={
        "criteria_scores": criteria_scores,
        "overall_feedback": overall_feedback or "",
        "strengths_note": strengths_note or "",
        "improvements_note": improvements_note or "",
    })
    if not request.is_valid():
        msg = "Invalid review request: {}".format(request.errors)
        logger.warning(msg)
        raise PeerReviewRequestError(msg)

    scored_criteria = _scored_criteria(review.submission.assignment, request.validated_data["criteria_scores"])
    review.complete(
        scored_criteria,
        overall_feedback=request.validated_data["overall_feedback"],
        strengths_note=request.validated_data["strengths_note"],
        improvements_note=request.validated_data["improvements_note"],
    )

    # Re-read the submission under lock so concurrent reviews of the same
    # submission all make it into the peer score.
    submission = Submission.objects.select_for_update().get(pk=review.submission_id)
    submission.update_peer_score()
    submission.save()
    review.submission = submission

    notifications.notify_review_received(submission.student_id, submission.id)
    return review


def _scored_criteria(assignment, criteria_scores):
    """
    Match each requested score with a criterion of the assignment.

    Returns:
        list of ``(Criterion, score, feedback)`` tuples.

    Raises:
        InvalidCriterionError
        ScoreOutOfRangeError
    """
    criteria = {criterion.id: criterion for criterion in assignment.criteria.all()}
    scored = []
    for item in criteria_scores:
        criterion = criteria.get(item["criterion_id"])
        if criterion is None:
            msg = "Criterion {} is not part of assignment {}".format(item["criterion_id"], assignment.id)
            logger.warning(msg)
            raise InvalidCriterionError(msg)

        score = item["score"]
        if score < 0 or score > criterion.max_score:
            msg = "Score for criterion {} must be between 0 and {}, got {}".format(
                criterion.name, criterion.max_score, score
            )
            logger.warning(msg)
            raise ScoreOutOfRangeError(msg)

        scored.append((criterion, score, item.get("feedback", "")))
    return scored


def get_pending_reviews(reviewer_id):
    """
    Retrieve the reviews a learner has been assigned and not yet completed.

    Args:
        reviewer_id (str): The learner whose open reviews to list.

    Returns:
        list of dict, oldest assignment first.
    """
    reviews = PeerReview.objects.filter(
        reviewer_id=reviewer_id, is_completed=False
    ).select_related("submission__assignment").order_by("created_at", "id")

    return [
        {
            "review_id": review.id,
            "submission_id": review.submission_id,
            "assignment_id": review.submission.assignment_id,
            "assignment_title": review.submission.assignment.title,
            "review_due_date": review.submission.assignment.review_due_date,
            "created_at": review.created_at,
        }
        for review in reviews
    ]


def get_review_to_complete(review_id, reviewer_id):
    """
    Retrieve everything a reviewer needs to complete a review.

    The author of the submission is hidden when the assignment uses
    anonymous reviews.

    Args:
        review_id (int): The review to open.
        reviewer_id (str): The learner opening it.

    Returns:
        dict with ``review``, ``submission`` and ``criteria`` keys.

    Raises:
        ReviewNotFoundError
        PeerReviewPermissionError
    """
    review = _get_review(review_id, PeerReview.objects.all())
    if review.reviewer_id != reviewer_id:
        msg = "Learner {} is not the reviewer assigned to review {}".format(reviewer_id, review_id)
        logger.warning(msg)
        raise PeerReviewPermissionError(msg)

    submission = review.submission
    assignment = submission.assignment
    return {
        "review": full_review_dict(review),
        "submission": {
            "id": submission.id,
            "student_id": None if assignment.anonymous_reviews else submission.student_id,
            "content": submission.content,
            "file_url": submission.file_url,
            "file_name": submission.file_name,
            "submitted_at": submission.submitted_at,
        },
        "criteria": CriterionSerializer(assignment.criteria.all(), many=True).data,
    }


def rate_review_helpfulness(review_id, student_id, rating):
    """
    Let the author of a submission rate a review they received.

    The rating is feedback on review quality and plays no part in grading.

    Args:
        review_id (int): The completed review being rated.
        student_id (str): The author of the reviewed submission.
        rating (int): From 1 to 5.

    Returns:
        dict: the rated review, serialized.

    Raises:
        PeerReviewRequestError: The rating is out of range.
        ReviewNotFoundError
        PeerReviewPermissionError: The caller did not author the submission.
        PeerReviewWorkflowError: The review has not been completed yet.
    """
    if not PeerReview.MIN_HELPFULNESS_RATING <= rating <= PeerReview.MAX_HELPFULNESS_RATING:
        raise PeerReviewRequestError(
            "Rating must be between {} and {}".format(
                PeerReview.MIN_HELPFULNESS_RATING, PeerReview.MAX_HELPFULNESS_RATING
            )
        )

    review = _get_review(review_id, PeerReview.objects.all())
    if review.submission.student_id != student_id:
        msg = "Only the author of submission {} can rate its reviews".format(review.submission_id)
        logger.warning(msg)
        raise PeerReviewPermissionError(msg)

    if not review.is_completed:
        raise PeerReviewWorkflowError("Review {} has not been completed yet".format(review_id))

    try:
        review.helpfulness_rating = rating
        review.save(update_fields=["helpfulness_rating"])
    except DatabaseError as ex:
        error_message = "An error occurred while rating review {}".format(review_id)
        logger.exception(error_message)
        raise PeerReviewInternalError(error_message) from ex

    return full_review_dict(review, anonymize=review.submission.assignment.anonymous_reviews)


def _get_review(review_id, queryset):
    try:
        return queryset.select_related("submission__assignment").get(pk=review_id)
    except PeerReview.DoesNotExist as ex:
        raise ReviewNotFoundError("No peer review exists with id {}".format(review_id)) from ex


def _log_review(review):
    """
    Log the completion of a peer review.

    Args:
        review (PeerReview)

    Returns:
        None

    """
    logger.info(
        "Created peer review %s for submission %s, reviewed by %s, with total score %s",
        review.id, review.submission_id, review.reviewer_id, review.total_score
    )
