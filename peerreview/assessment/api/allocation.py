"""Public interface for allocating peer reviewers to submissions.

An allocation pass looks at every submission of an assignment that still needs
reviewers and pairs it with other learners who have submitted, until each
submission has ``reviews_required`` reviews (pending or completed) or no
eligible reviewer is left.

A pass is safe to run any number of times, including concurrently for the
same assignment: passes are serialized on a row lock of the assignment, all
counts are re-derived from the database inside the lock, and each pairing is
an insert-if-absent on the (submission, reviewer) unique constraint.

"""


from collections import Counter, defaultdict
import logging

from django.db import DatabaseError, IntegrityError, transaction

from peerreview import notifications
from peerreview.assessment.errors import AssignmentNotFoundError, PeerReviewInternalError, PeerReviewWorkflowError
from peerreview.assessment.models import Assignment, PeerReview
from peerreview.workflow.models import Submission

logger = logging.getLogger("peerreview.assessment.api.allocation")  # pylint: disable=invalid-name

# Fewer submitted learners than this cannot review each other
MIN_SUBMISSIONS_FOR_REVIEW = 2


def allocate_peer_reviews(assignment_id):
    """
    Run one allocation pass for an assignment.

    Nothing is allocated unless peer review is enabled for the assignment and
    at least two learners have submitted. A submission that cannot
    reach ``reviews_required`` because the reviewer pool ran out is reported in
    ``under_reviewed``; it is not an error.

    Args:
        assignment_id (int): The assignment to allocate reviewers for.

    Returns:
        dict with the keys

        * ``created``: one dict per new pairing, with ``review_id``,
          ``submission_id`` and ``reviewer_id``.
        * ``under_reviewed``: one dict per submission left below target, with
          ``submission_id``, ``existing_count`` and ``reviews_required``.

    Raises:
        AssignmentNotFoundError: No assignment with this id exists.
        PeerReviewWorkflowError: The assignment is not published.
        PeerReviewInternalError: The pass failed and was rolled back.

    Examples:
        >>> allocate_peer_reviews(42)
        {
            'created': [{'review_id': 7, 'submission_id': 3, 'reviewer_id': u'Bob'}],
            'under_reviewed': []
        }

    """
    try:
        with transaction.atomic():
            result = _allocate(assignment_id)
    except DatabaseError as ex:
        error_message = (
            "An internal error occurred while allocating peer reviews "
            "for assignment {}"
        ).format(assignment_id)
        logger.exception(error_message)
        raise PeerReviewInternalError(error_message) from ex

    if result["created"] or result["under_reviewed"]:
        logger.info(
            "Allocated %d peer reviews for assignment %s; %d submissions are under-reviewed",
            len(result["created"]), assignment_id, len(result["under_reviewed"])
        )
    return result


def _allocate(assignment_id):
    """
    Allocation body. Must run inside a transaction.
    """
    try:
        # Serializes concurrent passes for the same assignment.
        assignment = Assignment.objects.select_for_update().get(pk=assignment_id)
    except Assignment.DoesNotExist as ex:
        raise AssignmentNotFoundError(
            "No assignment exists with id {}".format(assignment_id)
        ) from ex

    if not assignment.is_published:
        raise PeerReviewWorkflowError(
            "Assignment {} is {}; reviewers are only allocated while it is published".format(
                assignment_id, assignment.status
            )
        )

    result = {"created": [], "under_reviewed": []}
    if not assignment.allocates_reviews:
        logger.debug("Skipping allocation for assignment %s: %r", assignment_id, assignment)
        return result

    submitted = list(
        Submission.objects.filter(
            assignment=assignment, status__in=Submission.SUBMITTED_STATUSES
        ).order_by("submitted_at", "id")
    )
    if len(submitted) < MIN_SUBMISSIONS_FOR_REVIEW:
        return result

    reviews = PeerReview.objects.filter(submission__assignment=assignment).values_list(
        "submission_id", "reviewer_id"
    )
    reviewers_by_submission = defaultdict(set)
    load = Counter()
    for submission_id, reviewer_id in reviews:
        reviewers_by_submission[submission_id].add(reviewer_id)
        load[reviewer_id] += 1

    # Learners who have handed in work, in submission order
    learners = [submission.student_id for submission in submitted]
    submission_rank = {student_id: rank for rank, student_id in enumerate(learners)}

    for submission in submitted:
        if submission.status not in Submission.ALLOCATABLE_STATUSES:
            continue

        assigned = reviewers_by_submission[submission.id]
        if len(assigned) >= assignment.reviews_required:
            continue

        candidates = _candidate_pool(submission, assigned, learners, load, assignment.reviews_per_student)
        # Least loaded reviewers first, then submission order
        candidates.sort(key=lambda student_id: (load[student_id], submission_rank[student_id]))

        for reviewer_id in candidates:
            if len(assigned) >= assignment.reviews_required:
                break

            review = _create_review_if_absent(submission, reviewer_id)
            assigned.add(reviewer_id)
            load[reviewer_id] += 1
            if review is None:
                continue

            result["created"].append({
                "review_id": review.id,
                "submission_id": submission.id,
                "reviewer_id": reviewer_id,
            })
            notifications.notify_reviewer_assigned(reviewer_id, submission.id)

        if assigned and submission.advance(Submission.STATUS.in_review):
            submission.save()

        if len(assigned) < assignment.reviews_required:
            result["under_reviewed"].append({
                "submission_id": submission.id,
                "existing_count": len(assigned),
                "reviews_required": assignment.reviews_required,
            })

    return result


def _candidate_pool(submission, assigned, learners, load, reviews_per_student):
    """
    Learners who may still be asked to review `submission`.

    Excludes the author, learners already paired with the submission, and
    learners who have reached their review capacity.
    """
    return [
        student_id for student_id in learners
        if student_id != submission.student_id
        and student_id not in assigned
        and load[student_id] < reviews_per_student
    ]


def _create_review_if_absent(submission, reviewer_id):
    """
    Insert a pending review for the pair, unless one already exists.

    Returns:
        PeerReview, or None if the pair already existed.
    """
    try:
        with transaction.atomic():
            return PeerReview.objects.create(submission=submission, reviewer_id=reviewer_id)
    except IntegrityError:
        # Someone else already paired this reviewer with this submission,
        # so we don't need to do anything.
        logger.info(
            "Learner %s is already reviewing submission %s", reviewer_id, submission.id
        )
        return None


def get_allocation_status(assignment_id):
    """
    Report how far each open submission is from its review target.

    Args:
        assignment_id (int): The assignment to report on.

    Returns:
        list of dict: ``submission_id``, ``student_id``, ``existing_count``,
            ``completed_count`` and ``reviews_required`` for each submission
            that is submitted or in review, in submission order.

    Raises:
        AssignmentNotFoundError: No assignment with this id exists.
    """
    try:
        assignment = Assignment.objects.get(pk=assignment_id)
    except Assignment.DoesNotExist as ex:
        raise AssignmentNotFoundError(
            "No assignment exists with id {}".format(assignment_id)
        ) from ex

    submissions = Submission.objects.filter(
        assignment=assignment, status__in=Submission.ALLOCATABLE_STATUSES
    ).order_by("submitted_at", "id")

    existing = Counter()
    completed = Counter()
    for submission_id, is_completed in PeerReview.objects.filter(
            submission__assignment=assignment
    ).values_list("submission_id", "is_completed"):
        existing[submission_id] += 1
        if is_completed:
            completed[submission_id] += 1

    return [
        {
            "submission_id": submission.id,
            "student_id": submission.student_id,
            "existing_count": existing[submission.id],
            "completed_count": completed[submission.id],
            "reviews_required": assignment.reviews_required,
        }
        for submission in submissions
    ]
