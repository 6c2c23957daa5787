"""
Errors for peer reviews.
"""
from .base import PeerReviewNotFoundError, PeerReviewRequestError, PeerReviewWorkflowError


class ReviewNotFoundError(PeerReviewNotFoundError):
    """No peer review exists with the requested id."""


class InvalidCriterionError(PeerReviewRequestError):
    """A score references a criterion that is not part of the assignment."""


class ReviewAlreadyCompletedError(PeerReviewWorkflowError):
    """The peer review was already submitted; reviews are submit-once."""
    error_code = 'ERR_ALREADY_COMPLETED'


class SelfReviewError(PeerReviewWorkflowError):
    """A student cannot be assigned to review their own submission."""
