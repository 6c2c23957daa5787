"""
Errors for instructor grading.
"""

from .base import PeerReviewWorkflowError


class SubmissionNotGradableError(PeerReviewWorkflowError):
    """The submission has not been submitted yet, so it cannot be graded."""
