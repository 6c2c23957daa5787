"""
Errors defined by the workflow API.
"""

from peerreview.assessment.errors import PeerReviewNotFoundError, PeerReviewWorkflowError


class SubmissionNotFoundError(PeerReviewNotFoundError):
    """This error is raised when no submission is found for the request."""


class SubmissionClosedError(PeerReviewWorkflowError):
    """The assignment does not accept submissions, or the submission can no
    longer be changed because it has already received a review.
    """
