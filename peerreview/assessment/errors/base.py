"""
Generic errors shared by every peer review API.

Each error kind carries an ``error_code`` so that the HTTP layer can map it
onto a response without inspecting the class hierarchy.
"""


class PeerReviewError(Exception):
    """ A generic error for errors that occur during peer review. """
    error_code = 'ERR_PEER_REVIEW'

    def get_error_code(self):
        return self.error_code


class PeerReviewNotFoundError(PeerReviewError):
    """Error indicating the requested entity does not exist."""
    error_code = 'ERR_NOT_FOUND'


class PeerReviewPermissionError(PeerReviewError):
    """Error indicating the caller has no rights over the requested entity."""
    error_code = 'ERR_FORBIDDEN'


class PeerReviewWorkflowError(PeerReviewError):
    """Error indicating a step in the workflow cannot be completed.

    Raised when the action is attempted outside the lifecycle state that
    allows it, for example grading a draft submission.

    """
    error_code = 'ERR_INVALID_STATE'


class PeerReviewRequestError(PeerReviewError):
    """Error indicating insufficient or incorrect parameters in the request.

    Raised when the request does not contain enough information, or incorrect
    information which does not allow the request to be processed.

    """
    error_code = 'ERR_VALIDATION'


class PeerReviewInternalError(PeerReviewError):
    """Error indicating an internal problem independent of API use.

    Raised when an internal error has occurred. This should be independent of
    the actions or parameters given to the API.

    """
    error_code = 'ERR_INTERNAL'


class AssignmentNotFoundError(PeerReviewNotFoundError):
    """No assignment exists with the requested id."""


class ScoreOutOfRangeError(PeerReviewRequestError):
    """A score falls outside the range allowed for it."""
