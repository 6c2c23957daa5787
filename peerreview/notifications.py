"""
Outbound notifications sent by the peer review engine.

Delivery belongs to the rest of the platform. To keep the engine independent
of it we use dependency injection: the ``PEER_REVIEW_NOTIFICATION_BACKEND``
setting names the class that actually delivers messages. The default backend
only logs.

Notifications are fire-and-forget. They are sent after the surrounding
transaction commits, and a failure to deliver is logged and never raised
to the caller.
"""


import logging

from django.conf import settings
from django.db import transaction
from django.utils.module_loading import import_string

logger = logging.getLogger('peerreview.notifications')  # pylint: disable=invalid-name

DEFAULT_NOTIFICATION_BACKEND = 'peerreview.notifications.LoggingNotificationBackend'

REVIEWER_ASSIGNED = 'reviewer_assigned'
REVIEW_RECEIVED = 'review_received'
GRADED = 'graded'

EVENTS = (REVIEWER_ASSIGNED, REVIEW_RECEIVED, GRADED)


class NotificationBackend:
    """
    Interface for notification backends. One method per event.
    """

    def reviewer_assigned(self, reviewer_id, submission_id):
        raise NotImplementedError

    def review_received(self, student_id, submission_id):
        raise NotImplementedError

    def graded(self, student_id, submission_id, final_score):
        raise NotImplementedError


class LoggingNotificationBackend(NotificationBackend):
    """
    Backend that records notifications in the log instead of delivering them.
    """

    def reviewer_assigned(self, reviewer_id, submission_id):
        logger.info("Learner %s was assigned to review submission %s", reviewer_id, submission_id)

    def review_received(self, student_id, submission_id):
        logger.info("Learner %s received a review on submission %s", student_id, submission_id)

    def graded(self, student_id, submission_id, final_score):
        logger.info(
            "Learner %s was graded on submission %s with final score %s",
            student_id, submission_id, final_score
        )


def get_backend():
    """
    Instantiate the configured notification backend.
    """
    backend_path = getattr(settings, 'PEER_REVIEW_NOTIFICATION_BACKEND', DEFAULT_NOTIFICATION_BACKEND)
    return import_string(backend_path)()


def send_notification(event, **payload):
    """
    Deliver a notification right away.

    Any error raised by the backend is logged and swallowed.
    """
    if event not in EVENTS:
        logger.warning("Ignoring unknown notification event %s", event)
        return

    try:
        getattr(get_backend(), event)(**payload)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Could not deliver %s notification with payload %s", event, payload)


def _dispatch(event, payload):
    """
    Deliver inline, or hand off to celery when async delivery is enabled.
    """
    if not getattr(settings, 'PEER_REVIEW_NOTIFY_ASYNC', False):
        send_notification(event, **payload)
        return

    from peerreview.tasks import send_notification_task
    try:
        send_notification_task.delay(event, payload)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Could not queue %s notification with payload %s", event, payload)


def _notify_on_commit(event, **payload):
    transaction.on_commit(lambda: _dispatch(event, payload))


def notify_reviewer_assigned(reviewer_id, submission_id):
    _notify_on_commit(REVIEWER_ASSIGNED, reviewer_id=reviewer_id, submission_id=submission_id)


def notify_review_received(student_id, submission_id):
    _notify_on_commit(REVIEW_RECEIVED, student_id=student_id, submission_id=submission_id)


def notify_graded(student_id, submission_id, final_score):
    _notify_on_commit(GRADED, student_id=student_id, submission_id=submission_id, final_score=final_score)
