"""
Celery task wrappers for peer review side work.
"""

from celery import shared_task

from peerreview.assessment.errors import PeerReviewInternalError


@shared_task(bind=True, acks_late=True)
def send_notification_task(self, event, payload):  # pylint: disable=unused-argument
    """
    Async notification delivery.

    Delivery is best-effort and is not retried here; a backend that wants
    retries implements them itself.
    """
    from peerreview.notifications import send_notification
    send_notification(event, **payload)


@shared_task(bind=True,
             acks_late=True,
             autoretry_for=(PeerReviewInternalError,),
             max_retries=3,
             retry_backoff=True,
             retry_backoff_max=300,
             retry_jitter=True)
def allocate_peer_reviews_task(self, assignment_id):  # pylint: disable=unused-argument
    """
    Async task wrapper

    Allocation passes are idempotent, so retrying after an internal error
    cannot create duplicate pairings.
    """
    from peerreview.assessment.api.allocation import allocate_peer_reviews
    return allocate_peer_reviews(assignment_id)
