"""
peerreview.workflow Django application initialization.
"""

from django.apps import AppConfig


class PeerReviewWorkflowConfig(AppConfig):
    """
    Configuration for the peerreview.workflow Django application.
    """

    name = 'peerreview.workflow'
    label = "workflow"
    default_auto_field = "django.db.models.AutoField"
