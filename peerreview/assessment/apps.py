"""
peerreview.assessment Django application initialization.
"""

from django.apps import AppConfig


class PeerReviewAssessmentConfig(AppConfig):
    """
    Configuration for the peerreview.assessment Django application.
    """

    name = "peerreview.assessment"
    label = "assessment"
    default_auto_field = "django.db.models.AutoField"
