"""
Serializers are created to ensure models do not have to be accessed outside
the scope of the peer review APIs.
"""

from rest_framework import serializers

from peerreview.workflow.models import Submission


class SubmissionSerializer(serializers.ModelSerializer):
    """Serializer for :class:`Submission`."""
    assignment_id = serializers.IntegerField(read_only=True)
    completed_review_count = serializers.SerializerMethodField()

    class Meta:
        model = Submission
        fields = (
            'id', 'assignment_id', 'student_id', 'status', 'content', 'file_url',
            'file_name', 'file_size', 'self_assessment', 'submitted_at',
            'peer_score', 'instructor_score', 'instructor_feedback',
            'final_score', 'graded_at', 'completed_review_count', 'created', 'modified',
        )
        read_only_fields = fields

    def get_completed_review_count(self, submission):
        """Use the annotated count when the queryset provides one."""
        annotated = getattr(submission, 'completed_review_count', None)
        if annotated is not None:
            return annotated
        return submission.received_reviews.filter(is_completed=True).count()


class AnswerSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """The learner-supplied part of a submission."""
    content = serializers.CharField(required=False, allow_blank=True, default="")
    file_url = serializers.CharField(required=False, allow_blank=True, default="", max_length=1024)
    file_name = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    file_size = serializers.IntegerField(required=False, allow_null=True, default=None, min_value=0)
    self_assessment = serializers.CharField(required=False, allow_blank=True, default="")
