"""
Serializers specific to peer reviews.
"""

import logging

from rest_framework import serializers

from peerreview.assessment.models import CriteriaScore, PeerReview

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


class CriteriaScoreSerializer(serializers.ModelSerializer):
    """Serializer for :class:`CriteriaScore`"""
    criterion_name = serializers.CharField(source='criterion.name', read_only=True)
    max_score = serializers.IntegerField(source='criterion.max_score', read_only=True)
    normalized_score = serializers.FloatField(read_only=True)

    class Meta:
        model = CriteriaScore
        fields = ('criterion', 'criterion_name', 'score', 'max_score', 'normalized_score', 'feedback')


class PeerReviewSerializer(serializers.ModelSerializer):
    """Serializer for :class:`PeerReview`"""
    criteria_scores = CriteriaScoreSerializer(many=True, read_only=True)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = PeerReview
        fields = (
            'id', 'submission', 'reviewer_id', 'status', 'is_completed',
            'created_at', 'completed_at', 'total_score', 'overall_feedback',
            'strengths_note', 'improvements_note', 'helpfulness_rating',
            'criteria_scores',
        )


class CriteriaScoreRequestSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """One score in a reviewer's request to complete a review."""
    criterion_id = serializers.IntegerField()
    score = serializers.FloatField()
    feedback = serializers.CharField(required=False, allow_blank=True, default="")


class ReviewRequestSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """A reviewer's request to complete a review.

    Only the shape of the request is checked here; whether the scores fit the
    assignment's criteria is decided by the peer API.
    """
    criteria_scores = CriteriaScoreRequestSerializer(many=True, allow_empty=False)
    overall_feedback = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=PeerReview.MAX_FEEDBACK_SIZE
    )
    strengths_note = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=PeerReview.MAX_FEEDBACK_SIZE
    )
    improvements_note = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=PeerReview.MAX_FEEDBACK_SIZE
    )

    def validate_criteria_scores(self, value):
        """Each criterion may be scored at most once."""
        criterion_ids = [item['criterion_id'] for item in value]
        if len(criterion_ids) != len(set(criterion_ids)):
            raise serializers.ValidationError("Each criterion can only be scored once")
        return value


def full_review_dict(review, anonymize=False):
    """
    Serialize a peer review, including its criterion scores.

    Args:
        review (PeerReview): The review to serialize.

    Keyword Args:
        anonymize (bool): Hide who wrote the review.

    Returns:
        dict
    """
    review_dict = dict(PeerReviewSerializer(review).data)
    if anonymize:
        review_dict['reviewer_id'] = None
    return review_dict


def serialize_reviews(reviews_qs, anonymize=False):
    """
    Serialize a queryset of peer reviews.
    """
    return [
        full_review_dict(review, anonymize=anonymize)
        for review in reviews_qs.prefetch_related('criteria_scores__criterion')
    ]
