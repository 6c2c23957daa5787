"""
Serializers for assignments and their scoring criteria.
"""

from copy import deepcopy
import logging

from rest_framework import serializers
from rest_framework.fields import FloatField, IntegerField

from peerreview.assessment.models import DEFAULT_CRITERIA, Assignment, Criterion

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


class InvalidAssignment(Exception):
    """This can be raised during the deserialization process."""
    def __init__(self, errors):
        Exception.__init__(self, repr(errors))
        self.errors = deepcopy(errors)


class CriterionSerializer(serializers.ModelSerializer):
    """Serializer for :class:`Criterion`"""

    # Django Rest Framework v3 no longer requires `PositiveIntegerField`s
    # to be positive by default, so we need to explicitly set the `min_value`
    # on the serializer field.
    max_score = IntegerField(min_value=1, required=False, default=Criterion.DEFAULT_MAX_SCORE)
    weight = FloatField(required=False, default=Criterion.DEFAULT_WEIGHT)

    class Meta:
        model = Criterion
        fields = ('id', 'order_num', 'name', 'description', 'max_score', 'weight')
        read_only_fields = ('id', 'order_num')

    def validate_weight(self, value):
        """Weights must be strictly positive."""
        if value <= 0:
            raise serializers.ValidationError("Criterion weight must be greater than zero")
        return value


class AssignmentSerializer(serializers.ModelSerializer):
    """Serializer for :class:`Assignment`, including its ordered criteria."""
    criteria = CriterionSerializer(many=True, required=False)
    reviews_required = IntegerField(min_value=1, required=False, default=Assignment.DEFAULT_REVIEWS_REQUIRED)
    reviews_per_student = IntegerField(
        min_value=1, required=False, default=Assignment.DEFAULT_REVIEWS_PER_STUDENT
    )
    max_points = IntegerField(min_value=1, required=False, default=Assignment.DEFAULT_MAX_POINTS)

    class Meta:
        model = Assignment
        fields = (
            'id', 'course_id', 'lesson_id', 'instructor_id', 'title', 'description',
            'instructions', 'status', 'due_date', 'review_due_date', 'max_points',
            'min_word_count', 'max_word_count', 'peer_review_enabled',
            'reviews_required', 'reviews_per_student', 'anonymous_reviews',
            'criteria', 'created', 'modified',
        )
        read_only_fields = ('id', 'status', 'created', 'modified')

    def validate(self, attrs):
        min_words = attrs.get('min_word_count', getattr(self.instance, 'min_word_count', None))
        max_words = attrs.get('max_word_count', getattr(self.instance, 'max_word_count', None))
        if min_words is not None and max_words is not None and max_words < min_words:
            raise serializers.ValidationError("max_word_count must not be less than min_word_count")
        return attrs

    def create(self, validated_data):
        """
        Create the assignment model, including its nested criteria.

        Assignments created without criteria get the default criteria.

        Args:
            validated_data (dict): Dictionary of validated data for the assignment,
                including nested Criterion data.

        Returns:
            Assignment
        """
        criteria_data = validated_data.pop("criteria", None) or deepcopy(DEFAULT_CRITERIA)
        assignment = Assignment.objects.create(**validated_data)

        # Criterion order follows the order they were given in
        Criterion.objects.bulk_create([
            Criterion(assignment=assignment, order_num=order_num, **criterion_data)
            for order_num, criterion_data in enumerate(criteria_data)
        ])
        return assignment

    def update(self, instance, validated_data):
        """Criteria are not editable through an assignment update."""
        validated_data.pop("criteria", None)
        return super().update(instance, validated_data)


def assignment_from_dict(assignment_dict):
    """Given a dict of assignment information, create the Assignment.

    Args:
        assignment_dict (dict): Assignment fields and a list of criteria.

    Returns:
        Assignment

    Raises:
        InvalidAssignment: the dict did not describe a valid assignment.
    """
    serializer = AssignmentSerializer(data=assignment_dict)
    if not serializer.is_valid():
        raise InvalidAssignment(serializer.errors)
    return serializer.save()
