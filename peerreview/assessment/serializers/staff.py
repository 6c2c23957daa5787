"""
Serializers specific to instructor grading.
"""

import math

from rest_framework import serializers


class GradeRequestSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """An instructor's request to grade a submission.

    Only checks that the score is a finite number; the range depends on the
    assignment and is checked by the staff API.
    """
    score = serializers.FloatField()
    feedback = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_score(self, value):
        if not math.isfinite(value):
            raise serializers.ValidationError("Score must be a finite number")
        return value
