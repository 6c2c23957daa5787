"""
Django admin models for peer review assignments and reviews
"""

from django.contrib import admin
from django.urls import reverse_lazy
from django.utils.html import format_html, format_html_join

from peerreview.assessment.models import Assignment, Criterion, PeerReview


class CriterionInline(admin.TabularInline):
    """
    Django admin model for Criteria.
    """
    model = Criterion
    extra = 0


class AssignmentAdmin(admin.ModelAdmin):
    """
    Django admin model for Assignments.
    """
    list_display = (
        'id', 'title', 'course_id', 'instructor_id', 'status',
        'reviews_required', 'reviews_per_student',
    )
    list_filter = ('status', 'peer_review_enabled', 'anonymous_reviews')
    search_fields = ('id', 'title', 'course_id', 'instructor_id')
    readonly_fields = ('status', 'status_changed')
    inlines = (CriterionInline,)


class PeerReviewAdmin(admin.ModelAdmin):
    """
    Django admin model for PeerReviews.

    Reviews are written by the peer review engine only, so everything is read-only.
    """
    list_display = (
        'id', 'submission_link', 'reviewer_id', 'is_completed', 'total_score', 'created_at',
    )
    list_filter = ('is_completed',)
    search_fields = ('id', 'reviewer_id', 'submission__student_id')
    readonly_fields = (
        'submission_link', 'reviewer_id', 'created_at', 'completed_at', 'is_completed',
        'total_score', 'overall_feedback', 'strengths_note', 'improvements_note',
        'helpfulness_rating', 'scores_summary',
    )
    exclude = ('submission',)

    def submission_link(self, review_obj):
        """
        Returns the submission link for this review.
        """
        url = reverse_lazy('admin:workflow_submission_change', args=[review_obj.submission_id])
        return format_html('<a href="{}">{}</a>', url, review_obj.submission_id)
    submission_link.admin_order_field = 'submission__id'
    submission_link.short_description = 'Submission'

    def scores_summary(self, review_obj):
        """
        Returns the criterion scores of this review as HTML.
        """
        return format_html_join("<br/>", "{}: {}/{} - {}", ((
            score.criterion.name,
            score.score,
            score.criterion.max_score,
            score.feedback,
        ) for score in review_obj.criteria_scores.select_related('criterion')))


admin.site.register(Assignment, AssignmentAdmin)
admin.site.register(PeerReview, PeerReviewAdmin)
