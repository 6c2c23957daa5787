"""
Django admin for submissions
"""

from django.contrib import admin

from peerreview.workflow.models import Submission


class SubmissionAdmin(admin.ModelAdmin):
    """
    Django admin model for Submissions.
    """
    list_display = (
        'id', 'assignment', 'student_id', 'status', 'submitted_at',
        'peer_score', 'instructor_score', 'final_score',
    )
    list_filter = ('status',)
    search_fields = ('id', 'student_id', 'assignment__title')
    readonly_fields = (
        'status', 'status_changed', 'submitted_at', 'peer_score',
        'instructor_score', 'final_score', 'graded_at',
    )


admin.site.register(Submission, SubmissionAdmin)
