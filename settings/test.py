"""
Settings for running the test suite.
"""

from .base import *  # pylint: disable=wildcard-import,unused-wildcard-import

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ('django.contrib.auth.hashers.MD5PasswordHasher',)

# Run celery tasks in process so tests see their results
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

PEER_REVIEW_NOTIFICATION_BACKEND = 'peerreview.notifications.LoggingNotificationBackend'
PEER_REVIEW_NOTIFY_ASYNC = False
PEER_REVIEW_ALLOCATE_ASYNC = False
