"""Test settings.

In-memory SQLite, locmem e-mail, eager Celery and a fixed Cloudinary
account so the API suite never touches external services.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.InMemoryStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

CLOUDINARY_CLOUD_NAME = 'test-cloud'
CLOUDINARY_API_KEY = '123456789012345'
CLOUDINARY_API_SECRET = 'test-secret'

ENCRYPTION_KEY = 'test-encryption-key'
