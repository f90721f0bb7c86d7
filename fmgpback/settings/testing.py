"""
Testing settings for fmgpback project.
Isolated test configuration that doesn't depend on external environment variables.
"""

import os

# Set required environment variables for testing if not already set
# This must be done BEFORE importing base settings
if not os.environ.get("SECRET_KEY"):
    # Generate a secure secret key for testing to avoid validation errors
    from django.core.management.utils import get_random_secret_key

    os.environ["SECRET_KEY"] = get_random_secret_key()

from .base import *  # noqa: F403,F401

# Override settings for testing
DEBUG: bool = False

# Use local memory cache for tests
CACHES = {  # noqa: F405
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "test-cache",
    }
}

# Tests never reach the real participant service
PARTICIPANT_API_BASE_URL = "https://participants.test"  # noqa: F405
PARTICIPANT_API_LENIENT_OFFLINE = False  # noqa: F405

# Minimal logging for tests - reduce noise
LOGGING = {  # noqa: F405
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
        "console": {
            "level": "ERROR",
            "class": "logging.StreamHandler",
        },
    },
    "root": {
        "handlers": ["null"],
        "level": "ERROR",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "ERROR",
            "propagate": False,
        },
        "festival": {
            "handlers": ["console"],
            "level": "ERROR",
            "propagate": False,
        },
    },
}

# Security settings can be relaxed for testing
SECURE_SSL_REDIRECT = False  # noqa: F405
SESSION_COOKIE_SECURE = False  # noqa: F405
CSRF_COOKIE_SECURE = False  # noqa: F405

# Disable rate limiting for testing
RATELIMIT_ENABLE = False  # noqa: F405

# Set ALLOWED_HOSTS for testing
ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]  # noqa: F405
