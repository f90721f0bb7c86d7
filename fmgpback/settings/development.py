"""
Development settings for fmgpback project.
"""

import os
import sys

import environ

from .base import *

env = environ.Env()

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

# Development-specific allowed hosts
ALLOWED_HOSTS.extend(["localhost", "127.0.0.1", "0.0.0.0"])

IS_TESTING = (
    "test" in sys.argv
    or "pytest" in sys.modules
    or os.environ.get("DJANGO_SETTINGS_MODULE", "").endswith("testing")
)

# Local backend from the docker-compose setup
PARTICIPANT_API_BASE_URL = env(
    "PARTICIPANT_API_BASE_URL", default="http://localhost:8080"
)

# Keep the form usable while the backend is offline. Never outside development.
PARTICIPANT_API_LENIENT_OFFLINE = env(
    "PARTICIPANT_API_LENIENT_OFFLINE", default=not IS_TESTING, cast=bool
)

# Development-specific logging
LOGGING["handlers"]["console"]["level"] = "DEBUG"
LOGGING["loggers"]["festival"]["level"] = "DEBUG"

# Disable HTTPS redirects in development
SECURE_SSL_REDIRECT = False
SECURE_HSTS_SECONDS = 0
SECURE_HSTS_INCLUDE_SUBDOMAINS = False
SECURE_HSTS_PRELOAD = False
