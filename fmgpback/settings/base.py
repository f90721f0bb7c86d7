"""
Base Django settings for fmgpback project.
Common settings shared across all environments.
"""

import os
from pathlib import Path
from typing import Any

import environ

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent

# Initialize environment variables
env: environ.Env = environ.Env(
    # Set casting and defaults for environment variables
    DEBUG=(bool, False),
    SECRET_KEY=(str, ""),
    ALLOWED_HOSTS=(list, []),
    PARTICIPANT_API_BASE_URL=(
        str,
        "https://api.festivaldamusicagospelparaense.com",
    ),
    APP_VERSION=(str, "1"),
    PARTICIPANT_API_SUBMIT_TIMEOUT=(float, 8.0),
    PARTICIPANT_API_CITIES_TIMEOUT=(float, 3.0),
    PARTICIPANT_API_LENIENT_OFFLINE=(bool, False),
)

# Read environment variables from .env file
environ.Env.read_env(BASE_DIR / ".env")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG: bool = env("DEBUG")

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY: str = env("SECRET_KEY")

# Validate SECRET_KEY is not empty or insecure default
if not SECRET_KEY:
    raise ValueError("SECRET_KEY environment variable must be set!")

if SECRET_KEY.startswith("django-insecure-"):
    if not DEBUG:
        raise ValueError(
            "Insecure SECRET_KEY detected in production! "
            "Generate a secure one using: "
            "python -c 'from django.core.management.utils import "
            "get_random_secret_key; print(get_random_secret_key())'"
        )
    else:
        import warnings

        warnings.warn(
            "Using insecure SECRET_KEY in development. "
            "This is only acceptable for development/testing. "
            "Generate a secure one for production!",
            UserWarning,
            stacklevel=2,
        )

ALLOWED_HOSTS: list[str] = env("ALLOWED_HOSTS")

# Application definition
# No database-backed apps: participants live in the remote backend.
DJANGO_APPS: list[str] = [
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
]

THIRD_PARTY_APPS: list[str] = []

LOCAL_APPS: list[str] = [
    "festival",
]

INSTALLED_APPS: list[str] = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE: list[str] = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.locale.LocaleMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF: str = "fmgpback.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION: str = "fmgpback.wsgi.application"

# Database
# The site keeps no local state; the participant service owns all records.
DATABASES: dict[str, Any] = {}

# Internationalization
# https://docs.djangoproject.com/en/5.2/topics/i18n/
LANGUAGE_CODE: str = "pt-br"
# Belém has no daylight saving time: fixed UTC-3
TIME_ZONE: str = "America/Belem"
USE_I18N: bool = True
USE_TZ: bool = True

# Static files (CSS, JavaScript, Images)
# https://docs.djangoproject.com/en/5.2/howto/static-files/
STATIC_URL: str = "/static/"
STATIC_ROOT: Path = env("STATIC_ROOT", default=BASE_DIR / "staticfiles", cast=Path)

# Session Configuration
# Signed cookies keep the open registration draft without a database
SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"
SESSION_COOKIE_AGE = 1800  # 30 minutes default session timeout
SESSION_COOKIE_SECURE = not DEBUG  # Use secure cookies in production
SESSION_COOKIE_HTTPONLY = True  # Prevent JavaScript access to session cookies
SESSION_COOKIE_SAMESITE = "Lax"  # CSRF protection
SESSION_EXPIRE_AT_BROWSER_CLOSE = True  # Expire session when browser closes

MESSAGE_STORAGE = "django.contrib.messages.storage.cookie.CookieStorage"

# CSRF Configuration
CSRF_COOKIE_SECURE = not DEBUG  # Use secure CSRF cookies in production
CSRF_COOKIE_HTTPONLY = True  # Prevent JavaScript access to CSRF tokens
CSRF_COOKIE_SAMESITE = "Lax"

# Security Headers
SECURE_CONTENT_TYPE_NOSNIFF = True  # Prevent MIME sniffing
X_FRAME_OPTIONS = "DENY"  # Prevent clickjacking
SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"

# Cache Configuration for rate limiting and submission locks
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "festival-cache",
        "TIMEOUT": 300,  # 5 minutes default timeout
        "OPTIONS": {
            "MAX_ENTRIES": 1000,
            "CULL_FREQUENCY": 3,
        },
    }
}

# Single-process deployment: a per-process cache is enough for rate limits
SILENCED_SYSTEM_CHECKS: list[str] = ["django_ratelimit.E003", "django_ratelimit.W001"]

# Participant service (remote backend)
PARTICIPANT_API_BASE_URL: str = env("PARTICIPANT_API_BASE_URL")
APP_VERSION: str = env("APP_VERSION")
PARTICIPANT_API_SUBMIT_TIMEOUT: float = env("PARTICIPANT_API_SUBMIT_TIMEOUT")
PARTICIPANT_API_CITIES_TIMEOUT: float = env("PARTICIPANT_API_CITIES_TIMEOUT")
# Treat an unreachable backend as a successful submission. Development only.
PARTICIPANT_API_LENIENT_OFFLINE: bool = env("PARTICIPANT_API_LENIENT_OFFLINE")
# Upper bound for a stuck submission lock, in seconds
SUBMISSION_LOCK_TIMEOUT: int = env("SUBMISSION_LOCK_TIMEOUT", default=30, cast=int)

# Voting windows per city (URL, opening date, closed flag)
VOTING_WINDOWS_FILE: Path = env(
    "VOTING_WINDOWS_FILE",
    default=BASE_DIR / "festival" / "data" / "voting_windows.json",
    cast=Path,
)

# Ensure logs directory exists
logs_dir = BASE_DIR / "logs"
os.makedirs(logs_dir, exist_ok=True)

# Logging Configuration
LOGGING: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "file": {
            "level": "INFO",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": logs_dir / "django.log",
            "maxBytes": 1024 * 1024 * 5,  # 5 MB
            "backupCount": 5,
            "formatter": "verbose",
        },
        "error_file": {
            "level": "ERROR",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": logs_dir / "django_errors.log",
            "maxBytes": 1024 * 1024 * 5,  # 5 MB
            "backupCount": 5,
            "formatter": "verbose",
        },
        "console": {
            "level": "INFO",
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console", "file"],
        "level": "INFO",
    },
    "loggers": {
        "django": {
            "handlers": ["console", "file", "error_file"],
            "level": "INFO",
            "propagate": False,
        },
        "django.security": {
            "handlers": ["error_file"],
            "level": "WARNING",
            "propagate": False,
        },
        "festival": {
            "handlers": ["console", "file", "error_file"],
            "level": "DEBUG",
            "propagate": False,
        },
    },
}
