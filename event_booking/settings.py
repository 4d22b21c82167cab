# event_booking/settings.py
#
# Purpose:
# - Django settings for the event booking service.
# - Everything deployment-specific comes from the environment (a local .env
#   file is loaded in development).
#
# Notes for developers:
# - SCHEDULING is validated and frozen by booking.config.load_scheduling_config()
#   at startup. Change it here (or via env), never at runtime.
# - COMMITMENT_STORE picks the calendar backend: "google" in production,
#   "database" for local development and tests.
#
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "DJANGO_SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION",
        RuntimeWarning,
        stacklevel=2,
    )
    SECRET_KEY = "insecure-dev-key-change-in-production"

DEBUG = env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "booking.apps.BookingConfig",
    "calendars.apps.CalendarsConfig",
    "payments.apps.PaymentsConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "event_booking.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "event_booking.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("SQLITE_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ---------- Time ----------
CALENDAR_TZ = os.getenv("CALENDAR_TZ") or os.getenv("TIMEZONE") or "America/Los_Angeles"
TIME_ZONE = CALENDAR_TZ
USE_TZ = True
USE_I18N = True
LANGUAGE_CODE = "en-us"

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# ---------- Scheduling engine ----------
SCHEDULING = {
    "TIME_ZONE": CALENDAR_TZ,
    "OPEN_HOUR": os.getenv("WORK_START", 9),
    "CLOSE_HOUR": os.getenv("WORK_END", 22),
    "INCLUDE_CLOSE_HOUR": env_bool("INCLUDE_CLOSE_HOUR", False),
    "SLOT_STEP_MINUTES": os.getenv("SLOT_STEP", 60),
    "PREP_BUFFER_HOURS": os.getenv("PREP_BUFFER_HOURS", 1),
    "CLEANUP_BUFFER_HOURS": os.getenv("CLEANUP_BUFFER_HOURS", 1),
    "MAX_PER_DAY": os.getenv("MAX_PER_DAY", 3),
    "MAX_CONCURRENT": os.getenv("MAX_CONCURRENT", 2),
    "DURATION_MINUTES": {
        "short": os.getenv("DURATION_SHORT_MINUTES", 120),
        "medium": os.getenv("DURATION_MEDIUM_MINUTES", 150),
        "long": os.getenv("DURATION_LONG_MINUTES", 180),
    },
    "STORE_TIMEOUT_SECONDS": os.getenv("STORE_TIMEOUT_SECONDS", 10),
    "AVAILABILITY_ON_STORE_ERROR": os.getenv("AVAILABILITY_ON_STORE_ERROR", "raise"),
}

# ---------- Calendar store ----------
COMMITMENT_STORE = os.getenv("COMMITMENT_STORE", "database")
CALENDAR_ID = os.getenv("CALENDAR_ID") or os.getenv("GOOGLE_CALENDAR_ID") or "primary"
GOOGLE_SERVICE_ACCOUNT_JSON = os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON", "")
GCP_CLIENT_EMAIL = os.getenv("GCP_CLIENT_EMAIL", "")
GCP_PRIVATE_KEY = os.getenv("GCP_PRIVATE_KEY", "")

# ---------- Stripe ----------
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "")

# ---------- REST framework ----------
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

# ---------- Logging ----------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "booking": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "calendars": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "payments": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
