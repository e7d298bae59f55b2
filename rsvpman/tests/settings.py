"""
Django settings for RSVPman tests.
"""

SECRET_KEY = "test-secret-key-for-rsvpman-tests"

DEBUG = True

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.admin",
    "django.contrib.sessions",
    "django.contrib.messages",
    "rsvpman",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

ROOT_URLCONF = "rsvpman.tests.urls"

STATIC_URL = "/static/"

USE_TZ = True
TIME_ZONE = "UTC"

RSVPMAN = {
    "OTP_BACKEND": "rsvpman.backends.otp.StaticOTPBackend",
    "INVITE_BASE_URL": "https://rsvp.example.com",
}

RSVPMAN_STATIC_OTP_CODE = "123456"

MIDDLEWARE = [
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
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
