"""
Django settings for the evidence ledger API.

Every value is read from the environment.  A ``.env`` file next to
``manage.py`` is loaded first; variables already set in the real
environment take precedence over it.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() == "true"


# ── Core ─────────────────────────────────────────────────────────────

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-evidence-ledger-dev-key")

DEBUG = env_bool("DJANGO_DEBUG")

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "drf_spectacular",
    "core",
    "ledger.apps.LedgerAppConfig",
    "evidence",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "backend.urls"

WSGI_APPLICATION = "backend.wsgi.application"

# Evidence records live on the ledger; there is no local database.
DATABASES = {}

APPEND_SLASH = False

USE_TZ = True

TIME_ZONE = "UTC"

# ── Django REST framework ────────────────────────────────────────────

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "core.domain.exception_handler.ledger_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Evidence Ledger API",
    "DESCRIPTION": "Register, retrieve and update digital-evidence records held on a permissioned ledger.",
    "VERSION": "0.1.0",
    "SERVE_INCLUDE_SCHEMA": False,
}

# ── Ledger ───────────────────────────────────────────────────────────

LEDGER = {
    # Empty values fall back to "appUser" / "evidencecc" (ledger.profile.DEFAULTS).
    "IDENTITY_LABEL": os.environ.get("FABRIC_USER", ""),
    "CONTRACT_NAME": os.environ.get("CONTRACT_NAME", ""),
    "CHANNEL": os.environ.get("FABRIC_CHANNEL", "mychannel"),
    "WALLET_PATH": os.environ.get("FABRIC_WALLET_PATH", str(BASE_DIR / "wallet")),
    "CONNECTION_PROFILE": os.environ.get(
        "FABRIC_CONNECTION_PROFILE", str(BASE_DIR / "connection-profile.yaml")
    ),
    "ORGANIZATION": os.environ.get("FABRIC_ORG", "Org1"),
    "MSP_ID": os.environ.get("FABRIC_MSP_ID", "Org1MSP"),
    "PEER_NAME": os.environ.get("FABRIC_PEER_NAME", "peer0.org1.example.com"),
    "PEER_URL": os.environ.get("FABRIC_PEER_URL", "grpcs://localhost:7051"),
    "GATEWAY_URL": os.environ.get("FABRIC_GATEWAY_URL", "http://localhost:8080"),
    "GATEWAY_TIMEOUT": os.environ.get("FABRIC_GATEWAY_TIMEOUT", "300"),
    "TLS_CERT_PATH": os.environ.get("FABRIC_TLS_CERT_PATH", ""),
    "REGENERATE_CONFIG": os.environ.get("REGENERATE_CONFIG") == "true",
    "GATEWAY_CLASS": "ledger.gateway.RestGateway",
}

API_PORT = os.environ.get("API_PORT") or "3000"

# ── Logging ──────────────────────────────────────────────────────────

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
}
