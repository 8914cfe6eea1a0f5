"""
Service Constants (Single Source of Truth)

Static values fixed at build time; nothing here is read from the environment.
"""

from __future__ import annotations

# ─────────────────────────────────────────────────────────────────────────────
# Service Identity
# ─────────────────────────────────────────────────────────────────────────────
SERVICE_NAME = "gallery-api"
SERVICE_VERSION = "1.0.0"

# ─────────────────────────────────────────────────────────────────────────────
# Logging Constants (12-Factor App Compliance)
# ─────────────────────────────────────────────────────────────────────────────
ENV_KEY_ENVIRONMENT = "ENVIRONMENT"
ENV_KEY_LOG_LEVEL = "LOG_LEVEL"
ENV_KEY_LOG_FORMAT = "LOG_FORMAT"

DEFAULT_ENVIRONMENT = "dev"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"

ECS_VERSION = "8.11.0"

EXCLUDED_LOG_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)

NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "botocore",
    "boto3",
    "urllib3",
    "s3transfer",
    "asyncio",
)

# ─────────────────────────────────────────────────────────────────────────────
# PII Masking Configuration
# ─────────────────────────────────────────────────────────────────────────────
SENSITIVE_FIELD_PATTERNS = frozenset(
    {"password", "secret", "token", "api_key", "authorization", "access_key"}
)
MASK_PLACEHOLDER = "***REDACTED***"
MASK_PRESERVE_PREFIX = 4
MASK_PRESERVE_SUFFIX = 4
MASK_MIN_LENGTH = 10

# ─────────────────────────────────────────────────────────────────────────────
# Upload Pipeline
# ─────────────────────────────────────────────────────────────────────────────
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB
IMAGE_FIELD_NAME = "image"
UPLOADS_DIR_NAME = "uploads"
UPLOADS_URL_PREFIX = "/uploads"

# Extensions served back by the local listing (lower-case, with dot)
IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"})

# S3 list_objects_v2 page size
REMOTE_LIST_PAGE_SIZE = 100

# ─────────────────────────────────────────────────────────────────────────────
# Static Files
# ─────────────────────────────────────────────────────────────────────────────
STATIC_INDEX_FILE = "index.html"
STATIC_DEFAULT_MEDIA_TYPE = "application/octet-stream"
STATIC_MEDIA_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".mp3": "audio/mpeg",
}

# ─────────────────────────────────────────────────────────────────────────────
# Routing
# ─────────────────────────────────────────────────────────────────────────────
STATIC_ALLOWED_METHODS = ("GET", "HEAD")

# Catch-all routes that answer paths they do not own; never listed in Allow.
STATIC_ROUTE_NAME = "serve_static"
UPLOAD_GUARD_ROUTE_NAME = "upload_method_guard"

# Order of methods in an Allow header
HTTP_METHOD_ORDER = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
