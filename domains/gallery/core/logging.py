"""
Structured Logging (ECS JSON on stdout)

Upload, storage and request context passed through ``extra=`` is mapped onto
the matching ECS fields (``file.*``, ``event.action``, ``http.*``, ``url.path``,
``cloud.*``); anything unmapped lands under ``labels``.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Mapping

from domains.gallery.core.constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    ECS_VERSION,
    ENV_KEY_ENVIRONMENT,
    ENV_KEY_LOG_FORMAT,
    ENV_KEY_LOG_LEVEL,
    EXCLUDED_LOG_RECORD_ATTRS,
    MASK_MIN_LENGTH,
    MASK_PLACEHOLDER,
    MASK_PRESERVE_PREFIX,
    MASK_PRESERVE_SUFFIX,
    NOISY_LOGGERS,
    SENSITIVE_FIELD_PATTERNS,
    SERVICE_NAME,
    SERVICE_VERSION,
)

# extra= key -> ECS field
ECS_FIELD_MAP = {
    "operation": "event.action",
    "file_name": "file.name",
    "client_filename": "file.original_name",
    "mime_type": "file.mime_type",
    "size": "file.size",
    "upload_dir": "file.directory",
    "method": "http.request.method",
    "status_code": "http.response.status_code",
    "path": "url.path",
    "code": "error.code",
    "error_code": "error.code",
    "bucket": "cloud.bucket",
    "region": "cloud.region",
}

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _is_sensitive_key(key: str) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in SENSITIVE_FIELD_PATTERNS)


def _redact(value: Any) -> str:
    text = "" if value is None else str(value)
    if len(text) <= MASK_MIN_LENGTH:
        return MASK_PLACEHOLDER
    return f"{text[:MASK_PRESERVE_PREFIX]}...{text[-MASK_PRESERVE_SUFFIX:]}"


def mask_sensitive_data(data: Mapping[str, Any]) -> dict[str, Any]:
    """Redact values whose key looks like a credential, recursing into mappings."""
    masked: dict[str, Any] = {}
    for key, value in data.items():
        if _is_sensitive_key(key):
            masked[key] = _redact(value)
        elif isinstance(value, Mapping):
            masked[key] = mask_sensitive_data(value)
        else:
            masked[key] = value
    return masked


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in EXCLUDED_LOG_RECORD_ATTRS and not key.startswith("_")
    }


class ECSJsonFormatter(logging.Formatter):
    """Render a record as one ECS JSON line."""

    def __init__(
        self,
        service_name: str = SERVICE_NAME,
        service_version: str = SERVICE_VERSION,
        environment: str = DEFAULT_ENVIRONMENT,
    ):
        super().__init__()
        self.service_fields = {
            "service.name": service_name,
            "service.version": service_version,
            "service.environment": environment,
        }

    def format(self, record: logging.LogRecord) -> str:
        document: dict[str, Any] = {
            "@timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "message": record.getMessage(),
            "log.level": record.levelname.lower(),
            "log.logger": record.name,
            "ecs.version": ECS_VERSION,
            **self.service_fields,
        }

        labels: dict[str, Any] = {}
        for key, value in mask_sensitive_data(_record_extras(record)).items():
            field = ECS_FIELD_MAP.get(key)
            if field is None:
                labels[key] = value
            else:
                document.setdefault(field, value)
        if labels:
            document["labels"] = labels

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            document["error.type"] = exc_type.__name__
            document["error.message"] = str(exc_value)
            document["error.stack_trace"] = self.formatException(record.exc_info)

        return json.dumps(document, ensure_ascii=False, default=str)


def _build_formatter(use_json: bool, environment: str) -> logging.Formatter:
    if use_json:
        return ECSJsonFormatter(environment=environment)
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def configure_logging(log_level: str | None = None, json_format: bool | None = None) -> None:
    """Install a single stdout handler on the root logger.

    ``LOG_LEVEL``, ``LOG_FORMAT`` and ``ENVIRONMENT`` are read from the
    environment unless overridden by the arguments.
    """
    environment = os.getenv(ENV_KEY_ENVIRONMENT, DEFAULT_ENVIRONMENT)
    level_name = (log_level or os.getenv(ENV_KEY_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    if json_format is None:
        json_format = os.getenv(ENV_KEY_LOG_FORMAT, DEFAULT_LOG_FORMAT).lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter(json_format, environment))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    # uvicorn installs its own handlers; route them through ours instead.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
