"""
Structured JSON logging for the order service.

Every record is emitted as one JSON object carrying the service name, the
request id of the HTTP call being served and, once authenticated, the
operator session that made it.
"""

import json
import logging
import logging.handlers
import os
import sys
import time
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
operator_var: ContextVar[Optional[str]] = ContextVar('operator', default=None)


class StructuredFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "@timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": os.getenv('SERVICE_NAME', 'isopod-orders'),
            "environment": os.getenv('ENVIRONMENT', 'development'),
        }

        context = self._get_request_context()
        if context:
            log_obj["context"] = context

        log_obj["location"] = {
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        if hasattr(record, 'extra_fields'):
            log_obj["custom"] = record.extra_fields

        return json.dumps(log_obj, default=str)

    def _get_request_context(self) -> Optional[Dict[str, Any]]:
        context = {}
        request_id = request_id_var.get()
        if request_id:
            context["request_id"] = request_id
        operator = operator_var.get()
        if operator:
            context["operator"] = operator
        return context or None


class SecurityFilter(logging.Filter):
    """Mask the configured access key and bearer values in log messages"""

    SENSITIVE_FIELDS = ['access_key', 'authorization', 'token', 'secret', 'password']

    def filter(self, record: logging.LogRecord) -> bool:
        if not isinstance(record.msg, str):
            return True
        secret = os.getenv('APP_ACCESS_KEY')
        if secret and secret in record.msg:
            record.msg = record.msg.replace(secret, "***REDACTED***")
        lowered = record.msg.lower()
        for field in self.SENSITIVE_FIELDS:
            if f"{field}=" in lowered:
                start = lowered.index(f"{field}=") + len(field) + 1
                end = lowered.find(" ", start)
                end = len(record.msg) if end == -1 else end
                record.msg = record.msg[:start] + "***REDACTED***" + record.msg[end:]
                lowered = record.msg.lower()
        return True


def setup_logging(
    service_name: str,
    level: str = "INFO",
    log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger with the JSON formatter.

    Args:
        service_name: Name reported in every record
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path for an additional rotating file handler
    """
    os.environ['SERVICE_NAME'] = service_name

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers = []

    formatter = StructuredFormatter()
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5
        ))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(SecurityFilter())
        root_logger.addHandler(handler)

    logging.getLogger('uvicorn').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialized",
        extra={'extra_fields': {'service': service_name, 'level': level, 'file': bool(log_file)}}
    )


class LoggerAdapter(logging.LoggerAdapter):
    """Attach the current request id and operator to every record"""

    def process(self, msg, kwargs):
        extra = kwargs.get('extra', {})
        request_id = request_id_var.get()
        if request_id:
            extra['request_id'] = request_id
        operator = operator_var.get()
        if operator:
            extra['operator'] = operator
        kwargs['extra'] = extra
        return msg, kwargs


def get_logger(name: str) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), {})


def set_request_context(request_id: Optional[str] = None, operator: Optional[str] = None) -> None:
    if request_id:
        request_id_var.set(request_id)
    if operator:
        operator_var.set(operator)


def generate_request_id() -> str:
    return str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log each request with its duration and echo the request id back
    in the ``X-Request-ID`` response header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get('X-Request-ID', generate_request_id())
        set_request_context(request_id=request_id)

        logger = get_logger(__name__)
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                exc_info=True,
                extra={'extra_fields': {
                    'method': request.method,
                    'path': request.url.path,
                    'duration_ms': (time.time() - start_time) * 1000,
                }}
            )
            raise

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={'extra_fields': {
                'method': request.method,
                'path': request.url.path,
                'status_code': response.status_code,
                'duration_ms': (time.time() - start_time) * 1000,
            }}
        )
        response.headers['X-Request-ID'] = request_id
        return response
