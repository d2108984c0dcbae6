"""
InternHub - Centralized Logging Configuration
Plain text in development, one JSON object per line in production.
Request, user and internship ids ride along on every record via context vars.
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from internhub.core.config import settings


request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')
internship_id_var: ContextVar[str] = ContextVar('internship_id', default='')

_CONTEXT_VARS: Dict[str, ContextVar] = {
    'request_id': request_id_var,
    'user_id': user_id_var,
    'internship_id': internship_id_var,
}


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def set_internship_id(internship_id: str) -> None:
    internship_id_var.set(internship_id)


def clear_context() -> None:
    """Reset every tracing id at the end of a request"""
    for var in _CONTEXT_VARS.values():
        var.set('')


def current_context() -> Dict[str, str]:
    """The tracing ids that are set right now"""
    return {name: var.get() for name, var in _CONTEXT_VARS.items() if var.get()}


def generate_request_id() -> str:
    """Short id for X-Request-ID"""
    return uuid.uuid4().hex[:8]


_RESERVED_RECORD_KEYS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'taskName',
}


class JSONFormatter(logging.Formatter):
    """Structured records for log aggregation in production"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **current_context(),
        }

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, _ = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        # Extra fields passed via `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """Readable formatter that fills in the tracing ids for development"""

    def format(self, record: logging.LogRecord) -> str:
        for name, var in _CONTEXT_VARS.items():
            setattr(record, name, var.get() or '-')
        return super().format(record)


class InternHubLogger(logging.Logger):
    """
    Custom logger with convenience methods for structured logging
    """

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        """Log HTTP request details"""
        self.info(
            f"HTTP {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": duration_ms,
                **kwargs
            }
        )

    def log_notification(self, label: str, delivered: bool,
                         reason: Optional[str] = None, **kwargs) -> None:
        """Log the outcome of a best-effort notification"""
        level = logging.INFO if delivered else logging.WARNING
        self.log(
            level,
            f"Notification {label}: {'delivered' if delivered else 'not delivered'}" +
            (f" - {reason}" if reason else ""),
            extra={
                "event_type": "notification",
                "notification": label,
                "delivered": delivered,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: str = None,
                               **kwargs) -> None:
        """Log error with full context"""
        self.error(
            f"Error in {context}: {type(error).__name__}: {str(error)}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )

    def log_performance(self, operation: str, duration_ms: float,
                        threshold_ms: float = 1000, **kwargs) -> None:
        """Log performance metrics, warn if over threshold"""
        level = logging.WARNING if duration_ms > threshold_ms else logging.DEBUG
        self.log(
            level,
            f"Performance: {operation} took {duration_ms:.2f}ms" +
            (f" (threshold: {threshold_ms}ms)" if duration_ms > threshold_ms else ""),
            extra={
                "event_type": "performance",
                "operation": operation,
                "duration_ms": duration_ms,
                "threshold_ms": threshold_ms,
                "exceeded_threshold": duration_ms > threshold_ms,
                **kwargs
            }
        )


def _file_handler(formatter: logging.Formatter, backup_count: int) -> Optional[RotatingFileHandler]:
    if not settings.LOG_FILE:
        return None
    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10485760,  # 10MB
        backupCount=backup_count
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    return file_handler


def setup_logging() -> InternHubLogger:
    """Setup logging configuration based on environment"""

    logging.setLoggerClass(InternHubLogger)

    logger = logging.getLogger("internhub")
    logger.__class__ = InternHubLogger  # in case it was created before setLoggerClass
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    logger.handlers.clear()

    is_production = settings.ENVIRONMENT == "production"

    if is_production:
        json_formatter = JSONFormatter()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(json_formatter)
        logger.addHandler(console_handler)

        file_handler = _file_handler(json_formatter, backup_count=10)
        if file_handler:
            logger.addHandler(file_handler)

    else:
        detailed_format = (
            "%(asctime)s | %(levelname)-8s | "
            "[%(request_id)s] [%(user_id)s] [%(internship_id)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        simple_format = "%(levelname)-8s | %(message)s"

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(ContextualFormatter(simple_format))
        logger.addHandler(console_handler)

        file_handler = _file_handler(ContextualFormatter(detailed_format), backup_count=5)
        if file_handler:
            logger.addHandler(file_handler)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosmtplib").setLevel(logging.WARNING)

    logger.debug(
        "Logging initialized",
        extra={
            "environment": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "json_logging": is_production
        }
    )

    return logger


logger: InternHubLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'set_request_id',
    'set_user_id',
    'set_internship_id',
    'generate_request_id',
    'clear_context',
    'current_context',
    'InternHubLogger',
]
