"""Logging configuration for the report audit trail."""

from __future__ import annotations

import json
import logging
import logging.handlers
import re
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from deductly.models.report import T2125Data

AUDIT_LOGGER_NAME = "deductly.audit"

# LogRecord attributes that are not user-supplied extras.
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "stack_info",
        "exc_info",
        "exc_text",
        "message",
    }
)


class LoggingConfig(BaseModel):
    """Audit logging configuration. CRA asks for six years of records."""

    log_level: str = Field(default="INFO", description="Log level for audit trail")
    max_file_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=365, description="Number of backup files (~1 year)"
    )
    audit_log_path: Path = Field(
        default=Path("logs/audit"), description="Audit log directory"
    )
    enable_console_output: bool = Field(
        default=False, description="Also write audit records to stderr"
    )
    sanitize_sensitive_data: bool = Field(
        default=True, description="Remove taxpayer identifiers from logs"
    )

    def setup_directories(self) -> None:
        """Create log directories if they don't exist."""
        self.audit_log_path.mkdir(parents=True, exist_ok=True)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured audit logging."""

    def __init__(self, *, sanitize_sensitive: bool = True) -> None:
        """Initialize formatter with sanitization option."""
        super().__init__()
        self.sanitize_sensitive = sanitize_sensitive
        self.sensitive_fields = {
            "sin",
            "business_number",
            "gst_hst_number",
            "legal_name",
            "full_name",
            "password",
            "api_key",
            "access_token",
        }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName if record.funcName else "<unknown>",
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }
        if extra_fields:
            if self.sanitize_sensitive:
                extra_fields = self._sanitize_data(extra_fields)
            log_entry.update(extra_fields)

        return json.dumps(log_entry, default=self._json_serializer, ensure_ascii=False)

    def _sanitize_data(self, data: dict[str, Any]) -> dict[str, Any]:
        """Mask taxpayer identifiers in log entries."""
        sanitized: dict[str, Any] = {}
        for key, value in data.items():
            if self._is_sensitive_key(key):
                sanitized[key] = "***REDACTED***"
            elif isinstance(value, dict):
                sanitized[key] = self._sanitize_data(value)
            elif isinstance(value, list):
                sanitized[key] = [
                    self._sanitize_data(item) if isinstance(item, dict) else item
                    for item in value
                ]
            else:
                sanitized[key] = value
        return sanitized

    def _is_sensitive_key(self, key: str) -> bool:
        """Check if a key should be considered sensitive."""
        key_lower = key.lower()
        short_term_length = 3

        for sensitive in self.sensitive_fields:
            if len(sensitive) <= short_term_length:
                # "sin" must not match "business" or "using"
                pattern = r"(?:^|_)" + re.escape(sensitive) + r"(?:$|_)"
                if re.search(pattern, key_lower):
                    return True
            elif sensitive in key_lower:
                return True
        return False

    def _json_serializer(self, obj: Any) -> str | float:  # noqa: ANN401
        """JSON serializer for non-standard types."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return float(obj)
        return str(obj)


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger for the API and CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def setup_audit_logging(config: LoggingConfig) -> logging.Logger:
    """Set up the audit logger with a rotating JSON file handler."""
    config.setup_directories()

    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    audit_logger.setLevel(getattr(logging, config.log_level.upper()))

    # Clear existing handlers to avoid duplicates
    audit_logger.handlers.clear()

    log_file = config.audit_log_path / "deductly_audit.log"
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=config.max_file_size_mb * 1024 * 1024,  # Convert MB to bytes
        backupCount=config.backup_count,
    )

    formatter = StructuredFormatter(sanitize_sensitive=config.sanitize_sensitive_data)
    file_handler.setFormatter(formatter)
    audit_logger.addHandler(file_handler)

    if config.enable_console_output:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        audit_logger.addHandler(console_handler)

    audit_logger.propagate = False

    return audit_logger


def log_report_generated(report: T2125Data) -> None:
    """Write one audit record for a generated T2125 report."""
    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    audit_logger.info(
        "T2125 report generated for %d",
        report.tax_year,
        extra={
            "event_type": "t2125_generated",
            "tax_year": report.tax_year,
            "gross_business_income": report.part3c_income.gross_business_income,
            "total_expenses": report.part4_expenses.total_expenses,
            "net_income": report.part5_net_income.your_net_income,
            "expense_count": len(report.expense_details),
            "warning_count": len(report.warnings),
        },
    )
