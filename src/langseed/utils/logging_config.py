"""Logging configuration with optional structured JSON output.

Generation attempts, retries and batch imports log with `extra={...}`
context; the JSON formatter lifts those fields into an "extra" object.
"""

import json
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from langseed import constants

# Attributes every LogRecord carries; anything else came from `extra`
_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured log records.

    Converts log records to JSON with consistent structure:
    - timestamp: ISO 8601 UTC timestamp
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - extra: Any additional context fields
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, ensure_ascii=False, default=str)


def configure_logging(
    level: Union[str, int, None] = None,
    log_file: Optional[Union[str, Path]] = None,
    json_format: Optional[bool] = None,
    console_output: bool = True,
) -> None:
    """Configure root logging for the engine.

    Args:
        level: Logging level (default: LOG_LEVEL env var)
        log_file: Optional file path for log output (default: console only)
        json_format: Use the JSON formatter (default: LOG_FORMAT env var == "json")
        console_output: If True, log to stderr

    Example:
        >>> configure_logging(level="DEBUG", json_format=True)
    """
    if level is None:
        level = constants.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if json_format is None:
        json_format = constants.LOG_FORMAT == "json"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.info(
        f"Logging configured: level={logging.getLevelName(level)}, json_format={json_format}"
    )


@contextmanager
def pipeline_stage_logger(stage_name: str, **context):
    """Log entry, exit and duration of a processing stage.

    Args:
        stage_name: Name of the stage (e.g. "word_import")
        **context: Additional context fields to include in logs

    Yields:
        Logger instance for the stage

    Example:
        >>> with pipeline_stage_logger("word_import", language="zh", words=3) as logger:
        ...     logger.info("Importing words")
    """
    logger = logging.getLogger(f"langseed.{stage_name}")

    start_time = datetime.now(timezone.utc)
    logger.info(
        f"Starting stage: {stage_name}",
        extra={"stage": stage_name, "status": "started", **context},
    )

    try:
        yield logger
    except Exception as e:
        duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
        logger.error(
            f"Failed stage: {stage_name}",
            extra={
                "stage": stage_name,
                "status": "failed",
                "duration_ms": round(duration_ms, 2),
                "error": str(e)[:200],
                **context,
            },
            exc_info=True,
        )
        raise

    duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    logger.info(
        f"Completed stage: {stage_name}",
        extra={
            "stage": stage_name,
            "status": "completed",
            "duration_ms": round(duration_ms, 2),
            **context,
        },
    )
