"""
Structured logging configuration for pinreqs.

Provides consistent, machine-readable logging of pipeline stages so a
generation run can be traced stage by stage.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

ROOT_LOGGER_NAME = "pinreqs"

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_RESERVED_ATTRS = frozenset(
    [
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
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "asctime",
    ]
)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "component": getattr(record, "component", record.name),
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_entry:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class PipelineLogger:
    """Event-typed logger for generation pipeline stages."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
        self.run_context: Dict[str, Any] = {}

    def set_run_context(
        self, run_id: Optional[str] = None, target_dir: Optional[str] = None
    ) -> None:
        """Set run context attached to every subsequent event."""
        self.run_context = {}
        if run_id:
            self.run_context["run_id"] = run_id
        if target_dir:
            self.run_context["target_dir"] = target_dir

    def clear_run_context(self) -> None:
        self.run_context.clear()

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        log_data = {"event_type": event_type, **self.run_context, **kwargs}
        self.logger.log(level, event_type, extra=log_data)

    def info(self, event_type: str, **kwargs) -> None:
        self._log(logging.INFO, event_type, **kwargs)


_pipeline_logger = PipelineLogger("pipeline")


def get_pipeline_logger() -> PipelineLogger:
    """Get the pipeline stage logger."""
    return _pipeline_logger


def log_generation_start(run_id: str, target_dir: str, output_file: str) -> None:
    """Log the start of a run and bind its context."""
    logger = get_pipeline_logger()
    logger.set_run_context(run_id, target_dir)
    logger.info("generation_started", output_file=output_file)


def log_stage_complete(stage: str, **kwargs) -> None:
    get_pipeline_logger().info("stage_completed", stage=stage, **kwargs)


def log_packages_listed(command: str, packages_count: int) -> None:
    get_pipeline_logger().info(
        "packages_listed", command=command, packages_count=packages_count
    )


def log_requirements_matched(requirements: List[str], modules_count: int) -> None:
    """Log which freeze lines were selected for output."""
    get_pipeline_logger().info(
        "requirements_matched",
        requirements=requirements,
        requirements_count=len(requirements),
        modules_count=modules_count,
    )


def log_generation_complete(
    duration_ms: int, requirements_count: int, modules_count: int
) -> None:
    """Log run completion and drop the run context."""
    logger = get_pipeline_logger()
    logger.info(
        "generation_completed",
        duration_ms=duration_ms,
        requirements_count=requirements_count,
        modules_count=modules_count,
    )
    logger.clear_run_context()


def configure_logging(
    log_level: str = "WARNING",
    enable_json: bool = False,
    log_format: str = DEFAULT_LOG_FORMAT,
) -> logging.Logger:
    """
    Configure the ``pinreqs`` logger tree.

    Any handler installed by a previous call is replaced, so repeated CLI
    invocations in one process always log to the current stderr.
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if enable_json:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(log_format))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    root_logger.propagate = False
    return root_logger
