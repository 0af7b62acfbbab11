"""
Error handling for pinreqs.

Defines the fatal exception hierarchy raised by the pipeline stages and a
centralized handler that logs recoverable problems and dispatches callbacks.
"""

import logging
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class RequirementsGenerationError(Exception):
    """Base class for errors that abort a generation run."""


class TargetNotFoundError(RequirementsGenerationError):
    """The directory to scan does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"directory '{path}' not found")


class ScanError(RequirementsGenerationError):
    """Directory traversal failed."""


class PackageListingError(RequirementsGenerationError):
    """The package manager could not be run or reported a failure."""


class OutputWriteError(RequirementsGenerationError):
    """The requirements file could not be created or written."""


class ErrorLevel(Enum):
    """Error severity levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorCategory(Enum):
    """Error categories for better classification."""

    FILESYSTEM = "FILESYSTEM"


@dataclass
class ErrorContext:
    """Structured error context information."""

    level: ErrorLevel
    category: ErrorCategory
    message: str
    module: str
    function: str
    details: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Exception] = None
    traceback_info: Optional[str] = None


ErrorCallback = Callable[[ErrorContext], None]

_LEVEL_MAP = {
    ErrorLevel.DEBUG: logging.DEBUG,
    ErrorLevel.INFO: logging.INFO,
    ErrorLevel.WARNING: logging.WARNING,
    ErrorLevel.ERROR: logging.ERROR,
    ErrorLevel.CRITICAL: logging.CRITICAL,
}


class ErrorHandler:
    """
    Centralized error handler for consistent error management.

    Logs through the standard logging tree under ``pinreqs`` so the CLI's
    logging configuration decides where messages end up.
    """

    def __init__(
        self,
        logger_name: str = "pinreqs.errors",
        enable_callbacks: bool = True,
    ):
        """
        Initialize error handler.

        Args:
            logger_name: Name for the logger
            enable_callbacks: Whether to enable error callbacks
        """
        self.logger = logging.getLogger(logger_name)
        self.enable_callbacks = enable_callbacks
        self.error_callbacks: Dict[ErrorCategory, List[ErrorCallback]] = {}
        self.global_callbacks: List[ErrorCallback] = []
        self.error_stats: Dict[str, int] = {}

    def register_callback(
        self, callback: ErrorCallback, category: Optional[ErrorCategory] = None
    ):
        """
        Register error callback.

        Args:
            callback: Function to call on errors
            category: Error category to filter, None for all errors
        """
        if not self.enable_callbacks:
            return

        if category is None:
            self.global_callbacks.append(callback)
        else:
            self.error_callbacks.setdefault(category, []).append(callback)

    def handle_error(
        self,
        level: ErrorLevel,
        category: ErrorCategory,
        message: str,
        module: str,
        function: str,
        exception: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> ErrorContext:
        """
        Handle an error with logging and callbacks.

        Returns:
            ErrorContext: The created error context
        """
        context = ErrorContext(
            level=level,
            category=category,
            message=message,
            module=module,
            function=function,
            details=details or {},
            exception=exception,
            traceback_info=traceback.format_exc() if exception else None,
        )

        stat_key = f"{category.value}_{level.value}"
        self.error_stats[stat_key] = self.error_stats.get(stat_key, 0) + 1

        self.logger.log(
            _LEVEL_MAP[level],
            message,
            extra={
                "component": module,
                "category": category.value,
                "function": function,
                "details": context.details,
            },
        )

        if self.enable_callbacks:
            for callback in self.error_callbacks.get(category, []):
                try:
                    callback(context)
                except Exception as cb_error:
                    # Don't let callback errors break the main flow
                    self.logger.error(f"Error in callback: {cb_error}")

            for callback in self.global_callbacks:
                try:
                    callback(context)
                except Exception as cb_error:
                    self.logger.error(f"Error in global callback: {cb_error}")

        return context

    def warning(
        self,
        category: ErrorCategory,
        message: str,
        module: str,
        function: str,
        **kwargs,
    ) -> ErrorContext:
        """Handle warning level error."""
        return self.handle_error(
            ErrorLevel.WARNING, category, message, module, function, **kwargs
        )

    def get_error_stats(self) -> Dict[str, int]:
        """Get error statistics."""
        return self.error_stats.copy()


_global_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """
    Get the global error handler instance.

    Returns:
        ErrorHandler: Global error handler
    """
    global _global_error_handler
    if _global_error_handler is None:
        _global_error_handler = ErrorHandler()
    return _global_error_handler


def setup_error_handling(
    enable_callbacks: bool = True,
    logger_name: str = "pinreqs.errors",
) -> ErrorHandler:
    """Replace the global error handler with a freshly configured one."""
    global _global_error_handler
    _global_error_handler = ErrorHandler(logger_name, enable_callbacks)
    return _global_error_handler


def log_read_error(
    file_path: str,
    exception: Exception,
    module: str,
    function: str,
) -> ErrorContext:
    """
    Report a source file that could not be read.

    The message names the file and the underlying cause; the run continues.
    """
    return get_error_handler().warning(
        ErrorCategory.FILESYSTEM,
        f"Could not read {file_path}: {exception}",
        module,
        function,
        details={"file_path": file_path},
        exception=exception,
    )
