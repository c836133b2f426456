"""Context-aware logging utilities for datafile processing.

Every component logs through a :class:`ContextLogger`, which stamps records
with the component name and an optional correlation ID so that one read or
write can be followed through the reader, builder and writer.
"""

import logging
import sys
from typing import Any, Dict, Optional, TextIO

PACKAGE_LOGGER_NAME = "robust_datafile"

# Record attributes added by ContextLogger; rendered by ContextFormatter
_CONTEXT_FIELDS = ("component", "correlation_id")

# Attributes every LogRecord carries; anything else came in through ``extra``
_STANDARD_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


class ContextLogger:
    """Logger that attaches component and correlation information to records."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize context logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name, defaults to the last part of ``name``
            context: Extra fields attached to every record
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **fields: Any) -> "ContextLogger":
        """Return a logger sharing this one's identity with extra context fields."""
        merged = dict(self.context)
        merged.update(fields)
        return ContextLogger(
            self.logger.name, self.correlation_id, self.component, merged
        )

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def _build_extra(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        combined: Dict[str, Any] = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        combined.update(self.context)
        if extra:
            # LogRecord refuses to overwrite its own attributes
            for key, value in extra.items():
                if key in _STANDARD_RECORD_FIELDS:
                    key = f"ctx_{key}"
                combined[key] = value
        return combined

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(
            level, message, extra=self._build_extra(extra), exc_info=exc_info,
            stacklevel=3,
        )

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra, False)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra, False)

    def warning(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ) -> None:
        self._log(logging.WARNING, message, extra, exc_info)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ) -> None:
        self._log(logging.ERROR, message, extra, exc_info)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log an error with the active exception's traceback."""
        self._log(logging.ERROR, message, extra, True)


class ContextFormatter(logging.Formatter):
    """Formatter that appends context fields as ``key=value`` pairs."""

    def __init__(self, fmt: Optional[str] = None) -> None:
        super().__init__(fmt or "%(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        pairs = []
        for key in _CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                pairs.append(f"{key}={value}")
        for key, value in sorted(vars(record).items()):
            if key in _STANDARD_RECORD_FIELDS or key in _CONTEXT_FIELDS:
                continue
            pairs.append(f"{key}={value}")
        if not pairs:
            return base
        return f"{base} [{' '.join(pairs)}]"


def configure_logging(level: str = "WARNING", stream: Optional[TextIO] = None) -> logging.Handler:
    """Install a context-aware handler on the package logger.

    Calling this again replaces the handler installed by a previous call.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Output stream, defaults to stderr

    Returns:
        The installed handler
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for existing in list(package_logger.handlers):
        if getattr(existing, "_robust_datafile_handler", False):
            package_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ContextFormatter())
    handler._robust_datafile_handler = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    return handler


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None,
) -> ContextLogger:
    """Get a context-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        ContextLogger instance
    """
    return ContextLogger(name, correlation_id, component)
