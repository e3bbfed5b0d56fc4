"""Structured logging utilities for stackxml.

Every record carries the component that emitted it and the document it is
about. Records that concern a position in the document also carry the line,
and a ``location`` string such as ``frameset.xml:12`` for log formats.
"""

import logging
from typing import Any, Dict, Optional


class SourceLogger:
    """Logger bound to one document source."""

    def __init__(
        self,
        name: str,
        source_name: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize source logger.

        Args:
            name: Logger name (typically __name__)
            source_name: Document being processed, if any
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.source_name = source_name
        self.component = component or name.split(".")[-1]

    def location(self, line: Optional[int] = None) -> str:
        """Format ``source:line`` the way errors render their position."""
        location = self.source_name or "<string>"
        if line:
            location = f"{location}:{line}"
        return location

    def _get_extra(
        self, extra: Optional[Dict[str, Any]], line: Optional[int]
    ) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "source": self.source_name,
            "line": line,
            "location": self.location(line),
        }

        if extra:
            combined_extra.update(extra)

        return combined_extra

    def debug(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        line: Optional[int] = None
    ) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(message, extra=self._get_extra(extra, line))

    def warning(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        line: Optional[int] = None
    ) -> None:
        self.logger.warning(message, extra=self._get_extra(extra, line))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        line: Optional[int] = None
    ) -> None:
        self.logger.error(message, extra=self._get_extra(extra, line))


def get_logger(
    name: str,
    source_name: Optional[str] = None,
    component: Optional[str] = None
) -> SourceLogger:
    """Get a source-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        source_name: Document being processed, if any
        component: Component name for structured logging

    Returns:
        SourceLogger instance
    """
    return SourceLogger(name, source_name, component)
