"""Shared utilities for stackxml.

This module provides the error taxonomy, configuration objects and logging
helpers used by the reader, the writer and the command line tool.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DocumentConfig,
    ReaderConfig,
    WriterConfig,
)
from .errors import (
    CloseTagMismatchError,
    ContractViolation,
    ErrorKind,
    XmlError,
)
from .logging import (
    SourceLogger,
    get_logger,
)

__all__ = [
    "CloseTagMismatchError",
    "ConfigError",
    "ConfigValidationError",
    "ContractViolation",
    "DocumentConfig",
    "ErrorKind",
    "ReaderConfig",
    "SourceLogger",
    "WriterConfig",
    "XmlError",
    "get_logger",
]
