"""Run-scoped diagnostics for hierarchy validation."""

from .logger import (
    STRUCTURAL_CODES,
    TOKEN_CODES,
    ErrorCode,
    ErrorLevel,
    LogItem,
    ValidationLogger,
)

__all__ = [
    "ErrorCode",
    "ErrorLevel",
    "LogItem",
    "ValidationLogger",
    "STRUCTURAL_CODES",
    "TOKEN_CODES",
]
