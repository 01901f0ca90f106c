"""
Telemetry module for ogc-client-python.

Provides structured logging with credential masking.
"""

from ogc_client_python.telemetry.logger import (
    JsonFormatter,
    LogLevel,
    OgcLogger,
    SensitiveDataMasker,
    TextFormatter,
    get_logger,
)

__all__ = [
    "JsonFormatter",
    "LogLevel",
    "OgcLogger",
    "SensitiveDataMasker",
    "TextFormatter",
    "get_logger",
]
