"""Utility modules for the Content Ideator service."""
from .logging import LoggerSetup, CorrelatedLogger, ProductionMetricsLogger
from .timecode import parse_timecode, format_timecode, normalize_timecode

__all__ = [
    "LoggerSetup", "CorrelatedLogger", "ProductionMetricsLogger",
    "parse_timecode", "format_timecode", "normalize_timecode"
]
