"""Logging configuration and utilities."""
import logging
import sys
from typing import Optional
from ..core.config import settings

class LoggerSetup:
    """Centralized logging configuration."""

    @staticmethod
    def setup_logging(
        level: Optional[str] = None,
        format_string: Optional[str] = None
    ) -> None:
        """Setup application logging."""
        log_level = level or settings.log_level
        log_format = format_string or settings.log_format

        # Configure root logger
        logging.basicConfig(
            level=getattr(logging, log_level.upper(), logging.INFO),
            format=log_format,
            handlers=[
                logging.StreamHandler(sys.stdout)
            ]
        )

        # Set specific logger levels
        logging.getLogger("uvicorn").setLevel(logging.INFO)
        logging.getLogger("fastapi").setLevel(logging.INFO)
        logging.getLogger("openai").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("aiohttp").setLevel(logging.WARNING)
        logging.getLogger("moviepy").setLevel(logging.WARNING)

class CorrelatedLogger:
    """Logger with correlation ID support for request and session tracking."""

    def __init__(self, name: str, request_id: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.request_id = request_id

    def _format_message(self, message: str) -> str:
        """Format message with request ID if available."""
        if self.request_id:
            return f"[{self.request_id}] {message}"
        return message

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.logger.error(self._format_message(message), **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        self.logger.exception(self._format_message(message), **kwargs)


class ProductionMetricsLogger:
    """Key=value metrics for production pipeline stages and generation calls."""

    def __init__(self):
        self.logger = logging.getLogger("metrics")

    def log_stage_metrics(
        self,
        session_id: str,
        stage: str,
        success: bool,
        processing_time_ms: int,
        item_count: Optional[int] = None,
        failed_count: int = 0
    ) -> None:
        """Log the outcome of one pipeline stage."""
        status = "success" if success else "failed"

        log_msg = (
            f"STAGE_METRICS session_id={session_id} stage={stage} "
            f"status={status} processing_time_ms={processing_time_ms}"
        )

        if item_count is not None:
            log_msg += f" items={item_count} failed={failed_count}"

        self.logger.info(log_msg)

    def log_generation_metrics(
        self,
        session_id: str,
        operation: str,
        success: bool,
        processing_time_ms: int,
        slot: Optional[int] = None,
        error_code: Optional[str] = None
    ) -> None:
        """Log a single backend generation call."""
        status = "success" if success else "failed"

        log_msg = (
            f"GENERATION_METRICS session_id={session_id} operation={operation} "
            f"status={status} processing_time_ms={processing_time_ms}"
        )

        if slot is not None:
            log_msg += f" slot={slot}"

        if error_code:
            log_msg += f" error_code={error_code}"

        self.logger.info(log_msg)
