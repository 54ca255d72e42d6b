"""Response creation utilities."""
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote
from fastapi import status
from fastapi.responses import JSONResponse, Response

from ..models.responses import (
    SuccessResponse, ErrorResponse, ResponseMetadata,
    ErrorInfo, ErrorDetails
)
from ..core.exceptions import IdeatorBaseException

# Map error codes to HTTP status codes
STATUS_MAPPING = {
    "CONFIG_ERROR": status.HTTP_400_BAD_REQUEST,
    "AUTH_ERROR": status.HTTP_401_UNAUTHORIZED,
    "EMPTY_INPUT": 422,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "UPSTREAM_ERROR": status.HTTP_502_BAD_GATEWAY,
    "GENERATION_ERROR": status.HTTP_502_BAD_GATEWAY,
    "ASSEMBLY_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "PACKAGING_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

class ResponseHelper:
    """Utilities for creating standardized API responses."""

    @staticmethod
    def generate_request_id() -> str:
        """Generate unique request ID."""
        return f"req_{uuid.uuid4().hex[:8]}"

    @staticmethod
    def elapsed_ms(started_at: float) -> int:
        """Milliseconds since a ``time.perf_counter()`` reading."""
        return int((time.perf_counter() - started_at) * 1000)

    @staticmethod
    def create_response_metadata(request_id: str, processing_time_ms: Optional[int] = None) -> ResponseMetadata:
        """Create standardized response metadata."""
        return ResponseMetadata(
            request_id=request_id,
            timestamp=datetime.now(timezone.utc).isoformat(),
            processing_time_ms=processing_time_ms
        )

    @staticmethod
    def create_success_response(
        data: Any,
        request_id: Optional[str] = None,
        processing_time_ms: Optional[int] = None,
        status_code: int = status.HTTP_200_OK
    ) -> JSONResponse:
        """Create standardized success response."""
        if not request_id:
            request_id = ResponseHelper.generate_request_id()

        response = SuccessResponse(
            data=data,
            metadata=ResponseHelper.create_response_metadata(request_id, processing_time_ms)
        )
        return JSONResponse(
            status_code=status_code,
            content=response.model_dump(mode="json")
        )

    @staticmethod
    def create_error_response(
        error_code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        request_id: Optional[str] = None,
        details: Optional[ErrorDetails] = None
    ) -> JSONResponse:
        """Create standardized error response."""
        if not request_id:
            request_id = ResponseHelper.generate_request_id()

        response = ErrorResponse(
            error=ErrorInfo(
                code=error_code,
                message=message,
                details=details
            ),
            metadata=ResponseHelper.create_response_metadata(request_id)
        )
        return JSONResponse(
            status_code=status_code,
            content=response.model_dump(mode="json")
        )

    @staticmethod
    def create_error_from_exception(
        exc: IdeatorBaseException,
        request_id: Optional[str] = None
    ) -> JSONResponse:
        """Create error response from custom exception."""
        http_status = STATUS_MAPPING.get(exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

        error_details = None
        if exc.details:
            error_details = ErrorDetails(**exc.details)

        return ResponseHelper.create_error_response(
            error_code=exc.error_code,
            message=exc.message,
            status_code=http_status,
            request_id=request_id,
            details=error_details
        )

    @staticmethod
    def create_binary_response(
        content: bytes,
        media_type: str,
        filename: Optional[str] = None
    ) -> Response:
        """Raw payload response, sent as a download when ``filename`` is given."""
        headers = None
        if filename:
            headers = {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}
        return Response(content=content, media_type=media_type, headers=headers)
