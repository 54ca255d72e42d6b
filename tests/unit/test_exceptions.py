"""Unit tests for custom exceptions."""
import pytest
from ideator.core.exceptions import (
    IdeatorBaseException, ValidationError, ConfigError, AuthError,
    EmptyInputError, UpstreamError, GenerationError, AssemblyError,
    PackagingError, NotFoundError, ConflictError
)
from ideator.utils.response_helpers import ResponseHelper

class TestCustomExceptions:
    """Test custom exception classes."""

    def test_base_exception(self):
        """Test base exception functionality."""
        exc = IdeatorBaseException(
            "Test message",
            "TEST_ERROR",
            {"key": "value"}
        )

        assert str(exc) == "Test message"
        assert exc.message == "Test message"
        assert exc.error_code == "TEST_ERROR"
        assert exc.details == {"key": "value"}

    def test_validation_error(self):
        """Test validation error."""
        exc = ValidationError("Invalid input", {"field": "topic"})

        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.message == "Invalid input"
        assert exc.details == {"field": "topic"}

    def test_config_error(self):
        """Test missing credential error."""
        exc = ConfigError("GENAI_API_KEY")

        assert exc.error_code == "CONFIG_ERROR"
        assert "GENAI_API_KEY" in exc.message
        assert exc.details["setting"] == "GENAI_API_KEY"

    def test_auth_error(self):
        exc = AuthError("YouTube Data API", "API key not valid")

        assert exc.error_code == "AUTH_ERROR"
        assert "API key not valid" in exc.message
        assert exc.details["service"] == "YouTube Data API"

    def test_empty_input_error(self):
        exc = EmptyInputError("Some video", "Video has no comments to analyze")

        assert exc.error_code == "EMPTY_INPUT"
        assert exc.details["subject"] == "Some video"

    def test_upstream_and_generation_errors(self):
        upstream = UpstreamError("Generative backend", "quota exceeded")
        generation = GenerationError("speech", "No audio payload returned")

        assert upstream.error_code == "UPSTREAM_ERROR"
        assert "quota exceeded" in upstream.message
        assert generation.error_code == "GENERATION_ERROR"
        assert generation.details["operation"] == "speech"

    def test_media_errors(self):
        assert AssemblyError("No images").error_code == "ASSEMBLY_ERROR"
        assert PackagingError("fetch failed").error_code == "PACKAGING_ERROR"

    def test_not_found_and_conflict(self):
        missing = NotFoundError("Workspace", "abc")
        conflict = ConflictError("regenerate_image", "Image 2 is already being regenerated")

        assert missing.error_code == "NOT_FOUND"
        assert missing.details == {"resource": "Workspace", "resource_id": "abc"}
        assert conflict.error_code == "CONFLICT"

    def test_exception_inheritance(self):
        """Test that all custom exceptions inherit from base."""
        exceptions = [
            ValidationError("test"),
            ConfigError("key"),
            AuthError("svc"),
            EmptyInputError("subject"),
            UpstreamError("svc", "reason"),
            GenerationError("op"),
            AssemblyError("reason"),
            PackagingError("reason"),
            NotFoundError("thing", "1"),
            ConflictError("op"),
        ]

        for exc in exceptions:
            assert isinstance(exc, IdeatorBaseException)
            assert isinstance(exc, Exception)


class TestErrorResponses:
    """Error code to HTTP status mapping."""

    @pytest.mark.parametrize("exc,expected_status", [
        (ConfigError("key"), 400),
        (AuthError("svc"), 401),
        (EmptyInputError("subject"), 422),
        (ValidationError("bad"), 400),
        (NotFoundError("thing", "1"), 404),
        (ConflictError("op"), 409),
        (UpstreamError("svc", "down"), 502),
        (GenerationError("image"), 502),
        (AssemblyError("encode"), 500),
        (PackagingError("zip"), 500),
    ])
    def test_status_mapping(self, exc, expected_status):
        response = ResponseHelper.create_error_from_exception(exc, "req_test")

        assert response.status_code == expected_status

    def test_error_envelope(self):
        import json

        response = ResponseHelper.create_error_from_exception(ConfigError("YT_API_KEY"), "req_test")
        body = json.loads(response.body)

        assert body["success"] is False
        assert body["error"]["code"] == "CONFIG_ERROR"
        assert body["error"]["details"]["setting"] == "YT_API_KEY"
        assert body["metadata"]["request_id"] == "req_test"

    def test_status_mapping_imports_without_deprecation_warnings(self):
        import importlib
        import warnings
        from ideator.utils import response_helpers

        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            module = importlib.reload(response_helpers)

        assert module.STATUS_MAPPING["EMPTY_INPUT"] == 422

class TestBinaryResponses:
    """Test raw payload responses."""

    def test_download_header_is_utf8_encoded(self):
        response = ResponseHelper.create_binary_response(b"zip", "application/zip", filename="요리_assets.zip")

        assert response.body == b"zip"
        assert response.media_type == "application/zip"
        disposition = response.headers["content-disposition"]
        assert disposition.startswith("attachment; filename*=UTF-8''")
        assert "%EC%9A%94" in disposition

    def test_inline_payload(self):
        response = ResponseHelper.create_binary_response(b"\x89PNG", "image/png")

        assert "content-disposition" not in response.headers
