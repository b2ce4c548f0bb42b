"""
Unit tests for custom exceptions.

Tests exception hierarchy and error messages.
"""

import pytest

from docvault.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DocVaultError,
    NotFoundError,
    PermissionDeniedError,
    PolicyServiceError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance hierarchy."""

    def test_base_is_runtime_error(self):
        assert isinstance(DocVaultError("test error"), RuntimeError)

    @pytest.mark.parametrize(
        "error_type",
        [
            ValidationError,
            PermissionDeniedError,
            NotFoundError,
            PolicyServiceError,
            AuthenticationError,
            ConfigurationError,
        ],
    )
    def test_subclasses_share_base(self, error_type):
        error = error_type("failed")
        assert isinstance(error, DocVaultError)
        assert isinstance(error, RuntimeError)

    def test_permission_denied_is_not_builtin_permission_error(self):
        assert not isinstance(PermissionDeniedError("no"), PermissionError)


class TestExceptionMessages:
    """Test exception message formatting."""

    def test_plain_message(self):
        error = DocVaultError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.context == {}

    def test_message_with_context(self):
        error = DocVaultError("Something went wrong", context={"document_id": "1"})
        assert "context:" in str(error)
        assert "document_id=1" in str(error)

    def test_validation_error_field(self):
        error = ValidationError("Title is required", field="title")
        assert error.field == "title"
        assert error.context["field"] == "title"

    def test_permission_denied_context(self):
        error = PermissionDeniedError(
            "denied", subject_id="viewer-id", action="delete", resource_id="3"
        )
        assert error.subject_id == "viewer-id"
        assert error.action == "delete"
        assert error.resource_id == "3"
        assert "subject_id=viewer-id" in str(error)

    def test_not_found_context(self):
        error = NotFoundError("Document not found", resource_id="42")
        assert error.resource_id == "42"
        assert "resource_id" in error.context

    def test_policy_service_context(self):
        error = PolicyServiceError("down", pdp_url="http://pdp", status_code=502)
        assert error.status_code == 502
        assert error.context == {"pdp_url": "http://pdp", "status_code": 502}

    def test_configuration_error_with_key(self):
        error = ConfigurationError("Invalid value", config_key="AUTHZ_TIMEOUT_SECONDS", config_value=-1)
        assert error.config_key == "AUTHZ_TIMEOUT_SECONDS"
        assert error.config_value == -1
