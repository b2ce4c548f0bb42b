"""
Custom exceptions for DocVault.

Every error raised by the document store, the authorization providers and the
identity layer derives from DocVaultError, which keeps compatibility with
RuntimeError and carries a context dictionary for logging.
"""

from typing import Any, Dict, Optional


class DocVaultError(RuntimeError):
    """
    Base exception for DocVault errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (document_id,
                 subject_id, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional dictionary with additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ValidationError(DocVaultError):
    """
    Raised when caller input is empty or invalid.

    Attributes:
        message: Error message
        field: Name of the offending field (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if field:
            context["field"] = field
        super().__init__(message, context=context)
        self.field = field


class PermissionDeniedError(DocVaultError):
    """
    Raised when the authorization decider denies an action.

    Attributes:
        message: Error message
        subject_id: Subject that was denied (if available)
        action: Action that was attempted (if available)
        resource_id: Resource the action targeted (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        subject_id: Optional[str] = None,
        action: Optional[str] = None,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if subject_id:
            context["subject_id"] = subject_id
        if action:
            context["action"] = action
        if resource_id:
            context["resource_id"] = resource_id
        super().__init__(message, context=context)
        self.subject_id = subject_id
        self.action = action
        self.resource_id = resource_id


class NotFoundError(DocVaultError):
    """
    Raised when no record exists with the given ID.

    Attributes:
        message: Error message
        resource_id: The missing ID (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if resource_id:
            context["resource_id"] = resource_id
        super().__init__(message, context=context)
        self.resource_id = resource_id


class PolicyServiceError(DocVaultError):
    """
    Raised when the remote policy decision point is unreachable or errors.

    Providers resolve this internally through their failure policy; it only
    escapes to callers that ask for strict evaluation.

    Attributes:
        message: Error message
        pdp_url: Policy decision point URL (if available)
        status_code: HTTP status returned by the PDP (if any)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        pdp_url: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if pdp_url:
            context["pdp_url"] = pdp_url
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(message, context=context)
        self.pdp_url = pdp_url
        self.status_code = status_code


class AuthenticationError(DocVaultError):
    """Raised when a subject cannot be identified (bad credentials, unknown ID, bad token)."""


class ConfigurationError(DocVaultError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value
