"""
DocVault - document management with role- and attribute-based access control.

Every create/read/update/delete on a document is gated by an authorization
decision, made either by the in-process rule table or by a remote policy
decision point.
"""

from .auth import (
    Action,
    AdminPanelAttrs,
    Decision,
    DocumentAttrs,
    LocalRuleProvider,
    RemotePolicyProvider,
    ResourceType,
    Role,
    RulePolicy,
    Subject,
    UserDirectory,
    create_authz_provider,
    decide,
)
from .config import AppConfig
from .documents import ChangeNotifier, Document, DocumentsChanged, DocumentStore
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    DocVaultError,
    NotFoundError,
    PermissionDeniedError,
    PolicyServiceError,
    ValidationError,
)
from .gateway import DocumentGateway

__version__ = "0.1.0"

__all__ = [
    # Core
    "DocumentStore",
    "DocumentGateway",
    "Document",
    "ChangeNotifier",
    "DocumentsChanged",
    "AppConfig",
    # Auth
    "Action",
    "AdminPanelAttrs",
    "Decision",
    "DocumentAttrs",
    "ResourceType",
    "Role",
    "Subject",
    "RulePolicy",
    "decide",
    "LocalRuleProvider",
    "RemotePolicyProvider",
    "create_authz_provider",
    "UserDirectory",
    # Errors
    "DocVaultError",
    "ValidationError",
    "PermissionDeniedError",
    "NotFoundError",
    "PolicyServiceError",
    "AuthenticationError",
    "ConfigurationError",
]
