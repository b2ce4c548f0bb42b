"""
Authentication and Authorization Module

Provides the access rule table, the pluggable authorization providers and
the demo identity layer.

This module is part of DocVault.
"""

from .base import BaseAuthorizationProvider
from .factory import create_authz_provider, create_rule_policy
from .jwt import decode_access_token, encode_access_token
from .provider import AuthorizationProvider, LocalRuleProvider, RemotePolicyProvider
from .rules import DEFAULT_POLICY, RulePolicy, decide
from .types import (
    Action,
    AdminPanelAttrs,
    Decision,
    DocumentAttrs,
    ResourceAttrs,
    ResourceType,
    Role,
    Subject,
)
from .users import DEMO_USERS, User, UserDirectory

__all__ = [
    # Types
    "Action",
    "AdminPanelAttrs",
    "Decision",
    "DocumentAttrs",
    "ResourceAttrs",
    "ResourceType",
    "Role",
    "Subject",
    # Rules
    "decide",
    "RulePolicy",
    "DEFAULT_POLICY",
    # Providers
    "AuthorizationProvider",
    "BaseAuthorizationProvider",
    "LocalRuleProvider",
    "RemotePolicyProvider",
    "create_authz_provider",
    "create_rule_policy",
    # Identity
    "User",
    "UserDirectory",
    "DEMO_USERS",
    "encode_access_token",
    "decode_access_token",
]
