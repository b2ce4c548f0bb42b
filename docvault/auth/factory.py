"""
Authorization Provider Factory

Builds the configured authorization strategy from AppConfig.

This module is part of DocVault.
"""

import logging

from ..config import AppConfig
from ..exceptions import ConfigurationError
from .base import BaseAuthorizationProvider
from .provider import LocalRuleProvider, RemotePolicyProvider
from .rules import RulePolicy

logger = logging.getLogger(__name__)


def create_rule_policy(config: AppConfig) -> RulePolicy:
    """Build the rule table's policy points from configuration."""
    return RulePolicy(editor_can_delete_unowned=config.editor_can_delete_unowned)


def create_authz_provider(config: AppConfig) -> BaseAuthorizationProvider:
    """
    Create the authorization provider selected by ``config.authz_provider``.

    Args:
        config: Application configuration

    Returns:
        LocalRuleProvider or RemotePolicyProvider

    Raises:
        ConfigurationError: If the provider is unknown or the remote provider
            has no PDP URL
    """
    provider = config.authz_provider

    if provider == "local":
        logger.info("Using local rule-table authorization provider")
        return LocalRuleProvider(policy=create_rule_policy(config))

    if provider == "remote":
        if not config.pdp_url:
            raise ConfigurationError(
                "Remote authorization requires a policy decision point URL. "
                "Set PERMIT_PDP_URL environment variable.",
                config_key="PERMIT_PDP_URL",
            )
        if not config.pdp_token:
            logger.warning("PERMIT_SDK_TOKEN is not set; PDP requests will be unauthenticated")
        if config.fail_open:
            logger.warning(
                "Remote authorization is configured to FAIL OPEN: "
                "requests are allowed whenever the policy service is unavailable"
            )
        logger.info(f"Using remote authorization provider at {config.pdp_url}")
        return RemotePolicyProvider(
            pdp_url=config.pdp_url,
            token=config.pdp_token or None,
            timeout=config.authz_timeout,
            fail_open=config.fail_open,
        )

    raise ConfigurationError(
        f"Unknown authorization provider '{provider}'",
        config_key="AUTHZ_PROVIDER",
        config_value=provider,
    )
