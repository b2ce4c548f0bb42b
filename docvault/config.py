"""
Configuration management for DocVault.

Settings are read from environment variables, and every value can also be
passed directly, which is how tests build isolated configurations.

Example:
    # Using environment variables
    config = AppConfig()
    config.validate()

    # Or using direct parameters
    config = AppConfig(authz_provider="remote", pdp_url="http://localhost:7766")
"""

import os

from .constants import (
    DEFAULT_ACCESS_TOKEN_TTL,
    DEFAULT_AUTHZ_PROVIDER,
    DEFAULT_AUTHZ_TIMEOUT_SECONDS,
    MIN_SECRET_KEY_LENGTH,
    SUPPORTED_AUTHZ_PROVIDERS,
)
from .exceptions import ConfigurationError

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


class AppConfig:
    """
    DocVault configuration.

    Attributes:
        authz_provider: "local" (rule table) or "remote" (policy decision point)
        pdp_url: Base URL of the policy decision point (PERMIT_PDP_URL)
        pdp_token: Bearer token for the policy decision point (PERMIT_SDK_TOKEN)
        fail_open: Allow on policy-service failure instead of denying
        authz_timeout: Timeout for one remote decision in seconds
        editor_can_delete_unowned: Let editors delete documents they do not own
        secret_key: Key used to sign access tokens
        access_token_ttl: Access token lifetime in seconds
        demo_password: Password shared by the demo users
        seed_documents: Load the seed documents into a new store
        bcrypt_rounds: bcrypt cost factor for demo password hashes
    """

    def __init__(
        self,
        authz_provider: str | None = None,
        pdp_url: str | None = None,
        pdp_token: str | None = None,
        fail_open: bool | None = None,
        authz_timeout: float | None = None,
        editor_can_delete_unowned: bool | None = None,
        secret_key: str | None = None,
        access_token_ttl: int | None = None,
        demo_password: str | None = None,
        seed_documents: bool | None = None,
        bcrypt_rounds: int | None = None,
    ):
        self.authz_provider = (
            authz_provider or os.getenv("AUTHZ_PROVIDER", DEFAULT_AUTHZ_PROVIDER)
        ).lower()
        self.pdp_url = pdp_url or os.getenv("PERMIT_PDP_URL", "")
        self.pdp_token = pdp_token or os.getenv("PERMIT_SDK_TOKEN", "")
        self.fail_open = (
            fail_open if fail_open is not None else _env_flag("AUTHZ_FAIL_OPEN", False)
        )
        self.authz_timeout = authz_timeout or float(
            os.getenv("AUTHZ_TIMEOUT_SECONDS", str(DEFAULT_AUTHZ_TIMEOUT_SECONDS))
        )
        self.editor_can_delete_unowned = (
            editor_can_delete_unowned
            if editor_can_delete_unowned is not None
            else _env_flag("EDITOR_CAN_DELETE_UNOWNED", False)
        )
        self.secret_key = (
            secret_key or os.getenv("SECRET_KEY") or os.getenv("APP_SECRET_KEY") or ""
        )
        self.access_token_ttl = access_token_ttl or int(
            os.getenv("ACCESS_TOKEN_TTL", str(DEFAULT_ACCESS_TOKEN_TTL))
        )
        self.demo_password = demo_password or os.getenv("DEMO_PASSWORD", "2025DEVChallenge")
        self.seed_documents = (
            seed_documents if seed_documents is not None else _env_flag("SEED_DOCUMENTS", True)
        )
        self.bcrypt_rounds = bcrypt_rounds or int(os.getenv("BCRYPT_ROUNDS", "12"))

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        if self.authz_provider not in SUPPORTED_AUTHZ_PROVIDERS:
            raise ConfigurationError(
                f"authz_provider must be one of {', '.join(SUPPORTED_AUTHZ_PROVIDERS)}, "
                f"got '{self.authz_provider}'",
                config_key="AUTHZ_PROVIDER",
                config_value=self.authz_provider,
            )

        if self.authz_provider == "remote" and not self.pdp_url:
            raise ConfigurationError(
                "pdp_url is required for the remote provider "
                "(set PERMIT_PDP_URL environment variable or pass directly)",
                config_key="PERMIT_PDP_URL",
            )

        if self.authz_timeout <= 0:
            raise ConfigurationError(
                f"authz_timeout must be > 0, got {self.authz_timeout}",
                config_key="AUTHZ_TIMEOUT_SECONDS",
                config_value=self.authz_timeout,
            )

        if not 4 <= self.bcrypt_rounds <= 31:
            raise ConfigurationError(
                f"bcrypt_rounds must be between 4 and 31, got {self.bcrypt_rounds}",
                config_key="BCRYPT_ROUNDS",
                config_value=self.bcrypt_rounds,
            )

        if not self.secret_key:
            raise ConfigurationError(
                "secret_key is required to sign access tokens "
                "(set SECRET_KEY environment variable or pass directly)",
                config_key="SECRET_KEY",
            )

        if len(self.secret_key) < MIN_SECRET_KEY_LENGTH:
            raise ConfigurationError(
                f"secret_key must be at least {MIN_SECRET_KEY_LENGTH} characters, "
                f"got {len(self.secret_key)}",
                config_key="SECRET_KEY",
            )

        if self.access_token_ttl < 1:
            raise ConfigurationError(
                f"access_token_ttl must be >= 1, got {self.access_token_ttl}",
                config_key="ACCESS_TOKEN_TTL",
                config_value=self.access_token_ttl,
            )
