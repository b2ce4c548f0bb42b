"""
Authorization Provider Base Class

Defines the abstract contract every authorization strategy implements, and
the shared failure policy applied when a decision cannot be obtained.

This module is part of DocVault.
"""

from __future__ import annotations

import abc
import logging

from .types import Action, Decision, ResourceAttrs, ResourceType, Subject

logger = logging.getLogger(__name__)


class BaseAuthorizationProvider(abc.ABC):
    """
    Abstract Base Class defining the contract for authorization providers.

    All providers:
    - expose ``decide`` (Decision with reason) and ``check`` (bool)
    - never cache decisions
    - resolve evaluation failures through the configured failure policy,
      which is fail-closed unless ``fail_open`` is set explicitly
    """

    def __init__(self, engine_name: str, fail_open: bool = False):
        """
        Initialize the base provider.

        Args:
            engine_name: Provider name as configured ("local" or "remote")
            fail_open: Allow access when a decision cannot be obtained
        """
        self._engine_name = engine_name
        self._fail_open = fail_open
        self._initialized = False
        logger.info(
            f"Initializing {engine_name} authorization provider "
            f"({'fail-open' if fail_open else 'fail-closed'})"
        )

    @property
    def engine_name(self) -> str:
        return self._engine_name

    @property
    def fail_open(self) -> bool:
        return self._fail_open

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @abc.abstractmethod
    async def decide(
        self,
        subject: Subject,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
    ) -> Decision:
        """
        Decide whether ``subject`` may perform ``action`` on a resource.

        Implementations must not raise on evaluation failures; they resolve
        them through ``_handle_evaluation_error``.

        Args:
            subject: Acting subject (id and role)
            action: Requested action
            resource_type: Type of the target resource
            attrs: Attribute variant for the resource type

        Returns:
            Decision for this request
        """

    async def check(
        self,
        subject: Subject,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
    ) -> bool:
        """Boolean form of ``decide``."""
        return (await self.decide(subject, action, resource_type, attrs)).allowed

    async def aclose(self) -> None:
        """Release any resources held by the provider."""

    def _mark_initialized(self) -> None:
        self._initialized = True
        logger.info(f"{self._engine_name} authorization provider initialized successfully")

    def _handle_evaluation_error(
        self,
        subject: Subject,
        action: str,
        resource_type: str,
        error: Exception,
        context: str | None = None,
    ) -> Decision:
        """
        Resolve an evaluation failure through the failure policy.

        The failure is always logged. Fail-closed denies; fail-open allows
        and logs a warning so the degraded mode is visible on every request.
        """
        context_str = f" ({context})" if context else ""
        logger.critical(
            f"{self._engine_name} authorization evaluation failed{context_str}: "
            f"subject={subject.id}, action={action}, resource_type={resource_type}, "
            f"error={type(error).__name__}: {error}",
            exc_info=True,
        )
        if self._fail_open:
            logger.warning(
                f"{self._engine_name}: failing OPEN for subject={subject.id}, "
                f"action={action}, resource_type={resource_type}"
            )
            return Decision.allow("policy service unavailable; failing open")
        return Decision.deny("policy service unavailable; failing closed")
