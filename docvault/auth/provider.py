"""
Authorization Providers

One interface, two interchangeable strategies:

- ``LocalRuleProvider`` evaluates the rule table in-process. It is
  synchronous at heart (``evaluate``/``has_permission``) so the presentation
  layer can use it for UI affordances without network latency.
- ``RemotePolicyProvider`` forwards the same request to an external policy
  decision point (PDP) over HTTP and awaits its verdict, with a timeout and
  an explicit failure policy.

This module is part of DocVault.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx

from ..constants import DEFAULT_AUTHZ_TIMEOUT_SECONDS, PDP_ALLOWED_PATH
from ..exceptions import PolicyServiceError
from ..observability.metrics import timed_operation
from .base import BaseAuthorizationProvider
from .rules import DEFAULT_POLICY, RulePolicy, decide
from .types import (
    Action,
    Decision,
    ResourceAttrs,
    ResourceType,
    Role,
    Subject,
    attrs_match,
    default_attrs,
)

logger = logging.getLogger(__name__)


class AuthorizationProvider(Protocol):
    """
    Defines the "contract" for any pluggable authorization provider.
    """

    async def decide(
        self,
        subject: Subject,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
    ) -> Decision: ...

    async def check(
        self,
        subject: Subject,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
    ) -> bool: ...


class LocalRuleProvider(BaseAuthorizationProvider):
    """
    Implements the AuthorizationProvider interface with the in-process rule table.
    """

    def __init__(self, policy: RulePolicy = DEFAULT_POLICY):
        super().__init__("local")
        self._policy = policy
        self._mark_initialized()

    @property
    def policy(self) -> RulePolicy:
        return self._policy

    def evaluate(
        self,
        subject: Subject,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
    ) -> Decision:
        """Synchronously evaluate the rule table for a subject."""
        return decide(subject.role, subject.id, action, resource_type, attrs, self._policy)

    def has_permission(
        self,
        role: Role | str,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
        subject_id: str | None = None,
    ) -> bool:
        """
        Role-based check for rendering UI affordances.

        Without ``subject_id`` ownership cannot be established, so only the
        role and visibility rules apply. An unknown role, action or resource
        type is never permitted.
        """
        try:
            decision = decide(role, subject_id, action, resource_type, attrs, self._policy)
        except ValueError as e:
            logger.warning(
                f"Permission check with invalid input denied: role={role!r}, "
                f"action={action!r}, resource_type={resource_type!r}: {e}"
            )
            return False
        return decision.allowed

    @timed_operation("authz.check", provider="local")
    async def decide(
        self,
        subject: Subject,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
    ) -> Decision:
        decision = self.evaluate(subject, action, resource_type, attrs)
        if not decision:
            logger.debug(
                f"Local rules denied subject={subject.id} role={subject.role.value} "
                f"action={Action(action).value} resource_type={ResourceType(resource_type).value}: "
                f"{decision.reason}"
            )
        return decision


class RemotePolicyProvider(BaseAuthorizationProvider):
    """
    Implements the AuthorizationProvider interface against a remote PDP.

    The PDP receives ``POST {pdp_url}/allowed`` with the user key, action and
    typed resource, and answers ``{"allow": bool}``. Transport errors,
    timeouts, non-2xx responses and malformed bodies are policy-service
    failures and are resolved by the failure policy (fail-closed by default).
    """

    def __init__(
        self,
        pdp_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_AUTHZ_TIMEOUT_SECONDS,
        fail_open: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            pdp_url: Base URL of the policy decision point
            token: Bearer token sent with every request
            timeout: Upper bound in seconds for one decision
            fail_open: Allow when the PDP cannot answer (default: deny)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        super().__init__("remote", fail_open=fail_open)
        self._pdp_url = pdp_url.rstrip("/")
        self._timeout = timeout
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=self._pdp_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self._mark_initialized()

    @property
    def pdp_url(self) -> str:
        return self._pdp_url

    async def __aenter__(self) -> RemotePolicyProvider:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def build_request(
        subject: Subject,
        action: Action,
        resource_type: ResourceType,
        attrs: ResourceAttrs,
    ) -> dict[str, Any]:
        """Build the PDP request body for one check."""
        resource: dict[str, Any] = {
            "type": resource_type.value,
            "attributes": attrs.to_dict(),
        }
        resource_key = getattr(attrs, "id", None)
        if resource_key is not None:
            resource["key"] = resource_key
        return {
            "user": {"key": subject.id},
            "action": action.value,
            "resource": resource,
            "context": {},
        }

    async def request_decision(
        self,
        subject: Subject,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
    ) -> bool:
        """
        Ask the PDP for a verdict without applying the failure policy.

        Raises:
            PolicyServiceError: If the PDP is unreachable, times out or answers
                with an error or a malformed body
        """
        action = Action(action)
        resource_type = ResourceType(resource_type)
        attrs = attrs if attrs is not None else default_attrs(resource_type)
        if not attrs_match(resource_type, attrs):
            raise TypeError(
                f"{type(attrs).__name__} does not describe a '{resource_type.value}' resource"
            )
        body = self.build_request(subject, action, resource_type, attrs)

        try:
            response = await asyncio.wait_for(
                self._client.post(PDP_ALLOWED_PATH, json=body), timeout=self._timeout
            )
            response.raise_for_status()
            payload = response.json()
        except asyncio.TimeoutError as e:
            raise PolicyServiceError(
                f"Policy decision timed out after {self._timeout}s", pdp_url=self._pdp_url
            ) from e
        except httpx.HTTPStatusError as e:
            raise PolicyServiceError(
                "Policy decision point returned an error",
                pdp_url=self._pdp_url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise PolicyServiceError(
                f"Policy decision point unreachable: {e}", pdp_url=self._pdp_url
            ) from e
        except ValueError as e:
            raise PolicyServiceError(
                "Policy decision point returned invalid JSON", pdp_url=self._pdp_url
            ) from e

        allowed = payload.get("allow") if isinstance(payload, dict) else None
        if not isinstance(allowed, bool):
            raise PolicyServiceError(
                "Policy decision point response has no boolean 'allow' field",
                pdp_url=self._pdp_url,
            )
        return allowed

    @timed_operation("authz.check", provider="remote")
    async def decide(
        self,
        subject: Subject,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
    ) -> Decision:
        action = Action(action)
        resource_type = ResourceType(resource_type)
        logger.debug(
            f"Checking permission: user={subject.id}, action={action.value}, "
            f"resource_type={resource_type.value}"
        )
        try:
            allowed = await self.request_decision(subject, action, resource_type, attrs)
        except PolicyServiceError as e:
            return self._handle_evaluation_error(
                subject, action.value, resource_type.value, e, context="remote check"
            )

        logger.debug(f"Permission check result for user={subject.id}: {allowed}")
        if allowed:
            return Decision.allow("policy decision point allowed the request")
        return Decision.deny("policy decision point denied the request")
