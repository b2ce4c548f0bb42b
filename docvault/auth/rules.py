"""
Document Access Rule Table

The single source of truth for authorization decisions. Both the local
provider and any reconciliation against the remote policy decision point
use ``decide``.

Rules are evaluated in order and the first match wins:

    1. admin                                          -> allow
    2. viewer + create/update/delete on a document    -> deny
    3. document owned by the subject                  -> allow
    4. public document + read                         -> allow
    5. private document owned by someone else         -> deny
    6. editor on documents: create/read/update        -> allow
       editor delete                                  -> policy point
    7. viewer on documents: read                      -> allow
    8. admin panel for non-admins                     -> deny
    9. anything else                                  -> deny

This module is part of DocVault.
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import (
    MUTATING_ACTIONS,
    Action,
    AdminPanelAttrs,
    Decision,
    DocumentAttrs,
    ResourceAttrs,
    ResourceType,
    Role,
    attrs_match,
)

EDITOR_DOCUMENT_ACTIONS = frozenset({Action.CREATE, Action.READ, Action.UPDATE})


@dataclass(frozen=True)
class RulePolicy:
    """
    Configurable policy points of the rule table.

    Attributes:
        editor_can_delete_unowned: Let editors delete documents they can see
            but do not own. Denied by default.
    """

    editor_can_delete_unowned: bool = False


DEFAULT_POLICY = RulePolicy()


def decide(
    role: Role | str,
    subject_id: str | None,
    action: Action | str,
    resource_type: ResourceType | str,
    attrs: ResourceAttrs | None = None,
    policy: RulePolicy = DEFAULT_POLICY,
) -> Decision:
    """
    Decide whether a subject may perform an action on a resource.

    Args:
        role: Role of the subject
        subject_id: ID of the subject (None when only the role is known)
        action: Requested action
        resource_type: Type of the target resource
        attrs: Attribute variant matching ``resource_type``
        policy: Configurable policy points

    Returns:
        Decision with the reason of the first matching rule

    Raises:
        ValueError: If role, action or resource type is unknown
        TypeError: If ``attrs`` does not match ``resource_type``
    """
    role = Role(role)
    action = Action(action)
    resource_type = ResourceType(resource_type)

    if attrs is None:
        attrs = DocumentAttrs() if resource_type is ResourceType.DOCUMENT else AdminPanelAttrs()
    if not attrs_match(resource_type, attrs):
        raise TypeError(
            f"{type(attrs).__name__} does not describe a '{resource_type.value}' resource"
        )

    if role is Role.ADMIN:
        return Decision.allow("admin has unrestricted access")

    if resource_type is ResourceType.DOCUMENT:
        return _decide_document(role, subject_id, action, attrs, policy)

    if resource_type is ResourceType.ADMIN_PANEL:
        return Decision.deny("admin panel is restricted to admins")

    return Decision.deny("no rule grants access")


def _decide_document(
    role: Role,
    subject_id: str | None,
    action: Action,
    attrs: DocumentAttrs,
    policy: RulePolicy,
) -> Decision:
    if role is Role.VIEWER and action in MUTATING_ACTIONS:
        return Decision.deny(f"viewers may not {action.value} documents")

    if subject_id is not None and attrs.owner_id is not None and attrs.owner_id == subject_id:
        return Decision.allow("owner has full control of the document")

    if attrs.is_public and action is Action.READ:
        return Decision.allow("public documents are readable by everyone")

    if attrs.is_specific and not attrs.is_public:
        return Decision.deny("private document is visible only to its owner and admins")

    if role is Role.EDITOR:
        if action in EDITOR_DOCUMENT_ACTIONS:
            return Decision.allow(f"editors may {action.value} documents")
        if action is Action.DELETE and policy.editor_can_delete_unowned:
            return Decision.allow("policy lets editors delete documents they do not own")
        return Decision.deny(f"editors may not {action.value} documents they do not own")

    if role is Role.VIEWER and action is Action.READ:
        return Decision.allow("viewers may read documents")

    return Decision.deny("no rule grants access")
