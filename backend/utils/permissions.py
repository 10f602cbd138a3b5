"""
Role based permission gate shared by every domain service.

Each service declares a policy mapping its action names to the roles allowed
to perform them. Actions missing from a policy are denied.
"""
from typing import Dict, Iterable, List, Optional, Sequence, Union

from utils.errors import ServiceError

ADMIN = "admin"
STAFF = "staff"
VIEWER = "viewer"

APP_ROLES = (ADMIN, STAFF, VIEWER)

ADMIN_OR_STAFF = (ADMIN, STAFF)
ADMIN_ONLY = (ADMIN,)

Policy = Dict[str, Sequence[str]]

INVENTORY_POLICY: Policy = {
    "read": ADMIN_OR_STAFF,
    "readStats": ADMIN_OR_STAFF,
    "readActivity": ADMIN_OR_STAFF,
    "restock": ADMIN_OR_STAFF,
    "consume": ADMIN_OR_STAFF,
    "create": ADMIN_ONLY,
    "update": ADMIN_ONLY,
    "delete": ADMIN_ONLY,
}

ROOSTER_POLICY: Policy = {
    "read": ADMIN_OR_STAFF,
    "readStats": ADMIN_OR_STAFF,
    "create": ADMIN_ONLY,
    "update": ADMIN_ONLY,
    "delete": ADMIN_ONLY,
}

BREED_POLICY: Policy = {
    "read": ADMIN_OR_STAFF,
    "create": ADMIN_ONLY,
    "update": ADMIN_ONLY,
    "delete": ADMIN_ONLY,
}

SALES_POLICY: Policy = {
    "read": ADMIN_OR_STAFF,
    "readStats": ADMIN_OR_STAFF,
    "create": ADMIN_OR_STAFF,
    "update": ADMIN_OR_STAFF,
    "delete": ADMIN_OR_STAFF,
}

SUPPLIER_POLICY: Policy = {
    "read": ADMIN_OR_STAFF,
    "readStats": ADMIN_OR_STAFF,
    "create": ADMIN_ONLY,
    "update": ADMIN_ONLY,
    "delete": ADMIN_ONLY,
}

REVIEW_POLICY: Policy = {
    "read": ADMIN_OR_STAFF,
    "create": APP_ROLES,
    "update": ADMIN_OR_STAFF,
    "delete": ADMIN_ONLY,
}

NOTIFICATION_POLICY: Policy = {
    "read": ADMIN_OR_STAFF,
}

DASHBOARD_POLICY: Policy = {
    "read": ADMIN_OR_STAFF,
}

ACTION_VERBS = {
    "read": "view",
    "readStats": "view statistics for",
    "readActivity": "view activity for",
    "create": "create",
    "update": "update",
    "delete": "delete",
    "restock": "restock",
    "consume": "consume",
}


def merge_roles(*role_lists: Optional[Iterable[str]]) -> List[str]:
    """Union of several role lists, first-seen order, unknown role names dropped."""
    merged: List[str] = []
    for roles in role_lists:
        for role in roles or []:
            if role in APP_ROLES and role not in merged:
                merged.append(role)
    return merged


def has_required_role(user_roles: Optional[Iterable[str]], required: Union[str, Sequence[str]]) -> bool:
    if not user_roles:
        return False
    required_roles = [required] if isinstance(required, str) else list(required)
    user_roles = set(user_roles)
    return any(role in user_roles for role in required_roles)


def is_action_allowed(roles: Optional[Iterable[str]], action: str, policy: Policy) -> bool:
    allowed = policy.get(action)
    if not allowed:
        return False
    return has_required_role(roles, allowed)


def assert_permission(user, action: str, policy: Policy, resource: str = "this resource") -> None:
    """
    Raise UNAUTHENTICATED when there is no session and FORBIDDEN when the
    caller's roles do not cover `action`.
    """
    if user is None:
        raise ServiceError("UNAUTHENTICATED")
    if not is_action_allowed(user.roles, action, policy):
        verb = ACTION_VERBS.get(action, "access")
        raise ServiceError("FORBIDDEN", f"You do not have permission to {verb} {resource}.")
