import pytest

from conftest import make_user
from utils.errors import ServiceError
from utils.permissions import (
    INVENTORY_POLICY,
    REVIEW_POLICY,
    SALES_POLICY,
    assert_permission,
    is_action_allowed,
    merge_roles,
)

INVENTORY_ACTIONS = ["read", "readStats", "readActivity", "restock", "consume", "create", "update", "delete"]


@pytest.mark.parametrize("action", INVENTORY_ACTIONS)
def test_admin_may_do_everything(action):
    assert is_action_allowed(["admin"], action, INVENTORY_POLICY)


@pytest.mark.parametrize("action", INVENTORY_ACTIONS)
@pytest.mark.parametrize("roles", [["viewer"], [], None])
def test_viewer_and_roleless_callers_are_denied(action, roles):
    assert not is_action_allowed(roles, action, INVENTORY_POLICY)


def test_staff_may_read_and_move_stock_only():
    for action in ("read", "readStats", "readActivity", "restock", "consume"):
        assert is_action_allowed(["staff"], action, INVENTORY_POLICY)
    for action in ("create", "update", "delete"):
        assert not is_action_allowed(["staff"], action, INVENTORY_POLICY)


def test_unknown_action_fails_closed():
    assert not is_action_allowed(["admin"], "purge", INVENTORY_POLICY)


def test_sales_writes_are_open_to_staff():
    assert is_action_allowed(["staff"], "delete", SALES_POLICY)


def test_any_role_may_submit_a_review():
    assert is_action_allowed(["viewer"], "create", REVIEW_POLICY)
    assert not is_action_allowed(["viewer"], "read", REVIEW_POLICY)


def test_no_session_is_unauthenticated():
    with pytest.raises(ServiceError) as exc_info:
        assert_permission(None, "read", INVENTORY_POLICY)
    assert exc_info.value.code == "UNAUTHENTICATED"


def test_insufficient_role_is_forbidden_with_readable_message():
    with pytest.raises(ServiceError) as exc_info:
        assert_permission(make_user("staff"), "delete", INVENTORY_POLICY, "inventory items")
    assert exc_info.value.code == "FORBIDDEN"
    assert exc_info.value.message == "You do not have permission to delete inventory items."


def test_merge_roles_unions_and_drops_unknown_names():
    assert merge_roles(["staff"], ["admin", "staff", "owner"], None) == ["staff", "admin"]
