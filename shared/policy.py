"""
Authorization policy for section resources.

Every role decision for sections goes through `is_allowed`; query shaping for
list-style reads goes through `department_scope`.
"""

import enum
from typing import Any, Optional

SUPER_ADMIN = "super-admin"


class Action(str, enum.Enum):
    LIST = "list"
    READ = "read"
    LIST_BY_TEACHER = "list_by_teacher"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


WRITE_ACTIONS = frozenset({Action.CREATE, Action.UPDATE, Action.DELETE})


def is_super_admin(caller: dict) -> bool:
    return caller.get("role") == SUPER_ADMIN


def _scoped_actions(scope_reads: bool):
    if scope_reads:
        return {Action.LIST, Action.READ, Action.LIST_BY_TEACHER}
    return {Action.LIST}


def department_scope(caller: dict, action: Action, scope_reads: bool = False) -> Optional[str]:
    """
    Department a query for `action` must be restricted to, or None when unrestricted.

    Super-admins are never restricted. `list` is always restricted to the
    caller's department; `read` and `list_by_teacher` only when `scope_reads`.
    """
    if is_super_admin(caller):
        return None
    if action in _scoped_actions(scope_reads):
        return caller.get("department_id") or ""
    return None


def is_allowed(caller: dict, action: Action, resource: Any = None, scope_reads: bool = False) -> bool:
    if is_super_admin(caller):
        return True
    if action in WRITE_ACTIONS:
        return False
    if resource is None:
        return True

    scope = department_scope(caller, action, scope_reads)
    if scope is None:
        return True
    return str(getattr(resource, "department_id", None)) == str(scope)
