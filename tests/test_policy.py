import uuid
from types import SimpleNamespace

import pytest

from shared.policy import Action, department_scope, is_allowed

DEPT_A = str(uuid.uuid4())
DEPT_B = str(uuid.uuid4())

super_admin = {"user_id": "1", "role": "super-admin", "department_id": None}
teacher = {"user_id": "2", "role": "teacher", "department_id": DEPT_A}
admin = {"user_id": "3", "role": "admin", "department_id": DEPT_A}


@pytest.mark.parametrize("action", list(Action))
def test_super_admin_is_allowed_everything(action):
    section = SimpleNamespace(department_id=DEPT_B)
    assert is_allowed(super_admin, action, section)
    assert department_scope(super_admin, action) is None


@pytest.mark.parametrize("action", [Action.CREATE, Action.UPDATE, Action.DELETE])
@pytest.mark.parametrize("caller", [teacher, admin])
def test_writes_are_denied_below_super_admin(caller, action):
    assert not is_allowed(caller, action)


def test_list_is_scoped_to_own_department():
    assert department_scope(teacher, Action.LIST) == DEPT_A
    assert is_allowed(teacher, Action.LIST, SimpleNamespace(department_id=DEPT_A))
    assert not is_allowed(teacher, Action.LIST, SimpleNamespace(department_id=DEPT_B))


def test_reads_are_unscoped_by_default():
    other = SimpleNamespace(department_id=DEPT_B)
    assert department_scope(teacher, Action.READ) is None
    assert department_scope(teacher, Action.LIST_BY_TEACHER) is None
    assert is_allowed(teacher, Action.READ, other)


def test_reads_are_scoped_when_enabled():
    other = SimpleNamespace(department_id=DEPT_B)
    own = SimpleNamespace(department_id=uuid.UUID(DEPT_A))
    assert department_scope(teacher, Action.READ, scope_reads=True) == DEPT_A
    assert not is_allowed(teacher, Action.READ, other, scope_reads=True)
    assert is_allowed(teacher, Action.READ, own, scope_reads=True)


def test_caller_without_department_matches_nothing():
    orphan = {"user_id": "4", "role": "teacher", "department_id": None}
    assert department_scope(orphan, Action.LIST) == ""
    assert not is_allowed(orphan, Action.LIST, SimpleNamespace(department_id=DEPT_A))
