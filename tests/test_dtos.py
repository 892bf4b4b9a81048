from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from backoffice.application.dtos.permission_dto import PermissionOutput, PermissionUpdate
from backoffice.application.dtos.role_dto import RoleBrief, RoleUpdate


def test_update_fields_may_be_omitted():
    update = PermissionUpdate(title="Home")

    assert update.model_dump(exclude_unset=True) == {"title": "Home"}


@pytest.mark.parametrize("field", ["code", "name", "title", "type", "parent_id", "sort", "is_hidden", "status"])
def test_permission_update_rejects_null_for_required_columns(field):
    with pytest.raises(ValidationError):
        PermissionUpdate(**{field: None})


@pytest.mark.parametrize("field", ["name", "status"])
def test_role_update_rejects_null_for_required_columns(field):
    with pytest.raises(ValidationError):
        RoleUpdate(**{field: None})


def test_nullable_columns_accept_null():
    assert RoleUpdate(description=None).model_dump(exclude_unset=True) == {"description": None}
    assert PermissionUpdate(icon=None).model_dump(exclude_unset=True) == {"icon": None}


def test_output_schemas_read_attributes():
    row = SimpleNamespace(id=3, code="viewer", name="Viewer", status=1)

    assert RoleBrief.model_validate(row) == RoleBrief(id=3, code="viewer", name="Viewer", status=1)


def test_permission_output_defaults():
    row = SimpleNamespace(id=1, code="dashboard", name="Dashboard", type="menu")

    output = PermissionOutput.model_validate(row)

    assert output.parent_id == 0
    assert output.sort == 0
    assert output.is_hidden is False
