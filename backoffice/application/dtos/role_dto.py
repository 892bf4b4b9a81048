# backoffice/application/dtos/role_dto.py

"""
Schemas for roles.

A role is a named bundle of permissions. Creation and permission
replacement carry the requested permission ids, which are checked
against the acting admin's own rights before anything is written.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from backoffice.application.dtos.base_dto import CustomBaseModel, reject_null
from backoffice.application.dtos.permission_dto import PermissionOutput


def _dedupe(ids: List[int]) -> List[int]:
    return list(dict.fromkeys(ids))


class RoleCreate(CustomBaseModel):
    """
    Schema for creating a role.

    When ``parent_role_id`` is given, every requested permission must also
    belong to that parent role.
    """
    name: str = Field(..., min_length=1, max_length=100, description="Unique role name.")
    code: str = Field(
        ..., min_length=1, max_length=50, pattern=r"^[a-z][a-z0-9_]*$",
        description="Unique role code, ex: 'campaign_manager'.",
    )
    title: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    status: int = Field(1, ge=0, le=1, description="1 enabled, 0 disabled.")
    parent_role_id: Optional[int] = Field(
        None, ge=1, description="Role whose permissions bound the new role."
    )
    permission_ids: List[int] = Field(default_factory=list, description="Permissions granted by the role.")

    @field_validator("permission_ids")
    def unique_ids(cls, v):
        return _dedupe(v)


class RoleUpdate(CustomBaseModel):
    """
    Schema for updating a role.

    ``permission_ids``, when present, replaces the whole permission set.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    title: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    status: Optional[int] = Field(None, ge=0, le=1)
    permission_ids: Optional[List[int]] = None

    @field_validator("permission_ids")
    def unique_ids(cls, v):
        return _dedupe(v) if v is not None else v

    @field_validator("name", "status")
    def not_null(cls, v):
        return reject_null(v)


class AssignPermissions(CustomBaseModel):
    """
    Schema for replacing the permission set of a role.
    """
    permission_ids: List[int] = Field(..., description="New complete permission set.")

    @field_validator("permission_ids")
    def unique_ids(cls, v):
        return _dedupe(v)


class RoleBrief(CustomBaseModel):
    """
    Role identification without its permissions.
    """
    id: int
    code: str
    name: str
    status: int = 1


class RoleOutput(RoleBrief):
    """
    Schema for returning a role with its permissions.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    creator_id: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    permissions: List[PermissionOutput] = Field(default_factory=list)
