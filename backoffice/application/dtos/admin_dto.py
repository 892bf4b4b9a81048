# backoffice/application/dtos/admin_dto.py

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from backoffice.application.dtos.base_dto import CustomBaseModel
from backoffice.application.dtos.role_dto import RoleBrief


class AssignRoles(CustomBaseModel):
    """
    Schema for replacing the roles held by an admin.
    """
    role_ids: List[int] = Field(..., description="New complete role set.")

    @field_validator("role_ids")
    def unique_ids(cls, v):
        return list(dict.fromkeys(v))


class AdminOutput(CustomBaseModel):
    id: int
    username: str
    nickname: Optional[str] = None
    role_level: int
    status: int
    created_at: Optional[datetime] = None
    roles: List[RoleBrief] = Field(default_factory=list)
