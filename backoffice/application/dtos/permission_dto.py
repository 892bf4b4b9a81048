# backoffice/application/dtos/permission_dto.py

"""
Schemas for permission nodes.

Validation and serialization of the menu/page/button/api permission
catalogue and of its tree projection.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from backoffice.application.dtos.base_dto import CustomBaseModel, reject_null
from backoffice.domain.models.permission_domain_model import PermissionNode

PermissionTypeLiteral = Literal["menu", "page", "button", "api"]
ApiMethodLiteral = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

CODE_PATTERN = r"^[a-z][a-z0-9_]*(\.[a-z0-9_]+)*$"


class PermissionBase(CustomBaseModel):
    """
    Attributes shared by every permission schema.
    """
    code: str = Field(
        ..., min_length=1, max_length=100, pattern=CODE_PATTERN,
        description="Globally unique code, ex: 'products.create'.",
    )
    name: str = Field(..., min_length=1, max_length=100, description="Internal name.")
    title: str = Field("", max_length=100, description="Display title.")
    type: PermissionTypeLiteral = Field(..., description="Node type: menu, page, button or api.")
    parent_id: int = Field(0, ge=0, description="Parent permission id, 0 for a top level node.")
    path: Optional[str] = Field(None, max_length=200, description="Route path (menu/page).")
    component: Optional[str] = Field(None, max_length=200, description="Front-end component (menu/page).")
    redirect: Optional[str] = Field(None, max_length=200, description="Redirect target (menu/page).")
    icon: Optional[str] = Field(None, max_length=50, description="Menu icon.")
    sort: int = Field(0, description="Display order among siblings.")
    is_hidden: bool = Field(False, description="Hidden from navigation.")
    api_path: Optional[str] = Field(None, max_length=200, description="Guarded API path (api).")
    api_method: Optional[ApiMethodLiteral] = Field(None, description="Guarded HTTP method (api).")
    status: int = Field(1, ge=0, le=1, description="1 enabled, 0 disabled.")
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("api_method", mode="before")
    def normalize_method(cls, v):
        return v.upper() if isinstance(v, str) else v


class PermissionCreate(PermissionBase):
    """
    Schema for creating a permission node.
    """


class PermissionUpdate(CustomBaseModel):
    """
    Schema for updating a permission node. Every field is optional.
    """
    code: Optional[str] = Field(None, min_length=1, max_length=100, pattern=CODE_PATTERN)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    title: Optional[str] = Field(None, max_length=100)
    type: Optional[PermissionTypeLiteral] = None
    parent_id: Optional[int] = Field(None, ge=0)
    path: Optional[str] = Field(None, max_length=200)
    component: Optional[str] = Field(None, max_length=200)
    redirect: Optional[str] = Field(None, max_length=200)
    icon: Optional[str] = Field(None, max_length=50)
    sort: Optional[int] = None
    is_hidden: Optional[bool] = None
    api_path: Optional[str] = Field(None, max_length=200)
    api_method: Optional[ApiMethodLiteral] = None
    status: Optional[int] = Field(None, ge=0, le=1)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("api_method", mode="before")
    def normalize_method(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("code", "name", "title", "type", "parent_id", "sort", "is_hidden", "status")
    def not_null(cls, v):
        return reject_null(v)


class PermissionOutput(CustomBaseModel):
    """
    Schema for returning a permission node.
    """
    id: int
    code: str
    name: str
    title: str = ""
    type: str
    parent_id: int = 0
    path: Optional[str] = None
    component: Optional[str] = None
    redirect: Optional[str] = None
    icon: Optional[str] = None
    sort: int = 0
    is_hidden: bool = False
    api_path: Optional[str] = None
    api_method: Optional[str] = None
    status: int = 1
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PermissionTreeNode(PermissionOutput):
    """
    A permission with its children, as returned by the tree endpoints.
    """
    children: List["PermissionTreeNode"] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: PermissionNode) -> "PermissionTreeNode":
        item = cls.model_validate(node.permission)
        item.children = [cls.from_node(child) for child in node.children]
        return item

    @classmethod
    def from_nodes(cls, nodes: List[PermissionNode]) -> List["PermissionTreeNode"]:
        return [cls.from_node(node) for node in nodes]


PermissionTreeNode.model_rebuild()
