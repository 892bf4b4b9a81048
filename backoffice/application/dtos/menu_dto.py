# backoffice/application/dtos/menu_dto.py

"""
Schemas for the navigation views served to the back-office front-end.
"""

from typing import List, Optional

from pydantic import Field

from backoffice.application.dtos.base_dto import CustomBaseModel
from backoffice.application.dtos.role_dto import RoleBrief
from backoffice.domain.models.permission_domain_model import PermissionNode


class MenuNode(CustomBaseModel):
    """
    One entry of the navigation tree.
    """
    id: int
    code: str
    name: str
    title: str = ""
    type: str
    path: Optional[str] = None
    component: Optional[str] = None
    redirect: Optional[str] = None
    icon: Optional[str] = None
    sort: int = 0
    is_hidden: bool = False
    children: List["MenuNode"] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: PermissionNode) -> "MenuNode":
        p = node.permission
        return cls(
            id=p.id,
            code=p.code,
            name=p.name,
            title=p.title,
            type=p.type,
            path=p.path,
            component=p.component,
            redirect=p.redirect,
            icon=p.icon,
            sort=p.sort,
            is_hidden=p.is_hidden,
            children=[cls.from_node(child) for child in node.children],
        )

    @classmethod
    def from_nodes(cls, nodes: List[PermissionNode]) -> List["MenuNode"]:
        return [cls.from_node(node) for node in nodes]


MenuNode.model_rebuild()


class PermissionCodes(CustomBaseModel):
    """Flat list of enabled permission codes, used for button/API gating."""
    permissions: List[str] = Field(default_factory=list)


class MenuTree(CustomBaseModel):
    menus: List[MenuNode] = Field(default_factory=list)


class ProfileOutput(CustomBaseModel):
    """
    Current admin with both projections of their effective permission set.
    """
    id: int
    username: str
    nickname: Optional[str] = None
    role_level: int
    roles: List[RoleBrief] = Field(default_factory=list)
    menus: List[MenuNode] = Field(default_factory=list)
    permissions: List[str] = Field(default_factory=list)
