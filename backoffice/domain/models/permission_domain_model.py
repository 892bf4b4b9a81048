# backoffice/domain/models/permission_domain_model.py

from enum import Enum, IntEnum
from dataclasses import dataclass
from typing import List, Optional


class PermissionType(str, Enum):
    """Kind of a permission node."""
    MENU = "menu"
    PAGE = "page"
    BUTTON = "button"
    API = "api"


MENU_TYPES = frozenset({PermissionType.MENU.value, PermissionType.PAGE.value})

# Sentinel parent id of top level nodes
ROOT_PARENT_ID = 0


class Status(IntEnum):
    DISABLED = 0
    ENABLED = 1


@dataclass
class Permission:
    """Domain model for a permission node."""
    id: int
    code: str
    name: str
    type: str
    parent_id: int = ROOT_PARENT_ID
    title: str = ""
    path: Optional[str] = None
    component: Optional[str] = None
    redirect: Optional[str] = None
    icon: Optional[str] = None
    sort: int = 0
    is_hidden: bool = False
    api_path: Optional[str] = None
    api_method: Optional[str] = None
    status: int = Status.ENABLED
    description: Optional[str] = None

    @property
    def is_menu(self) -> bool:
        """Navigable node (menu or page)."""
        return self.type in MENU_TYPES

    @property
    def is_enabled(self) -> bool:
        return self.status == Status.ENABLED


@dataclass
class Role:
    """Domain model for a role."""
    id: int
    code: str
    name: str
    status: int = Status.ENABLED
    creator_id: int = 0
    permissions: List[Permission] = None

    def __post_init__(self):
        if self.permissions is None:
            self.permissions = []

    @property
    def permission_ids(self) -> set:
        return {p.id for p in self.permissions}


@dataclass
class Admin:
    """Domain model for an admin holding roles."""
    id: int
    username: str
    status: int = Status.ENABLED
    roles: List[Role] = None

    def __post_init__(self):
        if self.roles is None:
            self.roles = []


@dataclass(frozen=True)
class Principal:
    """Authenticated identity resolved from a bearer credential."""
    id: int
    display_name: str = ""
    role_level: int = 0


@dataclass
class PermissionNode:
    """A permission placed in a tree, with its visible children."""
    permission: Permission
    children: List["PermissionNode"] = None

    def __post_init__(self):
        if self.children is None:
            self.children = []
