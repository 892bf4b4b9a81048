# backoffice/domain/services/menu_projector.py

"""
Projections of an effective permission set.

The same set of permissions feeds two independent views:

* the navigation tree (enabled menu/page nodes only), and
* the flat list of enabled permission codes used for button/API gating.

A button whose parent menu is not visible still shows up in the code list.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from backoffice.domain.models.permission_domain_model import Permission, PermissionNode
from backoffice.domain.services.permission_tree import build_permission_tree, sort_permissions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuFallbackPolicy:
    """
    What to show when the effective permission set cannot be resolved.

    ``empty`` returns no menu at all, ``static`` returns a fixed tree.
    """
    kind: str = "empty"
    tree: Tuple[PermissionNode, ...] = ()

    @classmethod
    def empty(cls) -> "MenuFallbackPolicy":
        return cls(kind="empty")

    @classmethod
    def static(cls, tree: Sequence[PermissionNode]) -> "MenuFallbackPolicy":
        return cls(kind="static", tree=tuple(tree))

    def fallback_tree(self) -> List[PermissionNode]:
        if self.kind == "static":
            return list(self.tree)
        return []


class MenuProjector:
    """
    Turns an effective permission set into a menu tree and a code list.
    """

    def __init__(self, on_resolution_failure: MenuFallbackPolicy = None):
        self.on_resolution_failure = on_resolution_failure or MenuFallbackPolicy.empty()

    @staticmethod
    def menu_tree(effective: Iterable[Permission]) -> List[PermissionNode]:
        """Enabled menu/page nodes, sorted by (sort, id), assembled into a tree."""
        menus = [p for p in effective if p.is_menu and p.is_enabled]
        return build_permission_tree(sort_permissions(menus))

    @staticmethod
    def permission_codes(effective: Iterable[Permission]) -> List[str]:
        """Codes of every enabled permission, whatever its type or parent."""
        codes: List[str] = []
        seen = set()
        for permission in sort_permissions(effective):
            if permission.is_enabled and permission.code not in seen:
                seen.add(permission.code)
                codes.append(permission.code)
        return codes

    def project(self, effective: Iterable[Permission]) -> Tuple[List[PermissionNode], List[str]]:
        effective = list(effective)
        return self.menu_tree(effective), self.permission_codes(effective)

    def fallback(self, error: Exception) -> Tuple[List[PermissionNode], List[str]]:
        """Result used when resolving the effective set failed."""
        logger.warning(
            f"Permission resolution failed, using '{self.on_resolution_failure.kind}' menu fallback: {error}"
        )
        return self.on_resolution_failure.fallback_tree(), []
