# backoffice/domain/services/permission_tree.py

"""
Tree reconstruction over flat permission rows.

Permissions are stored flat, each row pointing at its parent through
``parent_id``. Trees are rebuilt on demand in two phases: first an
id -> node index over the input, then a single linking pass.
"""

from typing import Any, Dict, Iterable, List, Mapping, Set

from backoffice.domain.models.permission_domain_model import (
    Permission,
    PermissionNode,
    ROOT_PARENT_ID,
)


def sort_key(permission: Permission):
    """Display order: ``sort`` ascending, then ``id`` ascending."""
    return permission.sort, permission.id


def sort_permissions(permissions: Iterable[Permission]) -> List[Permission]:
    return sorted(permissions, key=sort_key)


def build_permission_tree(permissions: Iterable[Permission]) -> List[PermissionNode]:
    """
    Build a forest from a flat list of permissions.

    Only the given list is indexed, never the whole permission universe.
    A node whose parent is not part of the input is dropped together with
    its subtree, it is not promoted to the root level.

    Children keep the order of the input list, so callers sort first
    when they need a stable display order.

    Args:
        permissions: Flat permission list

    Returns:
        Top level nodes with their children attached
    """
    permissions = list(permissions)

    # Phase 1: index
    index: Dict[int, PermissionNode] = {}
    for permission in permissions:
        index[permission.id] = PermissionNode(permission=permission)

    # Phase 2: link
    roots: List[PermissionNode] = []
    for permission in permissions:
        node = index[permission.id]
        if permission.parent_id == ROOT_PARENT_ID:
            roots.append(node)
            continue
        parent = index.get(permission.parent_id)
        if parent is not None and parent is not node:
            parent.children.append(node)

    return roots


def collect_descendant_ids(permissions: Iterable[Permission], root_id: int) -> Set[int]:
    """
    Return the ids of every node below ``root_id`` in the permission universe.

    Used to reject a parent change that would turn a node into its own ancestor.
    """
    children_of: Dict[int, List[int]] = {}
    for permission in permissions:
        children_of.setdefault(permission.parent_id, []).append(permission.id)

    found: Set[int] = set()
    pending = list(children_of.get(root_id, []))
    while pending:
        current = pending.pop()
        if current in found:
            continue
        found.add(current)
        pending.extend(children_of.get(current, []))
    return found


def nodes_from_dicts(items: Iterable[Mapping[str, Any]]) -> List[PermissionNode]:
    """
    Build a tree from nested dictionaries (ex: a statically configured menu).

    Each item holds permission fields plus an optional ``children`` list.
    Missing ids are numbered negatively so they never collide with stored rows.
    """
    counter = [0]

    def convert(item: Mapping[str, Any], parent_id: int) -> PermissionNode:
        counter[0] -= 1
        node_id = item.get("id", counter[0])
        permission = Permission(
            id=node_id,
            code=item.get("code", item.get("name", "")),
            name=item.get("name", ""),
            title=item.get("title", item.get("name", "")),
            type=item.get("type", "menu"),
            parent_id=parent_id,
            path=item.get("path"),
            component=item.get("component"),
            redirect=item.get("redirect"),
            icon=item.get("icon"),
            sort=item.get("sort", 0),
            is_hidden=item.get("is_hidden", False),
        )
        node = PermissionNode(permission=permission)
        node.children = [convert(child, node_id) for child in item.get("children", [])]
        return node

    return [convert(item, ROOT_PARENT_ID) for item in items]
