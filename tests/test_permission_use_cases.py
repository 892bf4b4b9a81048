import pytest
from sqlalchemy import func, select

from backoffice.adapters.outbound.persistence.models import role_permissions
from backoffice.application.dtos.permission_dto import PermissionCreate, PermissionUpdate
from backoffice.application.use_cases.permission_use_cases import AsyncPermissionService
from backoffice.application.use_cases.role_use_cases import AsyncRoleService
from backoffice.domain.exceptions import (
    InvalidInputException,
    ResourceAlreadyExistsException,
    ResourceConflictException,
    ResourceNotFoundException,
)


async def test_list_is_ordered_by_sort_then_id(db, graph):
    permissions = await AsyncPermissionService(db).list_permissions()

    sorts = [(p.sort, p.id) for p in permissions]
    assert sorts == sorted(sorts)
    assert len(permissions) == len(graph.permissions)


async def test_list_filters_by_type_and_status(db, graph):
    service = AsyncPermissionService(db)

    pages = await service.list_permissions(type="page")
    disabled = await service.list_permissions(status=0)

    assert {p.code for p in pages} == {"products.list", "system.roles", "system.permissions", "system.admins"}
    assert [p.code for p in disabled] == ["finance"]


async def test_full_tree_includes_disabled_and_action_nodes(db, graph):
    tree = await AsyncPermissionService(db).get_permission_tree()

    roots = [n.code for n in tree]
    assert roots == ["dashboard", "products", "finance", "system"]
    products = tree[1]
    assert products.children[0].code == "products.list"
    assert products.children[0].children[0].code == "products.create"


async def test_create_permission_under_existing_parent(db, graph):
    data = PermissionCreate(
        code="products.export", name="Export", type="api",
        parent_id=graph.permissions["products.list"].id,
        api_path="/api/products/export", api_method="get",
    )

    created = await AsyncPermissionService(db).create_permission(data)

    assert created.id is not None
    assert created.api_method == "GET"
    assert created.parent_id == graph.permissions["products.list"].id


async def test_create_permission_duplicate_code(db, graph):
    data = PermissionCreate(code="dashboard", name="Dashboard", type="menu")

    with pytest.raises(ResourceAlreadyExistsException):
        await AsyncPermissionService(db).create_permission(data)


async def test_create_permission_unknown_parent(db, graph):
    data = PermissionCreate(code="reports", name="Reports", type="menu", parent_id=9999)

    with pytest.raises(InvalidInputException):
        await AsyncPermissionService(db).create_permission(data)


async def test_update_permission_fields(db, graph):
    service = AsyncPermissionService(db)
    dashboard = graph.permissions["dashboard"]

    updated = await service.update_permission(dashboard.id, PermissionUpdate(title="Home", sort=0, status=0))

    assert updated.title == "Home"
    assert updated.sort == 0
    assert updated.status == 0
    assert updated.code == "dashboard"


async def test_update_permission_duplicate_code(db, graph):
    with pytest.raises(ResourceAlreadyExistsException):
        await AsyncPermissionService(db).update_permission(
            graph.permissions["dashboard"].id, PermissionUpdate(code="products")
        )


async def test_update_permission_rejects_self_parent(db, graph):
    products = graph.permissions["products"]

    with pytest.raises(InvalidInputException):
        await AsyncPermissionService(db).update_permission(products.id, PermissionUpdate(parent_id=products.id))


async def test_update_permission_rejects_descendant_parent(db, graph):
    p = graph.permissions

    with pytest.raises(InvalidInputException):
        await AsyncPermissionService(db).update_permission(
            p["products"].id, PermissionUpdate(parent_id=p["products.create"].id)
        )


async def test_move_permission_to_another_branch(db, graph):
    p = graph.permissions

    moved = await AsyncPermissionService(db).update_permission(
        p["products.create"].id, PermissionUpdate(parent_id=p["system.roles"].id)
    )

    assert moved.parent_id == p["system.roles"].id


async def test_delete_permission_with_children_conflicts(db, graph):
    with pytest.raises(ResourceConflictException):
        await AsyncPermissionService(db).delete_permission(graph.permissions["products"].id)


async def test_delete_leaf_revokes_it_from_roles(db, graph):
    p = graph.permissions
    leaf = p["products.create"].id

    await AsyncPermissionService(db).delete_permission(leaf)

    remaining = await db.execute(
        select(func.count()).select_from(role_permissions).where(role_permissions.c.permission_id == leaf)
    )
    assert remaining.scalar_one() == 0
    buttons = await AsyncRoleService(db).get_role(graph.roles["buttons"].id)
    assert buttons.permissions == []
    with pytest.raises(ResourceNotFoundException):
        await AsyncPermissionService(db).get_permission(leaf)
