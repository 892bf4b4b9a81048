import pytest
from sqlalchemy import func, select

from backoffice.adapters.outbound.persistence.models import role_permissions
from backoffice.adapters.outbound.persistence.repositories.role_repository import role_repository
from backoffice.application.dtos.role_dto import RoleCreate, RoleUpdate
from backoffice.application.use_cases.role_use_cases import AsyncRoleService
from backoffice.domain.exceptions import (
    InvalidInputException,
    PermissionDeniedException,
    ResourceAlreadyExistsException,
    ResourceConflictException,
    ResourceNotFoundException,
)
from backoffice.domain.models.permission_domain_model import Principal
from tests.conftest import create_role


def principal(admin):
    return Principal(id=admin.id, display_name=admin.nickname, role_level=admin.role_level)


def ids(*permissions):
    return [p.id for p in permissions]


def codes(role):
    return sorted(p.code for p in role.permissions)


class TestCreateRole:

    async def test_creates_role_within_creator_rights(self, db, graph):
        p = graph.permissions
        operator = graph.admins["operator"]
        data = RoleCreate(name="Catalog", code="catalog", permission_ids=ids(p["products"], p["products.list"]))

        role = await AsyncRoleService(db).create_role(principal(operator), data)

        assert role.id is not None
        assert role.creator_id == operator.id
        assert codes(role) == ["products", "products.list"]

    async def test_duplicate_code_is_rejected(self, db, graph):
        data = RoleCreate(name="Another viewer", code="viewer")

        with pytest.raises(ResourceAlreadyExistsException):
            await AsyncRoleService(db).create_role(principal(graph.admins["root"]), data)

    async def test_permission_outside_creator_set_is_forbidden(self, db, graph):
        p = graph.permissions
        data = RoleCreate(name="Escalate", code="escalate", permission_ids=ids(p["dashboard"], p["system.admins"]))
        service = AsyncRoleService(db)

        with pytest.raises(PermissionDeniedException):
            await service.create_role(principal(graph.admins["operator"]), data)

        assert not await role_repository.exists(db, code="escalate")

    async def test_unknown_permission_is_forbidden(self, db, graph):
        data = RoleCreate(name="Ghost", code="ghost", permission_ids=[9999])

        with pytest.raises(PermissionDeniedException):
            await AsyncRoleService(db).create_role(principal(graph.admins["root"]), data)

    async def test_permissions_must_belong_to_parent_role(self, db, graph):
        p = graph.permissions
        data = RoleCreate(
            name="Sub viewer", code="sub_viewer",
            parent_role_id=graph.roles["viewer"].id,
            permission_ids=ids(p["products"]),
        )

        # The creator holds "products", but the parent role does not.
        with pytest.raises(InvalidInputException):
            await AsyncRoleService(db).create_role(principal(graph.admins["root"]), data)

    async def test_parent_role_is_checked_before_creator_rights(self, db, graph):
        p = graph.permissions
        data = RoleCreate(
            name="Sub viewer", code="sub_viewer",
            parent_role_id=graph.roles["viewer"].id,
            permission_ids=ids(p["system.admins"]),
        )

        # Neither the operator nor the viewer role holds "system.admins".
        with pytest.raises(InvalidInputException):
            await AsyncRoleService(db).create_role(principal(graph.admins["operator"]), data)

        assert not await role_repository.exists(db, code="sub_viewer")

    async def test_child_role_within_parent_role(self, db, graph):
        p = graph.permissions
        data = RoleCreate(
            name="Sub operator", code="sub_operator",
            parent_role_id=graph.roles["operator"].id,
            permission_ids=ids(p["products"], p["products.list"]),
        )

        role = await AsyncRoleService(db).create_role(principal(graph.admins["root"]), data)

        assert codes(role) == ["products", "products.list"]

    async def test_unknown_parent_role(self, db, graph):
        data = RoleCreate(name="Orphan", code="orphan", parent_role_id=9999)

        with pytest.raises(ResourceNotFoundException):
            await AsyncRoleService(db).create_role(principal(graph.admins["root"]), data)


class TestAssignPermissions:

    async def test_replaces_whole_set(self, db, graph):
        p = graph.permissions
        service = AsyncRoleService(db)
        viewer_role = graph.roles["viewer"].id

        await service.assign_permissions(
            principal(graph.admins["operator"]), viewer_role, ids(p["products"], p["products.list"])
        )
        role = await service.get_role(viewer_role)

        assert codes(role) == ["products", "products.list"]

    async def test_single_unheld_permission_rejects_everything(self, db, graph):
        p = graph.permissions
        service = AsyncRoleService(db)
        viewer_role = graph.roles["viewer"].id

        with pytest.raises(PermissionDeniedException):
            await service.assign_permissions(
                principal(graph.admins["operator"]), viewer_role, ids(p["products"], p["system.admins"])
            )

        assert codes(await service.get_role(viewer_role)) == ["dashboard"]

    async def test_empty_set_clears_role(self, db, graph):
        service = AsyncRoleService(db)
        viewer_role = graph.roles["viewer"].id

        role = await service.assign_permissions(principal(graph.admins["lonely"]), viewer_role, [])

        assert role.permissions == []

    async def test_unknown_role(self, db, graph):
        with pytest.raises(ResourceNotFoundException):
            await AsyncRoleService(db).assign_permissions(principal(graph.admins["root"]), 9999, [])


class TestUpdateRole:

    async def test_updates_attributes_and_permissions(self, db, graph):
        p = graph.permissions
        service = AsyncRoleService(db)
        data = RoleUpdate(name="Readers", permission_ids=ids(p["dashboard"], p["products"]))

        role = await service.update_role(principal(graph.admins["root"]), graph.roles["viewer"].id, data)

        assert role.name == "Readers"
        assert codes(role) == ["dashboard", "products"]

    async def test_attributes_only_keeps_permissions(self, db, graph):
        service = AsyncRoleService(db)

        role = await service.update_role(
            principal(graph.admins["lonely"]), graph.roles["viewer"].id, RoleUpdate(status=0)
        )

        assert role.status == 0
        assert codes(role) == ["dashboard"]

    async def test_permission_outside_editor_set(self, db, graph):
        data = RoleUpdate(permission_ids=ids(graph.permissions["system.admins"]))

        with pytest.raises(PermissionDeniedException):
            await AsyncRoleService(db).update_role(
                principal(graph.admins["operator"]), graph.roles["viewer"].id, data
            )


class TestDeleteRole:

    async def test_role_held_by_an_admin_cannot_be_deleted(self, db, graph):
        with pytest.raises(ResourceConflictException):
            await AsyncRoleService(db).delete_role(graph.roles["viewer"].id)

    async def test_unheld_role_is_deleted_with_its_grants(self, db, graph):
        role = await create_role(db, "temporary", [graph.permissions["dashboard"], graph.permissions["products"]])
        await db.commit()
        role_id = role.id
        service = AsyncRoleService(db)

        await service.delete_role(role_id)

        with pytest.raises(ResourceNotFoundException):
            await service.get_role(role_id)
        remaining = await db.execute(
            select(func.count()).select_from(role_permissions).where(role_permissions.c.role_id == role_id)
        )
        assert remaining.scalar_one() == 0

    async def test_unknown_role(self, db, graph):
        with pytest.raises(ResourceNotFoundException):
            await AsyncRoleService(db).delete_role(9999)


class TestAssignRolesToAdmin:

    async def test_assigns_assignable_role(self, db, graph):
        service = AsyncRoleService(db)

        admin = await service.assign_roles_to_admin(
            principal(graph.admins["operator"]), graph.admins["lonely"].id, [graph.roles["viewer"].id]
        )

        assert [r.code for r in admin.roles] == ["viewer"]

    async def test_role_beyond_caller_rights_is_forbidden(self, db, graph):
        with pytest.raises(PermissionDeniedException):
            await AsyncRoleService(db).assign_roles_to_admin(
                principal(graph.admins["operator"]), graph.admins["lonely"].id, [graph.roles["super_admin"].id]
            )

    async def test_held_roles_may_be_kept_or_dropped(self, db, graph):
        service = AsyncRoleService(db)
        operator = principal(graph.admins["operator"])
        root = graph.admins["root"]

        # super_admin is already held by the target, only "viewer" is new.
        admin = await service.assign_roles_to_admin(
            operator, root.id, [graph.roles["super_admin"].id, graph.roles["viewer"].id]
        )
        assert [r.code for r in admin.roles] == ["super_admin", "viewer"]

        admin = await service.assign_roles_to_admin(operator, graph.admins["viewer"].id, [])
        assert admin.roles == []

    async def test_unknown_admin(self, db, graph):
        with pytest.raises(ResourceNotFoundException):
            await AsyncRoleService(db).assign_roles_to_admin(principal(graph.admins["root"]), 9999, [])
