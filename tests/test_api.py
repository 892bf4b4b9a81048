"""HTTP tests through the FastAPI application."""

from tests.conftest import auth_headers

API = "/api/v1"


class TestAuthEndpoints:

    async def test_permissions_of_current_admin(self, client, graph):
        response = await client.get(f"{API}/auth/permissions", headers=auth_headers(graph.admins["buttons"]))

        assert response.status_code == 200
        assert response.json() == {"permissions": ["products.create"]}

    async def test_menus_of_current_admin(self, client, graph):
        response = await client.get(f"{API}/auth/menus", headers=auth_headers(graph.admins["operator"]))

        assert response.status_code == 200
        menus = response.json()["menus"]
        assert [m["code"] for m in menus] == ["dashboard", "products", "system"]
        assert [c["code"] for c in menus[1]["children"]] == ["products.list"]

    async def test_profile(self, client, graph):
        response = await client.get(f"{API}/auth/me", headers=auth_headers(graph.admins["viewer"]))

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "viewer"
        assert [r["code"] for r in body["roles"]] == ["viewer"]
        assert body["permissions"] == ["dashboard"]
        assert [m["code"] for m in body["menus"]] == ["dashboard"]

    async def test_missing_token(self, client, graph):
        response = await client.get(f"{API}/auth/permissions")

        assert response.status_code in (401, 403)

    async def test_invalid_token(self, client, graph):
        response = await client.get(f"{API}/auth/permissions", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    async def test_token_of_unknown_admin(self, client, graph):
        ghost = type("Ghost", (), {"id": 9999, "nickname": "ghost", "role_level": 3})()

        response = await client.get(f"{API}/auth/permissions", headers=auth_headers(ghost))

        assert response.status_code == 404
        assert response.json()["code"] == "RESOURCE_NOT_FOUND"

    async def test_request_id_is_echoed(self, client, graph):
        response = await client.get(
            f"{API}/auth/permissions",
            headers={**auth_headers(graph.admins["viewer"]), "X-Request-ID": "abc123"},
        )

        assert response.headers["X-Request-ID"] == "abc123"


class TestRoleEndpoints:

    async def test_list_requires_roles_permission(self, client, graph):
        response = await client.get(f"{API}/roles", headers=auth_headers(graph.admins["viewer"]))

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"

    async def test_list_roles_paginated(self, client, graph):
        response = await client.get(
            f"{API}/roles", params={"page": 1, "size": 2}, headers=auth_headers(graph.admins["operator"])
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 5
        assert [r["code"] for r in body["items"]] == ["super_admin", "operator"]

    async def test_create_role(self, client, graph):
        operator = graph.admins["operator"]
        payload = {
            "name": "Catalog",
            "code": "catalog",
            "permission_ids": [graph.permissions["products"].id, graph.permissions["products.list"].id],
        }

        response = await client.post(f"{API}/roles", json=payload, headers=auth_headers(operator))

        assert response.status_code == 201
        body = response.json()
        assert body["creator_id"] == operator.id
        assert sorted(p["code"] for p in body["permissions"]) == ["products", "products.list"]

    async def test_create_role_with_unheld_permission(self, client, graph):
        missing = graph.permissions["system.admins"].id
        payload = {"name": "Escalate", "code": "escalate", "permission_ids": [missing]}

        response = await client.post(f"{API}/roles", json=payload, headers=auth_headers(graph.admins["operator"]))

        assert response.status_code == 403
        assert response.json()["errors"] == {"missing_permission_ids": [missing]}

    async def test_create_role_duplicate_code(self, client, graph):
        payload = {"name": "Viewer 2", "code": "viewer"}

        response = await client.post(f"{API}/roles", json=payload, headers=auth_headers(graph.admins["root"]))

        assert response.status_code == 400
        assert response.json()["code"] == "RESOURCE_ALREADY_EXISTS"

    async def test_create_role_invalid_code_format(self, client, graph):
        payload = {"name": "Bad", "code": "Bad Code"}

        response = await client.post(f"{API}/roles", json=payload, headers=auth_headers(graph.admins["root"]))

        assert response.status_code == 422

    async def test_assign_permissions(self, client, graph):
        role_id = graph.roles["empty"].id
        headers = auth_headers(graph.admins["operator"])

        response = await client.post(
            f"{API}/roles/{role_id}/permissions",
            json={"permission_ids": [graph.permissions["dashboard"].id]},
            headers=headers,
        )
        fetched = await client.get(f"{API}/roles/{role_id}", headers=headers)

        assert response.status_code == 200
        assert [p["code"] for p in fetched.json()["permissions"]] == ["dashboard"]

    async def test_update_role(self, client, graph):
        role_id = graph.roles["viewer"].id

        response = await client.put(
            f"{API}/roles/{role_id}", json={"title": "Read only"}, headers=auth_headers(graph.admins["root"])
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Read only"
        assert [p["code"] for p in response.json()["permissions"]] == ["dashboard"]

    async def test_update_role_with_null_name_is_rejected(self, client, graph):
        role_id = graph.roles["viewer"].id
        headers = auth_headers(graph.admins["root"])

        response = await client.put(f"{API}/roles/{role_id}", json={"name": None}, headers=headers)
        fetched = await client.get(f"{API}/roles/{role_id}", headers=headers)

        assert response.status_code == 422
        assert fetched.json()["name"] == "Viewer"

    async def test_update_role_clears_nullable_description(self, client, graph):
        response = await client.put(
            f"{API}/roles/{graph.roles['viewer'].id}",
            json={"description": None},
            headers=auth_headers(graph.admins["root"]),
        )

        assert response.status_code == 200
        assert response.json()["description"] is None

    async def test_delete_held_role_conflicts(self, client, graph):
        response = await client.delete(
            f"{API}/roles/{graph.roles['viewer'].id}", headers=auth_headers(graph.admins["root"])
        )

        assert response.status_code == 409
        assert response.json()["code"] == "RESOURCE_CONFLICT"

    async def test_delete_role(self, client, graph):
        headers = auth_headers(graph.admins["root"])
        role_id = graph.roles["empty"].id

        response = await client.delete(f"{API}/roles/{role_id}", headers=headers)
        fetched = await client.get(f"{API}/roles/{role_id}", headers=headers)

        assert response.status_code == 204
        assert fetched.status_code == 404

    async def test_assignable_roles(self, client, graph):
        response = await client.get(f"{API}/roles/assignable", headers=auth_headers(graph.admins["operator"]))

        assert response.status_code == 200
        assert [r["code"] for r in response.json()] == ["viewer", "buttons", "empty"]

    async def test_assignable_permission_tree(self, client, graph):
        headers = auth_headers(graph.admins["operator"])

        menus_only = await client.get(f"{API}/roles/permissions/tree", headers=headers)
        with_actions = await client.get(
            f"{API}/roles/permissions/tree", params={"include_actions": "true"}, headers=headers
        )

        products_list = menus_only.json()[1]["children"][0]
        assert products_list["code"] == "products.list"
        assert products_list["children"] == []
        assert with_actions.json()[1]["children"][0]["children"][0]["code"] == "products.create"


class TestPermissionEndpoints:

    async def test_requires_permissions_permission(self, client, graph):
        response = await client.get(f"{API}/permissions", headers=auth_headers(graph.admins["operator"]))

        assert response.status_code == 403

    async def test_list_and_tree(self, client, graph):
        headers = auth_headers(graph.admins["root"])

        listing = await client.get(f"{API}/permissions", params={"type": "button"}, headers=headers)
        tree = await client.get(f"{API}/permissions/tree", headers=headers)

        assert [p["code"] for p in listing.json()] == ["products.create"]
        assert [n["code"] for n in tree.json()] == ["dashboard", "products", "finance", "system"]

    async def test_create_and_delete(self, client, graph):
        headers = auth_headers(graph.admins["root"])
        payload = {"code": "reports", "name": "Reports", "type": "menu", "sort": 4}

        created = await client.post(f"{API}/permissions", json=payload, headers=headers)
        deleted = await client.delete(f"{API}/permissions/{created.json()['id']}", headers=headers)

        assert created.status_code == 201
        assert deleted.status_code == 204

    async def test_delete_with_children_conflicts(self, client, graph):
        response = await client.delete(
            f"{API}/permissions/{graph.permissions['system'].id}", headers=auth_headers(graph.admins["root"])
        )

        assert response.status_code == 409

    async def test_update_cycle_is_rejected(self, client, graph):
        p = graph.permissions

        response = await client.put(
            f"{API}/permissions/{p['products'].id}",
            json={"parent_id": p["products.list"].id},
            headers=auth_headers(graph.admins["root"]),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    async def test_update_with_null_required_field_is_rejected(self, client, graph):
        headers = auth_headers(graph.admins["root"])
        permission_id = graph.permissions["dashboard"].id

        for field in ("name", "code", "type", "status", "sort", "is_hidden"):
            response = await client.put(f"{API}/permissions/{permission_id}", json={field: None}, headers=headers)
            assert response.status_code == 422, field

        fetched = await client.get(f"{API}/permissions/{permission_id}", headers=headers)
        assert fetched.json()["code"] == "dashboard"


class TestAdminEndpoints:

    async def test_assign_roles(self, client, graph):
        response = await client.put(
            f"{API}/admins/{graph.admins['lonely'].id}/roles",
            json={"role_ids": [graph.roles["viewer"].id]},
            headers=auth_headers(graph.admins["root"]),
        )

        assert response.status_code == 200
        assert [r["code"] for r in response.json()["roles"]] == ["viewer"]

    async def test_assign_roles_requires_admins_permission(self, client, graph):
        response = await client.put(
            f"{API}/admins/{graph.admins['lonely'].id}/roles",
            json={"role_ids": [graph.roles["viewer"].id]},
            headers=auth_headers(graph.admins["operator"]),
        )

        assert response.status_code == 403

    async def test_unknown_role_is_not_assignable(self, client, graph):
        response = await client.put(
            f"{API}/admins/{graph.admins['lonely'].id}/roles",
            json={"role_ids": [9999]},
            headers=auth_headers(graph.admins["root"]),
        )

        assert response.status_code == 403
