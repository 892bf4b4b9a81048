# backoffice/domain/services/permission_service.py

from typing import Dict, Iterable, List, Set

from backoffice.domain.models.permission_domain_model import Permission, Role


class RolePermissionService:
    """
    Domain service for role and permission set arithmetic.
    """

    @staticmethod
    def merge_role_permissions(roles: Iterable[Role]) -> List[Permission]:
        """
        Union of the permissions granted by a list of roles.

        Args:
            roles: Roles held by a principal

        Returns:
            Permissions deduplicated by id, in first-seen order
        """
        merged: Dict[int, Permission] = {}
        for role in roles:
            for permission in role.permissions:
                if permission.id not in merged:
                    merged[permission.id] = permission
        return list(merged.values())

    @staticmethod
    def missing_permission_ids(requested: Iterable[int], owned: Iterable[int]) -> Set[int]:
        """
        Ids of ``requested`` that are not in ``owned``.

        Delegation is valid only when this set is empty. An empty
        request is always valid.
        """
        return set(requested) - set(owned)

    @staticmethod
    def is_subset(requested: Iterable[int], owned: Iterable[int]) -> bool:
        return not RolePermissionService.missing_permission_ids(requested, owned)

    @staticmethod
    def filter_assignable_roles(
            roles: Iterable[Role],
            held_role_ids: Iterable[int],
            owned_permission_ids: Iterable[int],
    ) -> List[Role]:
        """
        Roles a principal may hand out to others.

        A role qualifies when the principal does not already hold it and
        every permission it grants is part of the principal's effective set.
        A role without permissions therefore always qualifies.

        Args:
            roles: Candidate roles with their permissions loaded
            held_role_ids: Ids of the roles the principal holds
            owned_permission_ids: Ids in the principal's effective permission set

        Returns:
            Qualifying roles, in input order
        """
        held = set(held_role_ids)
        owned = set(owned_permission_ids)
        return [
            role for role in roles
            if role.id not in held and role.permission_ids <= owned
        ]
