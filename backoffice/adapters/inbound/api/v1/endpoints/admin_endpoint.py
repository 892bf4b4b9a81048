# backoffice/adapters/inbound/api/v1/endpoints/admin_endpoint.py

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.application.use_cases.role_use_cases import AsyncRoleService
from backoffice.adapters.outbound.security.permissions import require_permission
from backoffice.adapters.inbound.api.deps import get_session
from backoffice.application.dtos.admin_dto import AdminOutput, AssignRoles
from backoffice.domain.models.permission_domain_model import Principal

router = APIRouter()


@router.put(
    "/{admin_id}/roles",
    response_model=AdminOutput,
    summary="Assign Roles - Replace the roles held by an admin",
    description="Roles being added must be assignable by the caller; roles already held may be kept or removed.",
    responses={403: {"description": "Role not assignable by the caller"}},
)
async def assign_roles(
        data: AssignRoles,
        admin_id: int = Path(..., ge=1),
        db: AsyncSession = Depends(get_session),
        principal: Principal = Depends(require_permission("system.admins")),
):
    service = AsyncRoleService(db)
    return await service.assign_roles_to_admin(principal, admin_id, data.role_ids)
