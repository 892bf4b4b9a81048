# backoffice/adapters/inbound/api/v1/router.py

from fastapi import APIRouter
from backoffice.adapters.inbound.api.v1.endpoints import (
    admin_endpoint,
    auth_endpoint,
    permission_endpoint,
    role_endpoint,
)

api_router = APIRouter()

api_router.include_router(auth_endpoint.router, prefix="/auth", tags=["Auth"])
api_router.include_router(role_endpoint.router, prefix="/roles", tags=["Roles"])
api_router.include_router(permission_endpoint.router, prefix="/permissions", tags=["Permissions"])
api_router.include_router(admin_endpoint.router, prefix="/admins", tags=["Admins"])
