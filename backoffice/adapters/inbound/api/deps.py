# backoffice/adapters/inbound/api/deps.py

"""
Dependencies for injection into API endpoints.

This module defines functions that provide dependencies via
FastAPI Depends() for authentication and database access.
"""

import logging
from fastapi import Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from backoffice.adapters.outbound.persistence.database import get_db
from backoffice.adapters.outbound.security.auth_admin_manager import AdminAuthManager
from backoffice.domain.models.permission_domain_model import Principal

logger = logging.getLogger(__name__)

# Bearer scheme for authentication
bearer_scheme = HTTPBearer()

########################################################################
# Database Session Management
########################################################################

get_session = get_db


########################################################################
# Admin Token Authentication
########################################################################

async def get_current_principal(
        credentials: HTTPAuthorizationCredentials = Security(bearer_scheme),
) -> Principal:
    """
    Resolve the authenticated admin from the bearer token.

    Args:
        credentials: Authorization credentials with bearer token

    Returns:
        Principal carried by the token

    Raises:
        InvalidCredentialsException: If the token is invalid or expired
    """
    return AdminAuthManager.resolve_principal(credentials.credentials)
