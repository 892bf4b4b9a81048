from datetime import timedelta

import pytest
from jose import jwt

from backoffice.adapters.configuration.config import settings
from backoffice.adapters.outbound.security.auth_admin_manager import AdminAuthManager
from backoffice.domain.exceptions import InvalidCredentialsException
from backoffice.domain.models.permission_domain_model import Principal


def test_token_carries_admin_claims():
    token = AdminAuthManager.create_access_token(7, name="Alice", role_level=2)

    payload = AdminAuthManager.verify_access_token(token)

    assert payload["sub"] == "7"
    assert payload["name"] == "Alice"
    assert payload["role"] == 2
    assert payload["type"] == "admin"


def test_resolve_principal():
    token = AdminAuthManager.create_access_token(7, name="Alice", role_level=2)

    assert AdminAuthManager.resolve_principal(token) == Principal(id=7, display_name="Alice", role_level=2)


def test_expired_token_is_rejected():
    token = AdminAuthManager.create_access_token(7, expires_delta=timedelta(minutes=-5))

    with pytest.raises(InvalidCredentialsException):
        AdminAuthManager.verify_access_token(token)


def test_token_signed_with_another_key_is_rejected():
    token = jwt.encode({"sub": "7", "type": "admin"}, "another-key", algorithm=settings.ALGORITHM)

    with pytest.raises(InvalidCredentialsException):
        AdminAuthManager.verify_access_token(token)


def test_token_of_another_type_is_rejected():
    token = jwt.encode({"sub": "7", "type": "client"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    with pytest.raises(InvalidCredentialsException):
        AdminAuthManager.verify_access_token(token)


def test_malformed_subject_is_rejected():
    token = jwt.encode({"sub": "alice", "type": "admin"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    with pytest.raises(InvalidCredentialsException):
        AdminAuthManager.resolve_principal(token)
