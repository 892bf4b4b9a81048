# backoffice/adapters/outbound/persistence/models/admin_model.py

"""
Admin model.

Admins are the principals of the back-office. Their effective rights
are the union of the permissions of every role they hold.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    func,
)
from sqlalchemy.orm import relationship
from backoffice.adapters.outbound.persistence.models.base_model import Base, BigIntId


class Admin(Base):
    """
    Back-office admin account.

    Attributes:
        id: Unique admin identifier
        username: Login name
        nickname: Display name
        role_level: Coarse level carried in the token (1 super admin, 2 admin, 3 operator)
        status: 1 active, 0 disabled
        roles: Roles held by the admin
    """
    __tablename__ = "admins"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    nickname = Column(String(100), nullable=True)
    role_level = Column(Integer, nullable=False, default=3)
    status = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    roles = relationship(
        "Role",
        secondary="admin_roles",
        lazy="selectin",
        order_by="Role.id",
    )

    def __repr__(self) -> str:
        return f"<Admin(username={self.username}, status={self.status})>"
