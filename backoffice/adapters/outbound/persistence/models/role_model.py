# backoffice/adapters/outbound/persistence/models/role_model.py

"""
Role model.

A role is a named, reusable bundle of permissions that can be held
by admins.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Integer, String, func
from sqlalchemy.orm import relationship, Mapped, mapped_column
from backoffice.adapters.outbound.persistence.models.base_model import Base, BigIntId


class Role(Base):
    """
    Role model.

    Attributes:
        id: Unique role identifier
        code: Unique role code (ex: "super_admin")
        name: Unique role name
        creator_id: Admin that created the role, 0 for system seeded roles
        permissions: Permissions bundled in the role
    """
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(String(500))
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    creator_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, onupdate=func.now())

    # Relationship with permissions through the association table
    permissions = relationship(
        "Permission",
        secondary="role_permissions",
        lazy="selectin",
        order_by="Permission.id",
    )

    def __repr__(self) -> str:
        return f"<Role(code={self.code})>"
