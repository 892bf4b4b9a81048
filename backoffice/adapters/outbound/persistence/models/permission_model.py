# backoffice/adapters/outbound/persistence/models/permission_model.py

"""
Permission model for access control.

A permission is a single node of the menu/page/button/api tree. The tree is
stored flat: each row points at its parent through ``parent_id`` (0 for top
level nodes). ``parent_id`` carries no foreign key: the
parent reference is validated by the application when the row is written.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column
from backoffice.adapters.outbound.persistence.models.base_model import Base, BigIntId


class Permission(Base):
    """
    Permission / menu node.

    Attributes:
        id: Unique permission identifier
        code: Globally unique code used by client-side guards (ex: "products.create")
        name: Internal name of the node
        title: Display title
        type: One of menu, page, button, api
        parent_id: Parent permission id, 0 for top level nodes
        status: 1 enabled, 0 disabled
    """
    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="menu", index=True)

    # Tree structure
    parent_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, index=True)

    # Routing (menu/page)
    path: Mapped[Optional[str]] = mapped_column(String(200))
    component: Mapped[Optional[str]] = mapped_column(String(200))
    redirect: Mapped[Optional[str]] = mapped_column(String(200))
    icon: Mapped[Optional[str]] = mapped_column(String(50))

    # Display
    sort: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Action gates (button/api)
    api_path: Mapped[Optional[str]] = mapped_column(String(200))
    api_method: Mapped[Optional[str]] = mapped_column(String(10))

    status: Mapped[int] = mapped_column(Integer, nullable=False, default=1, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(500))

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Permission(code={self.code}, type={self.type})>"
