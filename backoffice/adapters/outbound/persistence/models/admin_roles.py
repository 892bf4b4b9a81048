# backoffice/adapters/outbound/persistence/models/admin_roles.py

from sqlalchemy import Column, ForeignKey, Table
from sqlalchemy import BigInteger
from backoffice.adapters.outbound.persistence.models.base_model import Base

########################################################################
# Many-to-many association between admins and roles
########################################################################

admin_roles = Table(
    "admin_roles",
    Base.metadata,
    Column("admin_id", BigInteger, ForeignKey("admins.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", BigInteger, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)
