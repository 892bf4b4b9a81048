"""authorization tables

Revision ID: 0001
Revises:
Create Date: 2026-10-16 00:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "permissions",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(100), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("title", sa.String(100), nullable=False, server_default=""),
        sa.Column("type", sa.String(20), nullable=False, server_default="menu"),
        sa.Column("parent_id", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("path", sa.String(200)),
        sa.Column("component", sa.String(200)),
        sa.Column("redirect", sa.String(200)),
        sa.Column("icon", sa.String(50)),
        sa.Column("sort", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_hidden", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("api_path", sa.String(200)),
        sa.Column("api_method", sa.String(10)),
        sa.Column("status", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("description", sa.String(500)),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_permissions_code", "permissions", ["code"], unique=True)
    op.create_index("ix_permissions_name", "permissions", ["name"])
    op.create_index("ix_permissions_type", "permissions", ["type"])
    op.create_index("ix_permissions_parent_id", "permissions", ["parent_id"])
    op.create_index("ix_permissions_status", "permissions", ["status"])

    op.create_table(
        "roles",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("title", sa.String(100)),
        sa.Column("description", sa.String(500)),
        sa.Column("status", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("creator_id", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_roles_code", "roles", ["code"], unique=True)
    op.create_index("ix_roles_creator_id", "roles", ["creator_id"])

    op.create_table(
        "admins",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("nickname", sa.String(100)),
        sa.Column("role_level", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("status", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_admins_username", "admins", ["username"], unique=True)

    op.create_table(
        "role_permissions",
        sa.Column("role_id", sa.BigInteger(), sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("permission_id", sa.BigInteger(), sa.ForeignKey("permissions.id", ondelete="CASCADE"),
                  primary_key=True),
        sa.UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )

    op.create_table(
        "admin_roles",
        sa.Column("admin_id", sa.BigInteger(), sa.ForeignKey("admins.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", sa.BigInteger(), sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table("admin_roles")
    op.drop_table("role_permissions")
    op.drop_index("ix_admins_username", table_name="admins")
    op.drop_table("admins")
    op.drop_index("ix_roles_creator_id", table_name="roles")
    op.drop_index("ix_roles_code", table_name="roles")
    op.drop_table("roles")
    for column in ("status", "parent_id", "type", "name", "code"):
        op.drop_index(f"ix_permissions_{column}", table_name="permissions")
    op.drop_table("permissions")
