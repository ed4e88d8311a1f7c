"""Initial auth schema: modules, permissions, roles, users; seed the permission catalog.

Revision ID: 20251019000000
Revises:
Create Date: 2025-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20251019000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Static reference data: (module id, module name, [(permission code, permission name)]).
CATALOG = (
    (1, "Users", [("U_VIEW", "View users"), ("U_CREATE", "Create users"), ("U_EDIT", "Edit users")]),
    (2, "Roles", [("R_VIEW", "View roles"), ("R_CREATE", "Create roles")]),
)


def upgrade() -> None:
    modules = op.create_table(
        "advanceModules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("module_name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    permissions = op.create_table(
        "advancePermissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("module_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["module_id"], ["advanceModules.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_advancePermissions_code"), "advancePermissions", ["code"], unique=True)
    op.create_index(op.f("ix_advancePermissions_module_id"), "advancePermissions", ["module_id"])

    op.create_table(
        "advanceRoles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("permissions", sa.Text(), nullable=False),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_advanceRoles_name"), "advanceRoles", ["name"], unique=True)

    op.create_table(
        "advance-users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("mobile_no", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=True),
        sa.Column("is_auto_property_assign", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("permissions", sa.Text(), nullable=True),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["role_id"], ["advanceRoles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_advance-users_username"), "advance-users", ["username"], unique=True)

    op.bulk_insert(modules, [{"id": module_id, "module_name": name} for module_id, name, _ in CATALOG])
    op.bulk_insert(
        permissions,
        [
            {"code": code, "name": label, "module_id": module_id}
            for module_id, _, perms in CATALOG
            for code, label in perms
        ],
    )
    # Explicit ids bypass the serial sequence on PostgreSQL; move it past the seed.
    if op.get_bind().dialect.name == "postgresql":
        op.execute(
            "SELECT setval(pg_get_serial_sequence('\"advanceModules\"', 'id'), "
            "(SELECT MAX(id) FROM \"advanceModules\"))"
        )


def downgrade() -> None:
    op.drop_index(op.f("ix_advance-users_username"), table_name="advance-users")
    op.drop_table("advance-users")
    op.drop_index(op.f("ix_advanceRoles_name"), table_name="advanceRoles")
    op.drop_table("advanceRoles")
    op.drop_index(op.f("ix_advancePermissions_module_id"), table_name="advancePermissions")
    op.drop_index(op.f("ix_advancePermissions_code"), table_name="advancePermissions")
    op.drop_table("advancePermissions")
    op.drop_table("advanceModules")
