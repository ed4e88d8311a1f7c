"""
Credential store adapter: the only module that builds queries against the
user, role, module and permission tables.

All queries go through the ORM with bound parameters. Lookups return typed
rows or None; writes flush but never commit, so callers own the transaction
boundary.
"""

from typing import NamedTuple

from sqlalchemy.orm import Session

from gatekeeper.models import AdvanceModule, AdvancePermission, AdvanceRole, AdvanceUser


class ModulePermissionRow(NamedTuple):
    """One row of the module LEFT JOIN permission result."""

    module_id: int
    module_name: str
    permission_id: int | None
    code: str | None
    permission_name: str | None


class CredentialStore:
    """Repository over one SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # Users

    def get_user_by_username(self, username: str) -> AdvanceUser | None:
        return (
            self.session.query(AdvanceUser)
            .filter(AdvanceUser.username == username)
            .first()
        )

    def get_user(self, user_id: int) -> AdvanceUser | None:
        return self.session.get(AdvanceUser, user_id)

    def username_taken(self, username: str, exclude_user_id: int | None = None) -> bool:
        query = self.session.query(AdvanceUser.id).filter(AdvanceUser.username == username)
        if exclude_user_id is not None:
            query = query.filter(AdvanceUser.id != exclude_user_id)
        return query.first() is not None

    def insert_user(self, user: AdvanceUser) -> int:
        """Add and flush a user; return the number of rows written (0 or 1)."""
        self.session.add(user)
        self.session.flush()
        return 1 if user.id is not None else 0

    def list_users(self) -> list[AdvanceUser]:
        return self.session.query(AdvanceUser).order_by(AdvanceUser.id).all()

    # Roles

    def get_role(self, role_id: int, lock: bool = False) -> AdvanceRole | None:
        """Fetch a role; lock=True takes a shared row lock where the dialect supports it."""
        query = self.session.query(AdvanceRole).filter(AdvanceRole.id == role_id)
        if lock:
            query = query.with_for_update(read=True)
        return query.first()

    def role_name_taken(self, name: str) -> bool:
        return (
            self.session.query(AdvanceRole.id)
            .filter(AdvanceRole.name == name)
            .first()
            is not None
        )

    def insert_role(self, role: AdvanceRole) -> int:
        self.session.add(role)
        self.session.flush()
        return 1 if role.id is not None else 0

    def list_roles(self) -> list[AdvanceRole]:
        return self.session.query(AdvanceRole).order_by(AdvanceRole.id).all()

    def list_role_options(self) -> list[tuple[int, str]]:
        rows = (
            self.session.query(AdvanceRole.id, AdvanceRole.name)
            .order_by(AdvanceRole.id)
            .all()
        )
        return [(row.id, row.name) for row in rows]

    # Catalog

    def module_permission_rows(self) -> list[ModulePermissionRow]:
        """Modules LEFT JOIN permissions ordered by module id, then permission id."""
        rows = (
            self.session.query(
                AdvanceModule.id,
                AdvanceModule.module_name,
                AdvancePermission.id,
                AdvancePermission.code,
                AdvancePermission.name,
            )
            .outerjoin(AdvancePermission, AdvancePermission.module_id == AdvanceModule.id)
            .order_by(AdvanceModule.id, AdvancePermission.id)
            .all()
        )
        return [ModulePermissionRow(*row) for row in rows]

    def permission_codes(self) -> set[str]:
        return {code for (code,) in self.session.query(AdvancePermission.code).all()}
