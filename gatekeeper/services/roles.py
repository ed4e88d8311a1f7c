"""Role management: creation with catalog-validated permission selections, listings."""

import json
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gatekeeper.core.errors import (
    DbInsertFailed,
    DuplicateRoleName,
    InvalidInput,
    RoleDataCorrupt,
    RoleNotFound,
    UnknownPermissionCode,
)
from gatekeeper.models import AdvanceRole
from gatekeeper.schemas.roles import RoleOption, RoleSummary
from gatekeeper.services.flags import normalize_flag
from gatekeeper.services.permission_catalog import known_permission_codes
from gatekeeper.services.store import CredentialStore

logger = logging.getLogger(__name__)


def parse_selection(raw: str | None) -> dict[str, bool]:
    """
    Decode a stored permission selection.

    Empty or NULL text decodes to {}. Raises ValueError when the text is not
    a JSON object.
    """
    if raw is None or not raw.strip():
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("permission selection must be a JSON object")
    return {str(code): normalize_flag(enabled) for code, enabled in data.items()}


def dump_selection(selection: Mapping[str, bool]) -> str:
    return json.dumps(dict(selection), sort_keys=True)


class RoleManager:
    """Create and read roles within one session."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.store = CredentialStore(session)

    def _validate_selection(self, selection: Any) -> dict[str, bool]:
        if selection is None:
            return {}
        if not isinstance(selection, Mapping):
            raise InvalidInput("permissions must be an object of permission code to enabled state")
        codes = known_permission_codes(self.store)
        unknown = [code for code in selection if code not in codes]
        if unknown:
            raise UnknownPermissionCode(unknown)
        return {code: normalize_flag(enabled) for code, enabled in selection.items()}

    def create_role(
        self,
        name: str | None,
        description: str | None,
        permission_selection: Any,
        created_by: int | None = None,
    ) -> int:
        """
        Persist a new role and return its id.

        Raises InvalidInput for a blank name, UnknownPermissionCode for codes
        outside the live catalog, DuplicateRoleName when the exact name exists.
        """
        if name is None or not name.strip():
            raise InvalidInput("name is required")
        try:
            selection = self._validate_selection(permission_selection)
            if self.store.role_name_taken(name):
                raise DuplicateRoleName()
            role = AdvanceRole(
                name=name,
                description=(description or "").strip(),
                permissions=dump_selection(selection),
                status=True,
                created_by=created_by,
            )
            if self.store.insert_role(role) != 1:
                raise DbInsertFailed("Failed to create role")
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if self.store.role_name_taken(name):
                logger.info("Role name collision detected at commit: name=%s", name)
                raise DuplicateRoleName() from e
            raise
        except Exception:
            self.session.rollback()
            raise
        logger.info("Role created: id=%s name=%s", role.id, name)
        return role.id

    def _summary(self, role: AdvanceRole) -> RoleSummary:
        try:
            permissions = parse_selection(role.permissions)
        except ValueError as e:
            logger.error("Role %s has a corrupt permission selection: %s", role.id, e)
            raise RoleDataCorrupt() from e
        return RoleSummary(
            id=role.id,
            name=role.name,
            description=role.description or "",
            permissions=permissions,
            status=bool(role.status),
            created_by=role.created_by,
        )

    def list_roles(self) -> list[RoleSummary]:
        return [self._summary(role) for role in self.store.list_roles()]

    def list_roles_for_dropdown(self) -> list[RoleOption]:
        return [RoleOption(id=role_id, name=name) for role_id, name in self.store.list_role_options()]

    def get_role_permissions(self, role_id: int, lock: bool = False) -> dict[str, bool]:
        """Current selection of a role; RoleNotFound if it does not exist."""
        role = self.store.get_role(role_id, lock=lock)
        if role is None:
            raise RoleNotFound(f"Role {role_id} not found")
        return self._summary(role).permissions
