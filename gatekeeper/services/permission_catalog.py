"""Fold the flat module/permission join into a module -> permissions tree."""

from collections.abc import Iterable

from gatekeeper.schemas.roles import ModulePermissions, PermissionItem
from gatekeeper.services.store import CredentialStore, ModulePermissionRow


def fold_module_rows(rows: Iterable[ModulePermissionRow]) -> list[ModulePermissions]:
    """
    Group join rows by module id in a single pass.

    Modules keep first-seen order and permissions keep row order. A row with no
    permission (left join miss) still registers its module, so empty modules
    appear with an empty list. Repeated rows for a module never create a
    second entry.
    """
    by_module: dict[int, ModulePermissions] = {}
    for row in rows:
        group = by_module.get(row.module_id)
        if group is None:
            group = ModulePermissions(module=row.module_name, permissions=[])
            by_module[row.module_id] = group
        if row.permission_id is not None:
            group.permissions.append(
                PermissionItem(
                    id=row.permission_id,
                    code=row.code or "",
                    name=row.permission_name or "",
                )
            )
    return list(by_module.values())


def list_modules_with_permissions(store: CredentialStore) -> list[ModulePermissions]:
    """Return every module with its permissions, module id then permission id ascending."""
    return fold_module_rows(store.module_permission_rows())


def known_permission_codes(store: CredentialStore) -> set[str]:
    """Codes present in the live catalog."""
    return store.permission_codes()
