"""
User accounts: registration, login and patching.

Registration and patch run their duplicate check, role lookup and write in a
single session transaction. The unique index on username is the final word:
an IntegrityError on commit is reported as DuplicateUsername.

Permissions are snapshotted from the role when it is assigned; editing a role
later does not touch users that already hold a snapshot.
"""

import logging
from collections.abc import Mapping
from typing import Any, NoReturn

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gatekeeper.core.errors import (
    AccountDataCorrupt,
    DbInsertFailed,
    DuplicateUsername,
    InvalidCredentials,
    InvalidInput,
    UserNotFound,
)
from gatekeeper.core.security import CorruptDigestError, PasswordHasher, TokenService
from gatekeeper.models import AdvanceUser
from gatekeeper.schemas.auth import LoginResult
from gatekeeper.schemas.users import UserOut
from gatekeeper.services.flags import normalize_flag
from gatekeeper.services.roles import RoleManager, dump_selection, parse_selection
from gatekeeper.services.store import CredentialStore

logger = logging.getLogger(__name__)

USER_TYPE = "advance"

REQUIRED_PROFILE_FIELDS = ("name", "email", "username", "password")

PATCHABLE_FIELDS = frozenset(
    {"name", "email", "mobile_no", "username", "role_id", "is_auto_property_assign", "status"}
)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def parse_role_id(value: Any) -> int | None:
    """Accept an int or numeric string; None or "" means no role."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise InvalidInput("role_id must be a number")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as e:
            raise InvalidInput("role_id must be a number") from e
    raise InvalidInput("role_id must be a number")


class UserAccountManager:
    """Account operations bound to one session."""

    def __init__(
        self,
        session: Session,
        hasher: PasswordHasher,
        tokens: TokenService | None = None,
    ) -> None:
        self.session = session
        self.hasher = hasher
        self.tokens = tokens
        self.store = CredentialStore(session)
        self.roles = RoleManager(session)

    def _snapshot_for_role(self, role_id: int | None) -> str | None:
        if role_id is None:
            return None
        return dump_selection(self.roles.get_role_permissions(role_id, lock=True))

    def _raise_for_integrity_error(self, error: IntegrityError, username: str) -> NoReturn:
        """Translate a failed commit; only a username collision becomes DuplicateUsername."""
        self.session.rollback()
        if self.store.username_taken(username):
            logger.info("Username collision detected at commit: username=%s", username)
            raise DuplicateUsername() from error
        raise error

    def register(self, profile: Mapping[str, Any], created_by: int | None = None) -> int:
        """
        Create a user and return its id.

        Raises InvalidInput, DuplicateUsername, RoleNotFound or DbInsertFailed.
        """
        missing = [field for field in REQUIRED_PROFILE_FIELDS if _is_blank(profile.get(field))]
        if missing:
            raise InvalidInput("name, email, username and password are required")

        username = profile["username"].strip()
        role_id = parse_role_id(profile.get("role_id"))
        try:
            if self.store.username_taken(username):
                raise DuplicateUsername()
            snapshot = self._snapshot_for_role(role_id)
            user = AdvanceUser(
                name=profile["name"].strip(),
                email=profile["email"].strip(),
                mobile_no=(profile.get("mobile_no") or "").strip(),
                username=username,
                role_id=role_id,
                is_auto_property_assign=normalize_flag(profile.get("is_auto_property_assign")),
                password_hash=self.hasher.hash(profile["password"]),
                permissions=snapshot,
                status=True,
                created_by=created_by,
            )
            if self.store.insert_user(user) != 1:
                raise DbInsertFailed("Failed to create user")
            self.session.commit()
        except IntegrityError as e:
            self._raise_for_integrity_error(e, username)
        except Exception:
            self.session.rollback()
            raise
        logger.info("User registered: id=%s role_id=%s", user.id, role_id)
        return user.id

    def login(self, username: str | None, password: str | None) -> LoginResult:
        """
        Verify credentials and issue a token.

        Unknown username, wrong password and disabled account all raise the same
        InvalidCredentials; only the server log tells them apart.
        """
        if _is_blank(username) or _is_blank(password):
            raise InvalidInput("username and password are required")
        if self.tokens is None:
            raise RuntimeError("UserAccountManager.login requires a TokenService")

        # Stored usernames are trimmed at registration and patch.
        username = username.strip()
        user = self.store.get_user_by_username(username)
        if user is None:
            self.hasher.burn(password)
            logger.info("Login rejected: unknown username=%s", username)
            raise InvalidCredentials()
        if not user.password_hash:
            logger.error("User %s has no password hash", user.id)
            raise AccountDataCorrupt()
        try:
            matched = self.hasher.verify(password, user.password_hash)
        except CorruptDigestError as e:
            logger.error("User %s has a corrupt password hash: %s", user.id, e)
            raise AccountDataCorrupt() from e
        if not matched:
            logger.info("Login rejected: wrong password for user_id=%s", user.id)
            raise InvalidCredentials()
        if not user.status:
            logger.info("Login rejected: disabled account user_id=%s", user.id)
            raise InvalidCredentials()

        token = self.tokens.issue(user.id)
        logger.info("Login succeeded: user_id=%s", user.id)
        return LoginResult(
            access_token=token,
            id=user.id,
            user_name=user.username,
            user_type=USER_TYPE,
            email=user.email,
            mobile_no=user.mobile_no or "",
        )

    def patch(
        self,
        user_id: int,
        partial: Mapping[str, Any],
        actor_id: int | None = None,
    ) -> UserOut:
        """
        Apply a partial update atomically and return the updated user.

        Every field is validated (and the role snapshot resolved) before any
        attribute changes, and the whole update rolls back on failure.
        """
        changes = {key: value for key, value in partial.items() if key in PATCHABLE_FIELDS}
        if not changes:
            raise InvalidInput("No updatable fields provided")

        username: str | None = None
        try:
            user = self.store.get_user(user_id)
            if user is None:
                raise UserNotFound(f"User {user_id} not found")

            updates: dict[str, Any] = {}
            for field in ("name", "email"):
                if field in changes:
                    if _is_blank(changes[field]):
                        raise InvalidInput(f"{field} must not be empty")
                    updates[field] = changes[field].strip()
            if "mobile_no" in changes:
                updates["mobile_no"] = (changes["mobile_no"] or "").strip()
            if "username" in changes:
                if _is_blank(changes["username"]):
                    raise InvalidInput("username must not be empty")
                username = changes["username"].strip()
                if username != user.username and self.store.username_taken(
                    username, exclude_user_id=user.id
                ):
                    raise DuplicateUsername()
                updates["username"] = username
            if "role_id" in changes:
                role_id = parse_role_id(changes["role_id"])
                updates["role_id"] = role_id
                updates["permissions"] = self._snapshot_for_role(role_id)
            if "is_auto_property_assign" in changes:
                updates["is_auto_property_assign"] = normalize_flag(
                    changes["is_auto_property_assign"]
                )
            if "status" in changes:
                updates["status"] = normalize_flag(changes["status"])

            for field, value in updates.items():
                setattr(user, field, value)
            self.session.flush()
            self.session.commit()
        except IntegrityError as e:
            self._raise_for_integrity_error(e, username or "")
        except Exception:
            self.session.rollback()
            raise
        logger.info(
            "User patched: id=%s fields=%s actor_id=%s",
            user_id,
            sorted(updates),
            actor_id,
        )
        self.session.refresh(user)
        return self.to_out(user)

    def to_out(self, user: AdvanceUser) -> UserOut:
        try:
            permissions = parse_selection(user.permissions) if user.permissions else None
        except ValueError as e:
            logger.error("User %s has a corrupt permission snapshot: %s", user.id, e)
            raise AccountDataCorrupt("User permission snapshot is not valid JSON") from e
        return UserOut(
            id=user.id,
            name=user.name,
            email=user.email,
            mobile_no=user.mobile_no or "",
            username=user.username,
            role_id=user.role_id,
            role_name=user.role.name if user.role is not None else None,
            is_auto_property_assign=bool(user.is_auto_property_assign),
            permissions=permissions,
            status=bool(user.status),
            created_by=user.created_by,
        )

    def list_users(self) -> list[UserOut]:
        return [self.to_out(user) for user in self.store.list_users()]
