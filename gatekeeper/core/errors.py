"""
Typed service errors with stable machine-readable codes.

Every failure a client can see carries a code and a human-readable message.
The HTTP status is derived from the code via CODE_STATUS, never the reverse.
"""

# Code -> HTTP status. Codes missing here fall back to 500.
CODE_STATUS: dict[str, int] = {
    "INVALID_INPUT": 400,
    "UNKNOWN_PERMISSION": 400,
    "NO_TOKEN": 401,
    "INVALID_TOKEN": 401,
    "UNAUTHORIZED": 401,
    "INVALID_CREDENTIALS": 401,
    "NOT_FOUND": 404,
    "USER_NOT_FOUND": 404,
    "ROLE_NOT_FOUND": 404,
    "CONFLICT": 409,
    "UQ_USERNAME": 409,
    "UQ_ROLE_NAME": 409,
    "DATA_CORRUPT": 500,
    "USER_DATA_CORRUPT": 500,
    "ROLE_DATA_CORRUPT": 500,
    "DB_INSERT_FAILED": 500,
    "SERVER_ERROR": 500,
}


def status_for_code(code: str) -> int:
    return CODE_STATUS.get(code, 500)


class ServiceError(Exception):
    """Base class for failures surfaced to API clients."""

    code = "SERVER_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return status_for_code(self.code)


# Taxonomy


class InvalidInput(ServiceError):
    code = "INVALID_INPUT"
    default_message = "Invalid input"


class Unauthorized(ServiceError):
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class NotFound(ServiceError):
    code = "NOT_FOUND"
    default_message = "Resource not found"


class Conflict(ServiceError):
    code = "CONFLICT"
    default_message = "Resource already exists"


class DataCorrupt(ServiceError):
    """Stored data violates an invariant; signals an upstream bug."""

    code = "DATA_CORRUPT"
    default_message = "Stored data is inconsistent"


class Internal(ServiceError):
    code = "SERVER_ERROR"
    default_message = "Internal server error"


# Specific errors


class UnknownPermissionCode(InvalidInput):
    code = "UNKNOWN_PERMISSION"

    def __init__(self, codes: list[str]) -> None:
        self.codes = sorted(codes)
        super().__init__(f"Unknown permission codes: {', '.join(self.codes)}")


class InvalidCredentials(Unauthorized):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid username or password"


class UserNotFound(NotFound):
    code = "USER_NOT_FOUND"
    default_message = "User not found"


class RoleNotFound(NotFound):
    code = "ROLE_NOT_FOUND"
    default_message = "Role not found"


class DuplicateUsername(Conflict):
    code = "UQ_USERNAME"
    default_message = "Username already exists"


class DuplicateRoleName(Conflict):
    code = "UQ_ROLE_NAME"
    default_message = "Role name already exists"


class AccountDataCorrupt(DataCorrupt):
    code = "USER_DATA_CORRUPT"
    default_message = "User record is missing a valid password hash"


class RoleDataCorrupt(DataCorrupt):
    code = "ROLE_DATA_CORRUPT"
    default_message = "Role permissions are not a valid selection"


class DbInsertFailed(Internal):
    code = "DB_INSERT_FAILED"
    default_message = "Failed to create record"
