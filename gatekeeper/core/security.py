"""Password hashing and JWT issuance/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from pydantic import SecretStr

from gatekeeper.core.errors import Internal, Unauthorized

if TYPE_CHECKING:
    from gatekeeper.core.config import Settings

# Work factor for bcrypt; stored hashes embed it, so changing it only affects new hashes.
BCRYPT_ROUNDS = 10

# bcrypt ignores input past 72 bytes; truncate explicitly so newer bcrypt releases do not raise.
BCRYPT_MAX_BYTES = 72


class HashingError(Internal):
    """bcrypt failed to produce a digest (RNG or algorithm failure). Not retried."""

    default_message = "Password hashing failed"


class CorruptDigestError(Exception):
    """The stored digest is empty or not a bcrypt hash."""


class TokenConfigError(RuntimeError):
    """Token service constructed without a usable signing secret."""


class TokenMissing(Unauthorized):
    code = "NO_TOKEN"
    default_message = "No token provided"


class TokenMalformed(Unauthorized):
    code = "INVALID_TOKEN"
    default_message = "Invalid token format"


class TokenInvalid(Unauthorized):
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class PasswordHasher:
    """One-way bcrypt hashing with a per-call random salt."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self.rounds = rounds
        self._dummy_digest: str | None = None

    def burn(self, plaintext: str) -> None:
        """
        Run a full-cost check against a throwaway digest.

        Called when no stored digest exists so an unknown username takes as
        long to reject as a wrong password.
        """
        if self._dummy_digest is None:
            self._dummy_digest = self.hash("gatekeeper-timing-dummy")
        self.verify(plaintext, self._dummy_digest)

    def hash(self, plaintext: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        pw_bytes = plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            digest = bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds))
        except (ValueError, TypeError, RuntimeError, OSError) as e:
            raise HashingError() from e
        return digest.decode("utf-8")

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """
        Check a plain password against a stored digest (constant-time inside bcrypt).

        Returns False on mismatch; raises CorruptDigestError only when the digest
        itself is unusable.
        """
        if not digest or not digest.strip():
            raise CorruptDigestError("stored digest is empty")
        pw_bytes = plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(pw_bytes, digest.encode("utf-8"))
        except (ValueError, TypeError) as e:
            raise CorruptDigestError(str(e)) from e


class TokenService:
    """
    Issue and verify signed, time-bounded bearer tokens.

    The signing secret is injected at construction; an empty secret is a
    configuration error raised immediately, never per request.
    """

    def __init__(
        self,
        secret: str | SecretStr,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(minutes=60),
    ) -> None:
        raw = secret.get_secret_value() if isinstance(secret, SecretStr) else secret
        if not raw or not raw.strip():
            raise TokenConfigError("JWT signing secret is missing")
        if ttl <= timedelta(0):
            raise TokenConfigError("token TTL must be positive")
        self._secret = raw
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        )

    def issue(self, user_id: int, now: datetime | None = None) -> str:
        """Create a token with sub=user_id, iat=now and exp=now+ttl."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Decode and validate a token; return the user id it carries."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        # InvalidSignatureError subclasses DecodeError, so it must come first.
        except jwt.InvalidSignatureError as e:
            raise TokenInvalid("Invalid token signature") from e
        except jwt.ExpiredSignatureError as e:
            raise TokenInvalid("Token has expired") from e
        except jwt.DecodeError as e:
            raise TokenMalformed() from e
        except jwt.PyJWTError as e:
            raise TokenInvalid(str(e)) from e
        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise TokenInvalid("Invalid token payload") from e

    def verify_header(self, authorization: str | None) -> int:
        """Validate an Authorization header value of the form 'Bearer <token>'."""
        if authorization is None or not authorization.strip():
            raise TokenMissing()
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise TokenMalformed()
        return self.verify(parts[1])
