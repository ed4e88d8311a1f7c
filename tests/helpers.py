"""Shared fixtures: in-memory SQLite sessions with a seeded permission catalog."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gatekeeper.core.security import PasswordHasher, TokenService
from gatekeeper.models import AdvanceModule, AdvancePermission, Base

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"

# (module id, module name, [(permission id, code, name)]); "Reports" has no permissions.
TEST_CATALOG = (
    (1, "Users", [(1, "U_VIEW", "View users"), (2, "U_EDIT", "Edit users")]),
    (2, "Roles", [(3, "R_VIEW", "View roles"), (4, "R_CREATE", "Create roles")]),
    (3, "Reports", []),
)


def make_session_factory(seed: bool = True) -> sessionmaker:
    """Fresh in-memory database; StaticPool so every session sees the same data."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    if seed:
        seed_catalog(factory)
    return factory


def seed_catalog(factory: sessionmaker) -> None:
    db = factory()
    try:
        for module_id, module_name, perms in TEST_CATALOG:
            db.add(AdvanceModule(id=module_id, module_name=module_name))
            for perm_id, code, name in perms:
                db.add(AdvancePermission(id=perm_id, code=code, name=name, module_id=module_id))
        db.commit()
    finally:
        db.close()


def fast_hasher() -> PasswordHasher:
    """Minimum bcrypt cost keeps tests quick."""
    return PasswordHasher(rounds=4)


def token_service() -> TokenService:
    return TokenService(TEST_SECRET)


def profile(**overrides: object) -> dict:
    """A valid registration profile."""
    data = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "mobile_no": "0123456789",
        "username": "ada",
        "password": "correct horse battery",
        "role_id": None,
        "is_auto_property_assign": False,
    }
    data.update(overrides)
    return data
