"""SQLAlchemy ORM models."""

from gatekeeper.models.base import Base
from gatekeeper.models.catalog import AdvanceModule, AdvancePermission
from gatekeeper.models.role import AdvanceRole
from gatekeeper.models.user import AdvanceUser

__all__ = ["AdvanceModule", "AdvancePermission", "AdvanceRole", "AdvanceUser", "Base"]
