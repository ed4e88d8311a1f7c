"""ORM model for roles and their permission selection."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func

from gatekeeper.models.base import Base


class AdvanceRole(Base):
    """
    Named role with a permission selection.

    permissions: JSON text of {permission_code: bool}, validated against the
    catalog when the role is created.
    """

    __tablename__ = "advanceRoles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    permissions = Column(Text, nullable=False, default="{}")
    status = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
