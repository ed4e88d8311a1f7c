"""ORM model for user accounts."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from gatekeeper.models.base import Base


class AdvanceUser(Base):
    """
    User account for bearer-token authentication.

    password_hash maps to the 'password' column and only ever holds a bcrypt
    digest. permissions is a JSON snapshot of the role's selection taken when
    the role was assigned; later role edits do not change it.
    """

    __tablename__ = "advance-users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    mobile_no = Column(String(32), nullable=False, default="")
    username = Column(String(255), nullable=False, unique=True, index=True)
    role_id = Column(
        Integer,
        ForeignKey("advanceRoles.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_auto_property_assign = Column(Boolean, nullable=False, default=False)
    password_hash = Column("password", String(255), nullable=False)
    permissions = Column(Text, nullable=True)
    status = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=func.now(),
    )

    role = relationship("AdvanceRole", lazy="joined")
