"""ORM models for the static module and permission catalog."""

from sqlalchemy import Column, ForeignKey, Integer, String

from gatekeeper.models.base import Base


class AdvanceModule(Base):
    """A named grouping of permissions (e.g. 'Users', 'Roles')."""

    __tablename__ = "advanceModules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    module_name = Column(String(255), nullable=False)


class AdvancePermission(Base):
    """An atomic capability identified by a unique short code."""

    __tablename__ = "advancePermissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    module_id = Column(
        Integer,
        ForeignKey("advanceModules.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
