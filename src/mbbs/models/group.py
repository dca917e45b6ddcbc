from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, UniqueConstraint
from mbbs.db.session import Base

class Group(Base):
    """user group; permissions are granted per group"""
    __tablename__ = "groups"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(64), unique=True)


class GroupPermission(Base):
    """Permission name held by a group.

    Names are either global (``thread.reply``) or scoped to a category
    (``category3.thread.reply``).
    """
    __tablename__ = "group_permissions"
    __table_args__ = (UniqueConstraint("group_id", "permission", name="uq_group_permissions_group_id_permission"),)
    id: Mapped[int] = mapped_column(primary_key=True)
    group_id: Mapped[int] = mapped_column(Integer, index=True)
    permission: Mapped[str] = mapped_column(String(128), index=True)
