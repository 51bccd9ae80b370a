# planner/core/labels/models.py

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from planner.db.base import Base


class Label(Base):
    """Category a user files events under; time statistics are kept per label."""
    __tablename__ = 'labels'
    __table_args__ = (UniqueConstraint('user_id', 'name', name='uq_label_user_name'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Label id={self.id} user_id={self.user_id!r} name={self.name!r}>"
