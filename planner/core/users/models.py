# planner/core/users/models.py
from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from planner.db.base import Base


class User(Base):
    __tablename__ = 'users'

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True, comment="Internal User ID")
    name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, comment="User display name")
    timezone: Mapped[str] = mapped_column(String(64), server_default='UTC', default='UTC', nullable=False, comment="IANA timezone")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id!r} timezone={self.timezone!r}>"
