# planner/core/stats/models.py

from __future__ import annotations

import enum

from sqlalchemy import Enum, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from planner.db.base import Base


class TimeBucketType(str, enum.Enum):
    DAY = "DAY"      # bucket_value = year * 10000 + month * 100 + day
    WEEK = "WEEK"    # bucket_year = ISO week-year, bucket_value = ISO week
    MONTH = "MONTH"  # bucket_value = month


class LabelTimeBucket(Base):
    """
    Precomputed minutes spent on completed events of one label within one
    local day, ISO week or month of the owner's timezone.
    """
    __tablename__ = 'label_time_buckets'
    __table_args__ = (
        UniqueConstraint(
            'user_id', 'label_id', 'bucket_type', 'bucket_year', 'bucket_value',
            name='uq_label_time_bucket',
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    label_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    label_name: Mapped[str] = mapped_column(String(128), nullable=False)
    bucket_type: Mapped[TimeBucketType] = mapped_column(
        Enum(TimeBucketType, name="time_bucket_type", native_enum=False), nullable=False
    )
    bucket_year: Mapped[int] = mapped_column(Integer, nullable=False)
    bucket_value: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def increment_minutes(self, minutes: int) -> None:
        self.duration_minutes = (self.duration_minutes or 0) + minutes

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<LabelTimeBucket label_id={self.label_id} {self.bucket_type.value} "
            f"{self.bucket_year}/{self.bucket_value} minutes={self.duration_minutes}>"
        )
