"""
models/health_requirements.py — Vaccination requirements, one row per profile.

Table: health_requirements — unique on profile_id.
Vaccine lists are JSON arrays stored as text.
"""
from typing import Optional

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from visa_api.database import Base
from visa_api.models._timestamps import TimestampMixin


class HealthRequirementsORM(TimestampMixin, Base):
    __tablename__ = "health_requirements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    profile_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("entry_profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    vaccines_required_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    vaccines_recommended_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
