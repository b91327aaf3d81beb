"""
models/travel_requirements.py — Travel authorization and arrival form, one row per profile.

Table: travel_requirements — unique on profile_id.
"""
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from visa_api.database import Base
from visa_api.models._timestamps import TimestampMixin


class TravelRequirementsORM(TimestampMixin, Base):
    __tablename__ = "travel_requirements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    profile_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("entry_profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    travel_authorization_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    travel_authorization_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    travel_authorization_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    arrival_form_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    arrival_form_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    arrival_form_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    other_requirements_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
