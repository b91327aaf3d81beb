"""
models/country.py — Destination countries.

Table: countries
Natural key: iso2 when known, otherwise name_fr. Both are unique; iso2 may be
NULL on several rows (NULLs never collide in a unique index).
"""
from typing import Optional

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from visa_api.database import Base
from visa_api.models._timestamps import TimestampMixin


class CountryORM(TimestampMixin, Base):
    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name_fr: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Canonical French name",
    )
    iso2: Mapped[Optional[str]] = mapped_column(
        String(2),
        nullable=True,
        unique=True,
        comment="ISO 3166-1 alpha-2, upper case",
    )
    continent: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    popular_destination: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    processed_visas_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
