"""
models/country_guide.py — Free-text travel guide per country and language.

Table: country_guides — unique on (country_id, lang).
"""
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from visa_api.database import Base
from visa_api.models._timestamps import TimestampMixin


class CountryGuideORM(TimestampMixin, Base):
    __tablename__ = "country_guides"
    __table_args__ = (
        UniqueConstraint("country_id", "lang", name="uq_country_guides_country_lang"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    country_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("countries.id", ondelete="CASCADE"),
        nullable=False,
    )
    lang: Mapped[str] = mapped_column(String(8), nullable=False)
    guide_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
