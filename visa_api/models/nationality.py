"""
models/nationality.py — Traveller nationalities.

Table: nationalities
Same natural-key rule as countries: iso2 first, name_fr otherwise.
"""
from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from visa_api.database import Base
from visa_api.models._timestamps import TimestampMixin


class NationalityORM(TimestampMixin, Base):
    __tablename__ = "nationalities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name_fr: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    iso2: Mapped[Optional[str]] = mapped_column(String(2), nullable=True, unique=True)
