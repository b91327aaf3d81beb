"""
models/official_portal.py — Official government portal per country.

Table: official_portals
Unique on (country_id, label). Only the "official_portal" label is written
today, which makes it one portal per country.
"""
from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from visa_api.database import Base
from visa_api.models._timestamps import TimestampMixin
from visa_api.schemas import OFFICIAL_PORTAL_LABEL


class OfficialPortalORM(TimestampMixin, Base):
    __tablename__ = "official_portals"
    __table_args__ = (
        UniqueConstraint("country_id", "label", name="uq_official_portals_country_label"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    country_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("countries.id", ondelete="CASCADE"),
        nullable=False,
    )
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    label: Mapped[str] = mapped_column(String(64), nullable=False, default=OFFICIAL_PORTAL_LABEL)
