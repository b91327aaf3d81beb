"""
models/entry_profile.py — One row per (nationality, destination, purpose).

Table: entry_profiles
The triple is the natural key; re-submitting it overwrites the provenance
fields but keeps the row id, so documents and requirements stay attached.

LLM output is stored as text exactly as received (llm_sources_json,
llm_raw_json). It is decoded on read, never validated on write.
"""
from datetime import date
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from visa_api.database import Base
from visa_api.models._timestamps import TimestampMixin


class EntryProfileORM(TimestampMixin, Base):
    __tablename__ = "entry_profiles"
    __table_args__ = (
        UniqueConstraint(
            "nationality_id",
            "destination_country_id",
            "purpose",
            name="uq_entry_profiles_triple",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nationality_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("nationalities.id", ondelete="CASCADE"),
        nullable=False,
    )
    destination_country_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("countries.id", ondelete="CASCADE"),
        nullable=False,
    )
    purpose: Mapped[str] = mapped_column(String(64), nullable=False)
    last_checked: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    source_confidence: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="0.0 - 1.0",
    )
    needs_manual_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    llm_model: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    llm_prompt_version: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    llm_sources_json: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="JSON array of {url, title}",
    )
    llm_raw_json: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Full raw LLM response",
    )
