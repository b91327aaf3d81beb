"""
models/entry_document.py — Documents required (or optional) for an entry profile.

Table: entry_documents
No natural key beyond (profile_id, insertion order): a profile's documents
are always replaced as a whole, inside one transaction.
"""
from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from visa_api.database import Base
from visa_api.models._timestamps import TimestampMixin


class EntryDocumentORM(TimestampMixin, Base):
    __tablename__ = "entry_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    profile_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("entry_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    nom_document: Mapped[str] = mapped_column(String(255), nullable=False)
    type_document: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Mirrors DocumentType enum",
    )
    required: Mapped[bool] = mapped_column(Boolean, nullable=False)
    duree_validite_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    duree_validite_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    nombre_entrees: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="unknown",
        comment="'single', 'multiple' or 'unknown'",
    )
    duree_sejour_max_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    duree_sejour_max_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    prix_montant: Mapped[Optional[float]] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    prix_devise: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)
    prix_montant_eur: Mapped[Optional[float]] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    prix_libelle: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    temps_obtention_visa: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    application_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    source_officielle: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    confidence: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
