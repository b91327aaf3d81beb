"""initial_schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000 UTC

Creates the eight tables:
  - countries, nationalities           (reference data, natural key iso2 / name_fr)
  - official_portals, country_guides   (per-country data)
  - entry_profiles                     (one per nationality x destination x purpose)
  - entry_documents, travel_requirements, health_requirements (per-profile data)
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # --- reference data ---
    op.create_table(
        "countries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name_fr", sa.String(length=255), nullable=False, comment="Canonical French name"),
        sa.Column("iso2", sa.String(length=2), nullable=True, comment="ISO 3166-1 alpha-2, upper case"),
        sa.Column("continent", sa.String(length=64), nullable=True),
        sa.Column("popular_destination", sa.Boolean(), nullable=False),
        sa.Column("image_url", sa.String(length=1024), nullable=True),
        sa.Column("processed_visas_count", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name_fr"),
        sa.UniqueConstraint("iso2"),
    )
    op.create_table(
        "nationalities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name_fr", sa.String(length=255), nullable=False),
        sa.Column("iso2", sa.String(length=2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name_fr"),
        sa.UniqueConstraint("iso2"),
    )
    op.create_table(
        "official_portals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("country_id", sa.Integer(), nullable=False),
        sa.Column("url", sa.String(length=1024), nullable=False),
        sa.Column("label", sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["country_id"], ["countries.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("country_id", "label", name="uq_official_portals_country_label"),
    )
    op.create_table(
        "country_guides",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("country_id", sa.Integer(), nullable=False),
        sa.Column("lang", sa.String(length=8), nullable=False),
        sa.Column("guide_text", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["country_id"], ["countries.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("country_id", "lang", name="uq_country_guides_country_lang"),
    )

    # --- entry profiles ---
    op.create_table(
        "entry_profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nationality_id", sa.Integer(), nullable=False),
        sa.Column("destination_country_id", sa.Integer(), nullable=False),
        sa.Column("purpose", sa.String(length=64), nullable=False),
        sa.Column("last_checked", sa.Date(), nullable=True),
        sa.Column("source_confidence", sa.Float(), nullable=True, comment="0.0 - 1.0"),
        sa.Column("needs_manual_review", sa.Boolean(), nullable=False),
        sa.Column("llm_model", sa.String(length=128), nullable=True),
        sa.Column("llm_prompt_version", sa.String(length=64), nullable=True),
        sa.Column("llm_sources_json", sa.Text(), nullable=True, comment="JSON array of {url, title}"),
        sa.Column("llm_raw_json", sa.Text(), nullable=True, comment="Full raw LLM response"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["nationality_id"], ["nationalities.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["destination_country_id"], ["countries.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "nationality_id", "destination_country_id", "purpose",
            name="uq_entry_profiles_triple",
        ),
    )

    # --- per-profile data ---
    op.create_table(
        "entry_documents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("nom_document", sa.String(length=255), nullable=False),
        sa.Column("type_document", sa.String(length=32), nullable=False, comment="Mirrors DocumentType enum"),
        sa.Column("required", sa.Boolean(), nullable=False),
        sa.Column("duree_validite_text", sa.String(length=255), nullable=True),
        sa.Column("duree_validite_days", sa.Integer(), nullable=True),
        sa.Column("nombre_entrees", sa.String(length=16), nullable=False, comment="'single', 'multiple' or 'unknown'"),
        sa.Column("duree_sejour_max_text", sa.String(length=255), nullable=True),
        sa.Column("duree_sejour_max_days", sa.Integer(), nullable=True),
        sa.Column("prix_montant", sa.Numeric(12, 2), nullable=True),
        sa.Column("prix_devise", sa.String(length=3), nullable=True),
        sa.Column("prix_montant_eur", sa.Numeric(12, 2), nullable=True),
        sa.Column("prix_libelle", sa.String(length=255), nullable=True),
        sa.Column("temps_obtention_visa", sa.String(length=255), nullable=True),
        sa.Column("application_url", sa.String(length=1024), nullable=True),
        sa.Column("source_officielle", sa.Text(), nullable=True),
        sa.Column("confidence", sa.Float(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["profile_id"], ["entry_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_entry_documents_profile_id"), "entry_documents", ["profile_id"], unique=False)
    op.create_table(
        "travel_requirements",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("travel_authorization_required", sa.Boolean(), nullable=False),
        sa.Column("travel_authorization_name", sa.String(length=255), nullable=True),
        sa.Column("travel_authorization_url", sa.String(length=1024), nullable=True),
        sa.Column("arrival_form_required", sa.Boolean(), nullable=False),
        sa.Column("arrival_form_name", sa.String(length=255), nullable=True),
        sa.Column("arrival_form_url", sa.String(length=1024), nullable=True),
        sa.Column("other_requirements_json", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["profile_id"], ["entry_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id"),
    )
    op.create_table(
        "health_requirements",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("vaccines_required_json", sa.Text(), nullable=True),
        sa.Column("vaccines_recommended_json", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["profile_id"], ["entry_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id"),
    )


def downgrade() -> None:
    op.drop_table("health_requirements")
    op.drop_table("travel_requirements")
    op.drop_index(op.f("ix_entry_documents_profile_id"), table_name="entry_documents")
    op.drop_table("entry_documents")
    op.drop_table("entry_profiles")
    op.drop_table("country_guides")
    op.drop_table("official_portals")
    op.drop_table("nationalities")
    op.drop_table("countries")
