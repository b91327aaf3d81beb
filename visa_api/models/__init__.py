"""
models/__init__.py — imports all ORM models so Alembic's env.py
sees them via Base.metadata when generating migrations.

Import order follows FK dependencies: reference tables before profiles.
"""
from visa_api.models.country import CountryORM
from visa_api.models.nationality import NationalityORM
from visa_api.models.official_portal import OfficialPortalORM
from visa_api.models.country_guide import CountryGuideORM
from visa_api.models.entry_profile import EntryProfileORM
from visa_api.models.entry_document import EntryDocumentORM
from visa_api.models.travel_requirements import TravelRequirementsORM
from visa_api.models.health_requirements import HealthRequirementsORM

__all__ = [
    "CountryORM",
    "NationalityORM",
    "OfficialPortalORM",
    "CountryGuideORM",
    "EntryProfileORM",
    "EntryDocumentORM",
    "TravelRequirementsORM",
    "HealthRequirementsORM",
]
