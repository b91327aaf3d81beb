"""
schemas.py — Public catalog response shapes (countries, nationalities).
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict


class CountryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name_fr: str
    iso2: Optional[str] = None
    continent: Optional[str] = None
    popular_destination: bool = False
    image_url: Optional[str] = None


class CountryDetailOut(CountryOut):
    official_portal: Optional[str] = None


class NationalityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name_fr: str
    iso2: Optional[str] = None
