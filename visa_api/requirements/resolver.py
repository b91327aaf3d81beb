"""
resolver.py — Resolve a user-supplied nationality or destination token.

A token is either an ISO 3166-1 alpha-2 code ("fr", "JP") or the canonical
French name ("Japon"). Two-character tokens are tried as codes first, upper
cased; anything that does not resolve as a code, two-character tokens
included, is then looked up by exact name. Short names are never rejected just
because they look like codes.
"""
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from visa_api.errors import NotFoundError
from visa_api.schemas import Country, Nationality

logger = logging.getLogger(__name__)

T = TypeVar("T")

Lookup = Callable[[str], Awaitable[Optional[T]]]

NATIONALITY = "Nationality"
DESTINATION = "Destination country"


async def resolve_by_code_or_name(
    token: str,
    kind: str,
    by_iso2: Lookup,
    by_name: Lookup,
) -> T:
    """
    Resolve token through by_iso2, then by_name.

    Raises:
        NotFoundError(kind, token): neither lookup matched.
    """
    found = None
    if len(token) == 2:
        found = await by_iso2(token.upper())
    if found is None:
        found = await by_name(token)
    if found is None:
        logger.info("%s not resolved token=%r", kind, token)
        raise NotFoundError(kind, token)
    return found


class IdentifierResolver:
    """Nationality and destination instantiations of resolve_by_code_or_name."""

    def __init__(self, reference_store) -> None:
        self._store = reference_store

    async def nationality(self, token: str) -> Nationality:
        return await resolve_by_code_or_name(
            token,
            NATIONALITY,
            self._store.get_nationality_by_iso2,
            self._store.get_nationality_by_name,
        )

    async def destination(self, token: str) -> Country:
        return await resolve_by_code_or_name(
            token,
            DESTINATION,
            self._store.get_country_by_iso2,
            self._store.get_country_by_name,
        )
