"""
json_fields.py — Decoding of the JSON text columns.

Sources, vaccines, the raw LLM response and "other requirements" are stored
as opaque text. They are decoded here, on the way out of the store, so the
rest of the code only ever sees structured values.

Undecodable text is not an error: historical rows may hold anything, and the
rest of a response must still be served. Lists fall back to [], free-form
blobs to None.
"""
import json
import logging
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from visa_api.schemas import SourceItem

logger = logging.getLogger(__name__)

_SOURCES = TypeAdapter(list[SourceItem])
_ANY_LIST = TypeAdapter(list[Any])


def decode_sources(raw: Optional[str]) -> list[SourceItem]:
    """Decode llm_sources_json into [{url, title}, ...] or []."""
    if not raw:
        return []
    try:
        return _SOURCES.validate_json(raw)
    except ValidationError:
        logger.warning("Discarding undecodable sources JSON (%d chars)", len(raw))
        return []


def decode_list(raw: Optional[str]) -> list[Any]:
    """Decode a JSON array column (vaccines); anything else becomes []."""
    if not raw:
        return []
    try:
        return _ANY_LIST.validate_json(raw)
    except ValidationError:
        logger.warning("Discarding undecodable JSON list (%d chars)", len(raw))
        return []


def decode_blob(raw: Optional[str]) -> Any:
    """Decode a free-form JSON column; None when absent or undecodable."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Discarding undecodable JSON blob (%d chars)", len(raw))
        return None
