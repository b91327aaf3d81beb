"""
dependencies.py — FastAPI providers for the stores and the aggregator.

Everything is built per request from the injected session factory; there is
no process-wide store object to reach for.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from visa_api.database import get_sessionmaker
from visa_api.requirements.aggregator import RequirementsAggregator
from visa_api.store import ReferenceStore, RequirementStore


def get_reference_store(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
) -> ReferenceStore:
    return ReferenceStore(sessions)


def get_requirement_store(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
) -> RequirementStore:
    return RequirementStore(sessions)


def get_aggregator(
    reference: ReferenceStore = Depends(get_reference_store),
    requirements: RequirementStore = Depends(get_requirement_store),
) -> RequirementsAggregator:
    return RequirementsAggregator(reference, requirements)
