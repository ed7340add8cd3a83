"""
Doubt Solver: FastAPI Dependencies
Per-request store selection based on the active variant profile.
"""

from fastapi import Request

from doubtsolver.config import VariantProfile
from doubtsolver.database import SessionLocal
from doubtsolver.store import SqlStore


def get_profile(request: Request) -> VariantProfile:
    return request.app.state.profile


def get_store(request: Request):
    """
    Persistence on: a SqlStore over a fresh DB session, closed after the request.
    Persistence off: the app's shared MemoryStore.
    """
    if not request.app.state.profile.persistence:
        yield request.app.state.memory_store
        return

    db = SessionLocal()
    try:
        yield SqlStore(db)
    finally:
        db.close()
