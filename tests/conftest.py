"""
Shared fixtures: in-memory SQLite, a scripted LLM, and app clients for both variants.
Environment is pinned before any doubtsolver import so config picks it up.
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="doubtsolver-uploads-")
os.environ["GROQ_API_KEY"] = "test-key"
for _var in (
    "APP_VARIANT", "LLM_MODEL", "LLM_TEMPERATURE", "LLM_MAX_TOKENS", "PORT",
    "ENABLE_PERSISTENCE", "ENABLE_IMAGE_UPLOAD", "ENABLE_WORD_LIST_FORMAT",
    "RESET_DATABASE",
):
    os.environ.pop(_var, None)

import pytest
from fastapi.testclient import TestClient

from doubtsolver import models  # noqa: F401
from doubtsolver.config import VARIANTS
from doubtsolver.database import Base, engine, SessionLocal
from doubtsolver.main import create_app
from doubtsolver.store import SqlStore, MemoryStore
from doubtsolver.tutor.llm import LLMResult, get_llm


class FakeLLM:
    """Returns a canned reply and remembers every call."""

    def __init__(self, reply: str = "Photosynthesis turns light into chemical energy."):
        self.reply = reply
        self.error = None
        self.calls = []

    def generate(self, messages, model, temperature, max_tokens=None):
        self.calls.append({
            "messages": messages,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return LLMResult(text=self.reply, latency_ms=1, model=model, usage={})


@pytest.fixture
def db():
    """Fresh schema on the shared in-memory engine."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(params=["sql", "memory"])
def store(request, db):
    if request.param == "sql":
        return SqlStore(db)
    return MemoryStore()


@pytest.fixture
def fake_llm():
    return FakeLLM()


def _make_client(profile, fake_llm):
    app = create_app(profile)
    app.dependency_overrides[get_llm] = lambda: fake_llm
    return TestClient(app)


@pytest.fixture
def client(db, fake_llm):
    with _make_client(VARIANTS["doubt_solver"], fake_llm) as c:
        yield c


@pytest.fixture
def advisor_client(fake_llm):
    with _make_client(VARIANTS["decision_advisor"], fake_llm) as c:
        yield c
