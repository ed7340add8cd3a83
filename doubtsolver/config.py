"""
Doubt Solver: Configuration
All environment variables and constants. Single source of truth.
No other file reads os.environ directly.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# ─── Paths ───────────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env file if present (never overrides real environment variables)
load_dotenv(BASE_DIR / ".env")

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads")))

# ─── Variant ─────────────────────────────────────────────────────────────────
APP_VARIANT = os.getenv("APP_VARIANT", "doubt_solver")
# Options: doubt_solver | decision_advisor

# ─── API Keys / LLM endpoint ─────────────────────────────────────────────────
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.groq.com/openai/v1")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "30"))
LLM_EMPTY_FALLBACK = "Sorry, I could not generate an answer."

# ─── Database ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{BASE_DIR / 'doubt_solver.db'}"
)
# Hosted Postgres often hands out postgres://, SQLAlchemy wants postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

RESET_DATABASE = os.getenv("RESET_DATABASE", "false").lower() == "true"

# ─── History ─────────────────────────────────────────────────────────────────
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "50"))

# ─── Daily Tasks ─────────────────────────────────────────────────────────────
DAILY_TASK_COUNT = 5
PRACTICE_TASKS_PER_DAY = 3
WEAK_TOPICS_FOR_PLAN = 3
FALLBACK_TOPIC = "General"

# ─── CORS ────────────────────────────────────────────────────────────────────
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

# ─── Logging ─────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ─── Server ──────────────────────────────────────────────────────────────────
HOST = os.getenv("HOST", "0.0.0.0")
VERSION = "1.0.0"


# ─── Variant Profiles ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class VariantProfile:
    """Everything that differs between the two products."""
    name: str
    title: str
    system_prompt: str
    model: str
    temperature: float
    max_tokens: Optional[int]
    port: int
    persistence: bool = True
    image_upload: bool = True
    word_list_format: bool = True


VARIANTS = {
    "doubt_solver": VariantProfile(
        name="doubt_solver",
        title="Doubt Solver",
        system_prompt=(
            "You are a friendly Indian school teacher helping students in classes 1-12. "
            "Explain concepts very clearly and step by step."
        ),
        model="llama-3.3-70b-versatile",
        temperature=0.4,
        max_tokens=None,
        port=5001,
    ),
    "decision_advisor": VariantProfile(
        name="decision_advisor",
        title="Decision Advisor",
        system_prompt="You are a calm, practical decision advisor.",
        model="llama-3.1-8b-instant",
        temperature=0.2,
        max_tokens=700,
        port=10000,
        persistence=False,
        image_upload=False,
    ),
}


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value.lower() == "true"


def load_profile(name: str = APP_VARIANT) -> VariantProfile:
    """Resolve a variant profile and apply environment overrides."""
    profile = VARIANTS.get(name)
    if profile is None:
        raise ValueError(f"Unknown APP_VARIANT: {name}")

    overrides = {}
    if os.getenv("LLM_MODEL"):
        overrides["model"] = os.getenv("LLM_MODEL")
    if os.getenv("LLM_TEMPERATURE"):
        overrides["temperature"] = float(os.getenv("LLM_TEMPERATURE"))
    if os.getenv("LLM_MAX_TOKENS"):
        overrides["max_tokens"] = int(os.getenv("LLM_MAX_TOKENS"))
    if os.getenv("PORT"):
        overrides["port"] = int(os.getenv("PORT"))

    for field_name, env_name in (
        ("persistence", "ENABLE_PERSISTENCE"),
        ("image_upload", "ENABLE_IMAGE_UPLOAD"),
        ("word_list_format", "ENABLE_WORD_LIST_FORMAT"),
    ):
        flag = _env_flag(env_name)
        if flag is not None:
            overrides[field_name] = flag

    return replace(profile, **overrides)
