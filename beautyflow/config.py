import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./beautyflow.db")

# Sessions - bearer tokens issued on login
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "12"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Seed the BOSS account, sample staff and sample clients on first start
SEED_DEFAULT_DATA = os.getenv("SEED_DEFAULT_DATA", "true").lower() == "true"
BOSS_USERNAME = os.getenv("BOSS_USERNAME", "BOSS")
BOSS_PASSWORD = os.getenv("BOSS_PASSWORD")
if not BOSS_PASSWORD:
    import warnings

    warnings.warn(
        "BOSS_PASSWORD not set! Using insecure default - DO NOT USE IN PRODUCTION",
        RuntimeWarning,
        stacklevel=2,
    )
    BOSS_PASSWORD = "teste"  # noqa: S105 - Dev fallback only

# Password given to the sample staff accounts created by the seed
SEED_STAFF_PASSWORD = os.getenv("SEED_STAFF_PASSWORD", "123")

# Studio working window used by the slot availability calculator
WORKDAY_START = os.getenv("WORKDAY_START", "08:00")
WORKDAY_END = os.getenv("WORKDAY_END", "18:00")
SLOT_INTERVAL_MINUTES = int(os.getenv("SLOT_INTERVAL_MINUTES", "30"))

# Inactivity / birthday windows (days)
INACTIVITY_DAYS = int(os.getenv("INACTIVITY_DAYS", "60"))
BIRTHDAY_WINDOW_DAYS = int(os.getenv("BIRTHDAY_WINDOW_DAYS", "30"))

# Gemini text generation (marketing copy)
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)

# Daily AI generations allowed per user and category
AI_DAILY_LIMIT = int(os.getenv("AI_DAILY_LIMIT", "10"))

# Redis for usage counters (optional - falls back to in-process memory)
REDIS_URL = os.getenv("REDIS_URL")

# Frontend origins allowed by CORS
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000"
).split(",")
