"""Configuration — loads environment variables with sensible defaults.

All tunables live here. Override via .env file or environment variables.
No hardcoded thresholds/timings elsewhere in the codebase.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

def _env(key: str, default: str = "") -> str:
    return os.getenv(key, default)

def _env_int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))

def _env_float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


# ═══════════════════════════════════════════════════════════════════════════
# Reflection — text generation model
# ═══════════════════════════════════════════════════════════════════════════
# REFLECTION_PROVIDER tells the framework which SDK to use:
#   "anthropic"    — Anthropic SDK (default)
#   "openai"       — OpenAI SDK (also works with DeepSeek, Ollama, Groq, etc.)
#   "azure_openai" — Azure OpenAI SDK

REFLECTION_PROVIDER = _env("REFLECTION_PROVIDER", "anthropic")
REFLECTION_API_KEY = _env("REFLECTION_API_KEY")
REFLECTION_MODEL = _env("REFLECTION_MODEL", "claude-3-5-sonnet-20241022")
REFLECTION_BASE_URL = _env("REFLECTION_BASE_URL")    # optional custom endpoint

AZURE_API_VERSION = _env("AZURE_API_VERSION", "2024-12-01-preview")

REFLECTION_TIMEOUT_SECONDS = _env_float("REFLECTION_TIMEOUT_SECONDS", 5.0)
REFLECTION_MAX_TOKENS = _env_int("REFLECTION_MAX_TOKENS", 500)
REFLECTION_TEMPERATURE = _env_float("REFLECTION_TEMPERATURE", 0.7)
REFLECTION_CACHE_TTL_MINUTES = _env_int("REFLECTION_CACHE_TTL_MINUTES", 60)
REFLECTION_CACHE_MAX_ENTRIES = _env_int("REFLECTION_CACHE_MAX_ENTRIES", 256)
PROMPT_PERSONA_SECTION = _env("PROMPT_PERSONA_SECTION", "Reflection")  # heading in prompts/personality.md

# ═══════════════════════════════════════════════════════════════════════════
# Analytics
# ═══════════════════════════════════════════════════════════════════════════

NOTES_MIN_ENTRIES = _env_int("NOTES_MIN_ENTRIES", 7)         # notes needed before analysis
KEYWORD_LIMIT = _env_int("KEYWORD_LIMIT", 5)
OBSERVATION_MIN_NOTES = _env_int("OBSERVATION_MIN_NOTES", 3)  # per habit, last 30 days
MAX_OBSERVATIONS = _env_int("MAX_OBSERVATIONS", 3)
NOTE_MAX_CHARS = _env_int("NOTE_MAX_CHARS", 1000)             # reflection note truncation

# ═══════════════════════════════════════════════════════════════════════════
# Ingestion limits
# ═══════════════════════════════════════════════════════════════════════════

MAX_PAST_DAYS = _env_int("MAX_PAST_DAYS", 5)
HABIT_NAME_MAX_CHARS = _env_int("HABIT_NAME_MAX_CHARS", 100)
CATEGORY_MAX_CHARS = _env_int("CATEGORY_MAX_CHARS", 50)
LOG_NOTES_MAX_CHARS = _env_int("LOG_NOTES_MAX_CHARS", 5000)

# ═══════════════════════════════════════════════════════════════════════════
# Database
# ═══════════════════════════════════════════════════════════════════════════

DB_PATH = Path(_env("AMARADAY_DB_PATH") or _PROJECT_ROOT / "data" / "amaraday.db")

# ═══════════════════════════════════════════════════════════════════════════
# Timezone (default UTC, override for your locale in .env)
# ═══════════════════════════════════════════════════════════════════════════

TIMEZONE_OFFSET_HOURS = _env_int("TIMEZONE_OFFSET_HOURS", 0)
