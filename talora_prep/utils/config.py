"""
Configuration settings for the Talora interview preparation core.
"""
import os
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Base paths
BASE_DIR = Path(__file__).parent.parent.parent
SESSIONS_DIR = Path(os.environ.get("TALORA_SESSIONS_DIR", BASE_DIR / "interview_sessions"))

# LLM configuration
# A missing key is not fatal: every LLM call site has a deterministic fallback.
GROQ_API_KEY = os.environ.get("GROQ_API_KEY")
GROQ_MODEL_NAME = os.environ.get("GROQ_MODEL_NAME", "meta-llama/llama-4-scout-17b-16e-instruct")
GROQ_TEMPERATURE = 0.3
GROQ_TOP_P = 0.9
GROQ_MAX_TOKENS = 1024
GROQ_SEED = 1
LLM_TIMEOUT_SECONDS = float(os.environ.get("LLM_TIMEOUT_SECONDS", "20"))
LLM_MAX_RETRIES = 0  # fall through to heuristics instead of retrying

# Interview settings
DEFAULT_MAX_QUESTIONS = 6
MAX_QUESTIONS_LIMIT = 20
MAX_PENALTY = 20
DEFAULT_PENALTY = 10

# Readiness thresholds (score out of 100)
READY_THRESHOLD = 80
NEEDS_PRACTICE_THRESHOLD = 60

# LLM-adjusted overall score may move this far from the penalty-based score
ANALYSIS_SCORE_ADJUSTMENT = 10

# Heuristic evaluation
MIN_DETAILED_ANSWER_WORDS = 30  # "long" answer
SHORT_ANSWER_WORDS = 8  # below this an answer is "short"
MIN_KEYWORD_HITS = 2  # role-relevant keywords needed for a "correct" fallback
DONT_KNOW_MAX_CHARS = 50
MIN_ANSWER_CHARS = 5

# Penalties used by the heuristic path
PENALTY_CORRECT = 5
PENALTY_PARTIAL = 10
PENALTY_DONT_KNOW = 8
PENALTY_SHORT = 15
PENALTY_EMPTY = 20

# Transcript previews kept in logs / prompts
ANSWER_PROMPT_CHARS = 600
LOG_PREVIEW_CHARS = 60

# Mail configuration
SMTP_HOST = os.environ.get("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.environ.get("SMTP_PORT", "587"))
SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", True)
SMTP_TIMEOUT_SECONDS = float(os.environ.get("SMTP_TIMEOUT_SECONDS", "15"))
EMAIL_USER = os.environ.get("EMAIL_USER")
EMAIL_PASSWORD = os.environ.get("EMAIL_PASSWORD")
EMAIL_FROM_NAME = os.environ.get("EMAIL_FROM_NAME", "Talora Interview Prep")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FILE = os.environ.get("LOG_FILE")

# Resume handling
RESUME_PREVIEW_CHARS = 300
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
