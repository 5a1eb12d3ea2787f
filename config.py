"""
Configuration for the Interview Assistant.
Centralizes environment variables, logging setup, and constants.
"""
import os
import logging
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent

# Load .env file for local development
load_dotenv(PROJECT_ROOT / ".env")

# ============================================================================
# Evaluator Configuration
# ============================================================================

ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY")

# "ai" uses the hosted LLM with heuristic fallback, "heuristic" is fully local
EVALUATOR_MODE = os.environ.get("EVALUATOR_MODE", "ai" if ANTHROPIC_API_KEY else "heuristic")

LLM_MODEL = os.environ.get("LLM_MODEL", "claude-sonnet-4-20250514")
LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.3"))
LLM_MAX_TOKENS = int(os.environ.get("LLM_MAX_TOKENS", "2048"))

# ============================================================================
# Storage Configuration
# ============================================================================

STORAGE_PATH = Path(
    os.environ.get("STORAGE_PATH", str(PROJECT_ROOT / ".interview_assistant" / "storage.json"))
)

# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# ============================================================================
# Application Constants
# ============================================================================

# Uploads larger than this are rejected before any parsing
MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# Number of questions per interview
QUESTION_COUNT = int(os.environ.get("QUESTION_COUNT", "6"))

# Topic used when no technology keywords are found in the resume
DEFAULT_TOPIC = "General Software Development"

# Browser origins allowed to call the API (comma separated)
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000",
    ).split(",")
    if origin.strip()
]
