"""Environment-driven configuration for the exit interview service."""

import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./interviews.db")

# Transcripts, documentation records and PDF reports live here.
INTERVIEWS_DIR = os.getenv("INTERVIEWS_DIR", os.path.join(os.getcwd(), "interviews"))

# Any OpenAI-compatible endpoint works (OpenAI, OpenRouter, a local gateway).
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4")

LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.3"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "1500"))
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

# Optional vendor-side transcript API; unset means the source is skipped.
TRANSCRIPT_SERVICE_URL = os.getenv("TRANSCRIPT_SERVICE_URL", "")
TRANSCRIPT_SERVICE_API_KEY = os.getenv("TRANSCRIPT_SERVICE_API_KEY", "")
TRANSCRIPT_SERVICE_TIMEOUT_SECONDS = float(os.getenv("TRANSCRIPT_SERVICE_TIMEOUT_SECONDS", "15"))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")
