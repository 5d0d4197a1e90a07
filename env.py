import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# Environment variables for ProductInsight API
PORT = int(os.getenv("PORT", 5000))
HOST = os.getenv("HOST", "0.0.0.0")

# Gemini key, GOOGLE_AI_API_KEY is accepted as a fallback name
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_AI_API_KEY")
LLM_MODEL_NAME = os.getenv("LLM_MODEL_NAME", "gemini-2.5-pro")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", 0.2))

# Upload limits
MAX_UPLOAD_FILES = int(os.getenv("MAX_UPLOAD_FILES", 10))
MAX_FILE_SIZE_MB = int(os.getenv("MAX_FILE_SIZE_MB", 10))
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024

# app settings
PARALLEL_RATE_LIMIT = int(os.getenv("PARALLEL_RATE_LIMIT", 4))

# optional db url, products are kept in memory when not set
DATABASE_URL = os.getenv("DATABASE_URL", None)

# logging
LOG_FILE = os.getenv("LOG_FILE", "product_insight.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# langsmith keys optional
LANGSMITH_TRACING = os.getenv("LANGSMITH_TRACING", "false")
LANGSMITH_ENDPOINT = os.getenv("LANGSMITH_ENDPOINT", "https://api.smith.langchain.com")
LANGSMITH_API_KEY = os.getenv("LANGSMITH_API_KEY", None)
LANGSMITH_PROJECT = os.getenv("LANGSMITH_PROJECT", None)

# Required Environment Variables, reported at startup if not set
required_env_vars = {
    "GEMINI_API_KEY": GEMINI_API_KEY,
}


def missing_env_vars() -> list[str]:
    return [name for name, value in required_env_vars.items() if not value]
