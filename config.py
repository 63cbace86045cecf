import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

def get_env_var(name: str) -> str:
    """Get environment variable or raise a clear error if missing."""
    value = os.getenv(name)
    if not value:
        raise RuntimeError(
            f"❌ Missing required environment variable: {name}\n"
            f"👉 Did you copy .env.example to .env and fill in your keys?"
        )
    return value

# Optional vars (with defaults)
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
PORT = int(os.getenv("PORT", "8000"))

# Without a database the chat endpoint is disabled (503)
DATABASE_URL = os.getenv("DATABASE_URL")

# Gemini (GOOGLE_API_KEY is read when the model is built)
GEMINI_MODEL_NAME = os.getenv("GEMINI_MODEL_NAME", "gemini-1.5-flash")

# Classification favours determinism, replies favour fluency
CLASSIFIER_TEMPERATURE = float(os.getenv("CLASSIFIER_TEMPERATURE", "0.1"))
CLASSIFIER_TOP_P = float(os.getenv("CLASSIFIER_TOP_P", "0.9"))
CLASSIFIER_TIMEOUT_SECONDS = float(os.getenv("CLASSIFIER_TIMEOUT_SECONDS", "30"))

REPLY_TEMPERATURE = float(os.getenv("REPLY_TEMPERATURE", "0.7"))
REPLY_TOP_P = float(os.getenv("REPLY_TOP_P", "0.9"))
REPLY_TIMEOUT_SECONDS = float(os.getenv("REPLY_TIMEOUT_SECONDS", "120"))

# Staged cart/wishlist changes expire after this many seconds
PENDING_ACTION_TTL_SECONDS = int(os.getenv("PENDING_ACTION_TTL_SECONDS", "300"))
