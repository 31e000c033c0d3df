from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


# Load backend/.env if it exists so local environment variables (e.g. CAPTCHA_SECRET_KEY)
# are available without needing to export them manually.
BASE_DIR = Path(__file__).resolve().parents[2]
env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)


def _float_env(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except Exception:
        return default


def _int_env(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except Exception:
        return default


def _bool_env(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


class Settings:
    PROJECT_NAME = os.getenv("PROJECT_NAME", "Contact Intake API")
    API_V1_STR = "/api"

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./contactos.db")

    _cors_origins = os.getenv("CORS_ORIGINS", "*")

    # If wildcard is present, treat as allow-all for local development
    if "*" in _cors_origins:
        CORS_ORIGINS = ["*"]
    else:
        CORS_ORIGINS = [o.strip() for o in _cors_origins.split(",") if o.strip()]

    CAPTCHA_ENABLED = _bool_env("CAPTCHA_ENABLED", True)
    CAPTCHA_SECRET_KEY = os.getenv("CAPTCHA_SECRET_KEY", "")
    CAPTCHA_VERIFY_URL = os.getenv(
        "CAPTCHA_VERIFY_URL",
        "https://challenges.cloudflare.com/turnstile/v0/siteverify",
    )
    CAPTCHA_TIMEOUT_SECONDS = _float_env("CAPTCHA_TIMEOUT_SECONDS", 5.0)

    WEBHOOK_URL = os.getenv("WEBHOOK_URL", "")
    WEBHOOK_TIMEOUT_SECONDS = _float_env("WEBHOOK_TIMEOUT_SECONDS", 5.0)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = _int_env("PORT", 3000)


settings = Settings()
