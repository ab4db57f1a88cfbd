import os
import re


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def normalize_database_url(url: str) -> str:
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    url = re.sub(r'[?&]sslmode=[^&]*', '', url)
    return url.replace('?&', '?').rstrip('?')


DATABASE_URL = os.getenv("DATABASE_URL")
if DATABASE_URL:
    DATABASE_URL = normalize_database_url(DATABASE_URL)

DB_ECHO = _flag("DB_ECHO")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "frigorifico_session")
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "24"))
COOKIE_SECURE = _flag("COOKIE_SECURE")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

MASTER_EMAIL = os.getenv("MASTER_EMAIL", "admin@sistemadefrigorificos.com")
MASTER_PASSWORD = os.getenv("MASTER_PASSWORD", "admin123")
MASTER_NAME = os.getenv("MASTER_NAME", "Administrador")

DEBUG_SEED_ENABLED = _flag("DEBUG_SEED_ENABLED")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
