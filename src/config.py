import os

APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SECRET = os.getenv("SECRET", "change-me")
JWT_LIFETIME_SECONDS = int(os.getenv("JWT_LIFETIME_SECONDS", "86400"))
USER_PASSWORD_MIN_LENGTH = int(os.getenv("USER_PASSWORD_MIN_LENGTH", "6"))

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASS = os.getenv("DB_PASS", "postgres")
DB_NAME = os.getenv("DB_NAME", "shortlinks")
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", "")
BROKER_URL = os.getenv(
    "BROKER_URL",
    f"redis://default:{REDIS_PASSWORD}@{REDIS_HOST}:{REDIS_PORT}/0" if REDIS_PASSWORD
    else f"redis://{REDIS_HOST}:{REDIS_PORT}/0",
)

SHORT_CODE_LENGTH = int(os.getenv("SHORT_CODE_LENGTH", "8"))
LINK_PASSWORD_LENGTH = int(os.getenv("LINK_PASSWORD_LENGTH", "8"))

# Anonymous links older than this are purged by the nightly cleanup
ANONYMOUS_LINK_RETENTION_DAYS = int(os.getenv("ANONYMOUS_LINK_RETENTION_DAYS", "7"))
CLEANUP_HOUR = int(os.getenv("CLEANUP_HOUR", "3"))
CLEANUP_MINUTE = int(os.getenv("CLEANUP_MINUTE", "0"))

PORTAL_TIMEZONE = os.getenv("PORTAL_TIMEZONE", "America/Sao_Paulo")
