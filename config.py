import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./raffle_desk.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    CACHE_BACKEND = data.get("CACHE_BACKEND", "redis")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", 1))

    # Sessions and passwords
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    SESSION_TTL_HOURS = int(data.get("SESSION_TTL_HOURS", 12))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    MIN_PASSWORD_LENGTH = int(data.get("MIN_PASSWORD_LENGTH", 6))

    # Staff account lifecycle
    DEFAULT_VALIDITY_DAYS = int(data.get("DEFAULT_VALIDITY_DAYS", 30))
    OTP_TTL_MINUTES = int(data.get("OTP_TTL_MINUTES", 10))
    MAX_OTP_ATTEMPTS = int(data.get("MAX_OTP_ATTEMPTS", 5))
    REDIRECT_TIMEZONE = data.get("REDIRECT_TIMEZONE", "UTC")

    # Requests allowed per window, per (identity, action class)
    RATE_LIMITS = data.get(
        "RATE_LIMITS",
        {
            "read": {"requests": 100, "window_seconds": 60},
            "write": {"requests": 30, "window_seconds": 60},
            "search": {"requests": 20, "window_seconds": 60},
            "auth": {"requests": 10, "window_seconds": 60},
        },
    )

    # Outbound mail
    SMTP_HOST = data.get("SMTP_HOST", "")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USER = data.get("SMTP_USER", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", True))
    MAIL_FROM = data.get("MAIL_FROM", "")
    ORGANIZATION_NAME = data.get("ORGANIZATION_NAME", "Charity Raffle")

    # Timeouts (seconds)
    STORE_TIMEOUT_SECONDS = float(data.get("STORE_TIMEOUT_SECONDS", 10))
    REDIS_SOCKET_TIMEOUT = float(data.get("REDIS_SOCKET_TIMEOUT", 5))
    MAIL_TIMEOUT_SECONDS = float(data.get("MAIL_TIMEOUT_SECONDS", 10))
    REQUEST_TIMEOUT_SECONDS = float(data.get("REQUEST_TIMEOUT_SECONDS", 30))

    MAX_TICKETS_PER_BATCH = int(data.get("MAX_TICKETS_PER_BATCH", 5000))
