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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Credential hashing
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 10))

    # Password reset
    RESET_TOKEN_TTL_SECONDS = int(data.get("RESET_TOKEN_TTL_SECONDS", 3600))
    APP_BASE_URL = data.get("APP_BASE_URL", "http://localhost:3000")
    LOGIN_PATH = data.get("LOGIN_PATH", "/login")

    # Outbound mail (empty key keeps mail in the in-memory outbox)
    RESEND_API_KEY = data.get("RESEND_API_KEY", "")
    RESEND_API_URL = data.get("RESEND_API_URL", "https://api.resend.com/emails")
    MAIL_FROM = data.get("MAIL_FROM", "onboarding@resend.dev")
    DISPATCH_TIMEOUT_SECONDS = float(data.get("DISPATCH_TIMEOUT_SECONDS", 10))
    DISPATCH_MAX_ATTEMPTS = int(data.get("DISPATCH_MAX_ATTEMPTS", 3))
    DISPATCH_BACKOFF_SECONDS = float(data.get("DISPATCH_BACKOFF_SECONDS", 0.5))
