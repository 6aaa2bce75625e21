import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invitations.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
    APP_BASE_URL = data.get("APP_BASE_URL", "http://localhost:3000")
    INVITATION_VALIDITY_DAYS = int(data.get("INVITATION_VALIDITY_DAYS", 7))
    INVITATION_RETENTION_DAYS = int(data.get("INVITATION_RETENTION_DAYS", 90))
    CODE_GENERATION_MAX_ATTEMPTS = int(data.get("CODE_GENERATION_MAX_ATTEMPTS", 5))
    CODE_GENERATION_BACKOFF_SECONDS = float(
        data.get("CODE_GENERATION_BACKOFF_SECONDS", 0.05)
    )
    NOTIFIER_TIMEOUT_SECONDS = float(data.get("NOTIFIER_TIMEOUT_SECONDS", 5))
