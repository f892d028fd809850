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
    APP_NAME = data.get("APP_NAME", "Account Recovery")
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./recovery.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    RECOVERY_WINDOW_SECONDS = int(data.get("RECOVERY_WINDOW_SECONDS", 3600))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    NOTIFIER_BACKEND = data.get("NOTIFIER_BACKEND", "log")
    SENDGRID_API_KEY = data.get("SENDGRID_API_KEY", "")
    SENDGRID_FROM_EMAIL = data.get("SENDGRID_FROM_EMAIL", "noreply@example.com")
