import os

from dotenv import load_dotenv

load_dotenv()

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_portal"),
}

# No API key means the connector answers with local placeholders.
ZENHR_CONFIG = {
    "base_url": os.getenv("ZENHR_API_URL", "https://api.zenhr.com/v1"),
    "api_key": os.getenv("ZENHR_API_KEY", ""),
    "timeout": float(os.getenv("ZENHR_TIMEOUT", "15")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the demo tenant on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
