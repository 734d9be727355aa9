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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    CACHE_BACKEND = data.get("CACHE_BACKEND", "redis")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    APP_BASE_URL = data.get("APP_BASE_URL", "http://localhost:3001")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "session_token")
    API_KEY_PREFIX = data.get("API_KEY_PREFIX", "sk_live")
    API_KEY_HASH_ROUNDS = int(data.get("API_KEY_HASH_ROUNDS", 10))
    STRIPE_SECRET_KEY = data.get("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET = data.get("STRIPE_WEBHOOK_SECRET", "whsec_test")
    STRIPE_WEBHOOK_TOLERANCE = int(data.get("STRIPE_WEBHOOK_TOLERANCE", 300))
    STRIPE_BASIC_PRICE_ID = data.get("STRIPE_BASIC_PRICE_ID")
    STRIPE_PRO_PRICE_ID = data.get("STRIPE_PRO_PRICE_ID")
