import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored beside the code as clinic.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "clinic.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Which store implementation backs the booking engine: "sql" or "memory"
    STORE_BACKEND = os.getenv("STORE_BACKEND", "sql")

    # Create tables on startup instead of running migrations (demo/test only)
    AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "false").lower() == "true"

    # Seed the launch catalog (services, professionals) when empty
    SEED_DEMO_CATALOG = os.getenv("SEED_DEMO_CATALOG", "false").lower() == "true"

    # Daily slot grid; the 11:00-13:00 gap is lunch
    SLOT_GRID = os.getenv("SLOT_GRID", "09:00,10:00,11:00,13:00,14:00,15:00,16:00,17:00")

    # How many days ahead (including today) the booking flow offers
    BOOKING_WINDOW_DAYS = int(os.getenv("BOOKING_WINDOW_DAYS", "14"))

    DEFAULT_HERO_IMAGE_URL = os.getenv(
        "DEFAULT_HERO_IMAGE_URL",
        "https://images.unsplash.com/photo-1629909613654-28e377c37b09?auto=format&fit=crop&q=80&w=2068",
    )

    # Session cookie name for the admin auth token
    AUTH_COOKIE_NAME = "clinic_admin_session"

    # 8 hours session lifetime
    SESSION_LIFETIME_SECONDS = 8 * 60 * 60

    # Idle timeout: 30 minutes
    IDLE_TIMEOUT_SECONDS = 30 * 60

    # Session/cookie security defaults
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

    # bcrypt work factor for admin passwords
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Optional first admin, created at startup if missing
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Basic app settings
    DEBUG = False


class TestConfig(Config):
    __test__ = False  # not a pytest class

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    STORE_BACKEND = "sql"
    AUTO_CREATE_TABLES = True
    SEED_DEMO_CATALOG = False
    SLOT_GRID = "09:00,10:00,11:00,13:00,14:00,15:00,16:00,17:00"
    BOOKING_WINDOW_DAYS = 14
    ADMIN_EMAIL = None
    ADMIN_PASSWORD = None
    BCRYPT_ROUNDS = 4
