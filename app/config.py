import os


def _flag(name, default="0"):
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    JSON_SORT_KEYS = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    ORDER_LIMIT_PER_IP = os.getenv("ORDER_LIMIT_PER_IP", "20 per hour")
    LOGIN_LIMIT_PER_IP = os.getenv("LOGIN_LIMIT_PER_IP", "10 per 30 minutes")
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-insecure-jwt-key")
    ACCESS_TOKEN_LIFETIME_MIN = int(os.getenv("ACCESS_TOKEN_LIFETIME_MIN", 15))
    REFRESH_TOKEN_LIFETIME_DAYS = int(os.getenv("REFRESH_TOKEN_LIFETIME_DAYS", 30))
    # Carries the guest session id for requests without a bearer token.
    SESSION_COOKIE_SAMESITE = "Lax"

    # Storefront
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
    ORDER_SCHEDULER = os.getenv("ORDER_SCHEDULER", "thread")
    ORDER_STATUS_INTERVAL_SECONDS = float(os.getenv("ORDER_STATUS_INTERVAL_SECONDS", 30))
    ESTIMATED_DELIVERY_MINUTES = int(os.getenv("ESTIMATED_DELIVERY_MINUTES", 60))
    FREE_DELIVERY_THRESHOLD = os.getenv("FREE_DELIVERY_THRESHOLD", "500")
    DELIVERY_FEE = os.getenv("DELIVERY_FEE", "40")
    ALLOW_CANCEL_DELIVERED = _flag("ALLOW_CANCEL_DELIVERED")
    CATALOG_PATH = os.getenv("CATALOG_PATH")
    NOTIFICATIONS_ENABLED = _flag("NOTIFICATIONS_ENABLED", "1")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///dev.db")


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    RATELIMIT_ENABLED = False
    STORAGE_BACKEND = "local"
    ORDER_SCHEDULER = "manual"
    CATALOG_PATH = None


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///grocio.db")

    @staticmethod
    def validate():
        missing = []
        if not os.getenv("SECRET_KEY"):
            missing.append("SECRET_KEY")
        if not os.getenv("JWT_SECRET"):
            missing.append("JWT_SECRET")
        if os.getenv("STORAGE_BACKEND", "local").lower() == "remote" and not os.getenv("DATABASE_URL"):
            missing.append("DATABASE_URL")
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )


def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
