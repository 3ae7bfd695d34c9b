import os
from dotenv import load_dotenv

load_dotenv()

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)

    MONGODB_URI = os.getenv("MONGODB_URI") or os.getenv("DATABASE_URL")
    MONGODB_DB = os.getenv("MONGODB_DB")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    MAX_CONTENT_LENGTH = 100 * 1024 * 1024

    DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))

    # Seed values for the system settings document
    SITE_NAME = os.getenv("SITE_NAME", "Flyover Admin")
    SITE_DESCRIPTION = os.getenv("SITE_DESCRIPTION", "Study abroad consultancy")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
    MAX_FILE_SIZE_MB = int(os.getenv("MAX_FILE_SIZE", "10"))
    ALLOWED_FILE_TYPES = os.getenv(
        "ALLOWED_FILE_TYPES",
        "image/jpeg,image/png,image/gif,image/webp,application/pdf",
    ).split(",")
    SMTP_HOST = os.getenv("SMTP_HOST", "")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER = os.getenv("SMTP_USER", "")

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

class ProductionConfig(BaseConfig):
    DEBUG = False

class TestingConfig(BaseConfig):
    TESTING = True
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    MONGODB_URI = "mongodb://localhost:27017/flyover_test"
    MONGODB_DB = "flyover_test"
    ADMIN_EMAIL = "admin@example.com"
    DEFAULT_PAGE_SIZE = 20

config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
