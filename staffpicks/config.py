"""StaffPicks Backend — Configuration via pydantic-settings."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "staffpicks"

    # Session
    SESSION_SECRET: str = "change-me-to-a-long-random-string"
    SESSION_COOKIE_NAME: str = "staffpicks-session"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 2
    JWT_ALGORITHM: str = "HS256"

    # Login protection
    MAX_LOGIN_ATTEMPTS: int = 5
    LOCKOUT_DURATION_MINUTES: int = 15
    BCRYPT_ROUNDS: int = 12

    # Signup
    SIGNUP_RATE_LIMIT: int = 3
    SIGNUP_RATE_WINDOW_MINUTES: int = 15
    TRIAL_DAYS: int = 30

    # ISBNdb
    NEXT_ISBN_DB_KEY: str = ""
    ISBN_DB_URL: str = "https://api2.isbndb.com"

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "staffpicks/book-covers"

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
