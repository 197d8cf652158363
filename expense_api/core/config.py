# expense_api/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    # PostgreSQL from parts when a host is configured
    if os.getenv("DB_HOST"):
        from urllib.parse import quote_plus

        # URL-encode password to handle special characters like @ $ !
        password = quote_plus(os.getenv("DB_PASSWORD", ""))
        return (
            f"postgresql+psycopg2://{os.getenv('DB_USER')}:"
            f"{password}@"
            f"{os.getenv('DB_HOST')}:"
            f"{os.getenv('DB_PORT', '5432')}/"
            f"{os.getenv('DB_NAME')}"
            f"?sslmode={os.getenv('DB_SSLMODE', 'require')}"
        )

    return "sqlite:///./expenses.db"


class Settings:
    APP_NAME: str = os.getenv("APP_NAME", "Expense Reports API")
    ENV: str = os.getenv("ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # DB
    DATABASE_URL: str = _database_url()

    # AUTH
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
    )

    # FRONTEND
    CORS_ORIGINS: list = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173",
        ).split(",")
        if origin.strip()
    ]


settings = Settings()
