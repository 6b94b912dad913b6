import os

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost:5432")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "<PASSWORD>")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "postgres")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "prod")
    DEV_ADMIN_EMAIL: str = os.getenv("DEV_ADMIN_EMAIL", "ceo@example.com")
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "secret")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", 10))
    CRON_API_KEY: str = os.getenv("CRON_API_KEY", "")
    # Full SQLAlchemy URL; overrides the POSTGRES_* parts when set
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # "Today" and weekday names for tracking boards are computed in this zone
    BUSINESS_TIMEZONE: str = os.getenv("BUSINESS_TIMEZONE", "America/Sao_Paulo")
    NEW_CLIENT_DELAY_HOURS: int = int(os.getenv("NEW_CLIENT_DELAY_HOURS", 24))
    ONBOARDING_DELAY_DAYS: int = int(os.getenv("ONBOARDING_DELAY_DAYS", 5))
    COMERCIAL_TRACKING_START_DAY: str = os.getenv("COMERCIAL_TRACKING_START_DAY", "segunda")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        extra = "ignore"

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}/{self.POSTGRES_DB}"


# Module-level settings singleton
config = Config()
