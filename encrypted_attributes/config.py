import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./encrypted_attributes.db")
    ENCRYPTION_KEY: str = os.getenv("ENCRYPTION_KEY", "")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")


settings = Settings()


def current_environment() -> str:
    """Name of the deployment environment new envelopes are labelled with."""
    return settings.ENVIRONMENT
