"""Application configuration and settings."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./db/geotrace.db")

    # Application Configuration
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Geometry Configuration
    DEFAULT_TOLERANCE: float = float(os.getenv("DEFAULT_TOLERANCE", "0.0001"))
    WKB_BYTE_ORDER: str = os.getenv("WKB_BYTE_ORDER", "little")

    # API Configuration
    API_V1_PREFIX: str = "/api"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"


settings = Settings()
