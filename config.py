"""
Configuration management for the Humanizer API.

Loads environment variables from .env file and provides typed access to
application-level configuration. Backend selection (provider, OTP store,
email) lives in infra.config.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for the Humanizer API."""

    # Server
    PORT = int(os.getenv("PORT", "6000"))
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Rate limiting (per client address, fixed window)
    RATE_LIMIT_MAX = int(os.getenv("RATE_LIMIT_MAX", "15"))
    RATE_LIMIT_WINDOW_S = float(os.getenv("RATE_LIMIT_WINDOW_S", "60"))

    # Input limits
    MAX_TEXT_CHARS = 5000

    @classmethod
    def validate(cls) -> bool:
        """Validate application-level settings."""
        return cls.RATE_LIMIT_MAX > 0 and cls.RATE_LIMIT_WINDOW_S > 0


if __name__ == "__main__":
    print("Configuration loaded:")
    print(f"  Port: {Config.PORT}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"  Rate limit: {Config.RATE_LIMIT_MAX} / {Config.RATE_LIMIT_WINDOW_S}s")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
