"""
Application configuration and environment variables
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment ('1', 'true', 'yes', 'on')"""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables"""

    # Database
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

    # Local day boundary
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "America/Los_Angeles")

    # Confirmation window (clock hours, end exclusive, 24 = midnight)
    CONFIRMATION_WINDOW_START_HOUR: int = int(os.getenv("CONFIRMATION_WINDOW_START_HOUR", "23"))
    CONFIRMATION_WINDOW_END_HOUR: int = int(os.getenv("CONFIRMATION_WINDOW_END_HOUR", "24"))
    ENFORCE_CONFIRMATION_WINDOW: bool = _get_bool("ENFORCE_CONFIRMATION_WINDOW", False)

    # Build habit penalties: 'additive' or 'doubling'
    PENALTY_STACKING: str = os.getenv("PENALTY_STACKING", "additive")

    # Day roll-over job
    SCHEDULER_ENABLED: bool = _get_bool("SCHEDULER_ENABLED", True)
    ROLLOVER_HOUR: int = int(os.getenv("ROLLOVER_HOUR", "0"))
    ROLLOVER_MINUTE: int = int(os.getenv("ROLLOVER_MINUTE", "5"))

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)


# Create a global settings instance
settings = Settings()
