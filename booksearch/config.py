"""Configuration management."""
import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    """
    Read a float setting that may be left unset.

    Args:
        name: Environment variable name

    Returns:
        The parsed value, or None when unset or empty
    """
    value = os.getenv(name)
    return float(value) if value else None


class Config:
    """Application configuration."""

    # Backend
    API_URL = os.getenv("BOOK_SEARCH_API_URL", "http://localhost:8000")

    # One-shot CLI requests
    DEFAULT_TIMEOUT = int(os.getenv("DEFAULT_TIMEOUT", "10"))
    DEFAULT_MAX_RETRIES = int(os.getenv("DEFAULT_MAX_RETRIES", "3"))

    # Interactive session requests never time out unless configured
    SESSION_TIMEOUT = _optional_float("SESSION_TIMEOUT")

    @property
    def api_url(self) -> str:
        """Backend base URL without a trailing slash."""
        return self.API_URL.rstrip("/")
