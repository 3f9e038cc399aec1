"""
Configuration for the Templa backend
Values come from environment variables, a local .env file is loaded first
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Backend configuration with environment variable support"""

    APP_NAME: str = "Templa"
    APP_VERSION: str = "1.0.0"

    # Generative AI
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    MODEL: str = os.getenv("TEMPLA_MODEL", "gemini-2.5-flash")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    REQUEST_TIMEOUT: int = int(os.getenv("TEMPLA_TIMEOUT", "120"))

    # Storage
    DATA_DIR: Path = Path(os.getenv("TEMPLA_DATA_DIR", "projects"))
    EXPORT_DIR: Path = Path(os.getenv("TEMPLA_EXPORT_DIR", "outputs"))

    # Server
    HOST: str = os.getenv("TEMPLA_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("TEMPLA_PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def validate(cls) -> bool:
        """Validate configuration"""
        errors = []

        if not cls.GEMINI_API_KEY:
            errors.append("GEMINI_API_KEY is not set")

        if cls.REQUEST_TIMEOUT <= 0:
            errors.append(f"TEMPLA_TIMEOUT must be positive, got {cls.REQUEST_TIMEOUT}")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors))

        return True

    @classmethod
    def display(cls) -> str:
        """Display configuration (for debugging), the api key is masked"""
        masked_key = f"{cls.GEMINI_API_KEY[:4]}..." if cls.GEMINI_API_KEY else "(not set)"
        return f"""
Templa Configuration
====================
Version: {cls.APP_VERSION}
Debug: {cls.DEBUG}

AI:
  Model: {cls.MODEL}
  Base URL: {cls.GEMINI_BASE_URL}
  API key: {masked_key}
  Timeout: {cls.REQUEST_TIMEOUT}s

Paths:
  Projects: {cls.DATA_DIR}
  Exports: {cls.EXPORT_DIR}
====================
"""
