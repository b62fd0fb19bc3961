"""
Environment Configuration Module for ClaimGuard

This module handles loading environment variables from .env files
and provides default values for all configuration options.
"""

import os
from pathlib import Path
from typing import List, Optional

import structlog
from dotenv import load_dotenv

logger = structlog.get_logger(__name__)

_TRUTHY = ("true", "1", "yes", "on")


class Config:
    """Configuration class that loads from .env files with fallbacks"""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration by loading from .env file

        Args:
            env_file: Path to .env file (defaults to .env in project root)
        """
        project_root = Path(__file__).parent.parent

        if env_file:
            env_path = Path(env_file)
        else:
            env_path = project_root / ".env"

        # Variables already set in the environment take precedence
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug("Loaded environment file", path=str(env_path))
        else:
            logger.debug("No .env file found, using environment variables only", path=str(env_path))

    @property
    def host(self) -> str:
        """Get server host"""
        return os.getenv("HOST", "0.0.0.0")

    @property
    def port(self) -> int:
        """Get server port"""
        return int(os.getenv("PORT", "8001"))

    @property
    def debug(self) -> bool:
        """Get debug mode"""
        return os.getenv("DEBUG", "false").lower() in _TRUTHY

    @property
    def log_level(self) -> str:
        """Get log level"""
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def log_json(self) -> bool:
        """Render logs as JSON (console output otherwise)"""
        return os.getenv("LOG_JSON", "true").lower() in _TRUTHY

    @property
    def cors_origins(self) -> List[str]:
        """Allowed CORS origins"""
        origins = os.getenv("CORS_ORIGINS", "*")
        return [origin.strip() for origin in origins.split(",") if origin.strip()]


# Global config instance
config = Config()


def get_config(env_file: Optional[str] = None) -> Config:
    """
    Get configuration instance

    Args:
        env_file: Optional path to specific .env file

    Returns:
        Config instance
    """
    if env_file:
        return Config(env_file)
    return config
