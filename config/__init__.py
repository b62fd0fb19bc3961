"""Runtime configuration for ClaimGuard."""

from .env_config import Config, config, get_config

__all__ = ["Config", "config", "get_config"]
