# Charity board configuration
# Override defaults via a YAML file (see config.example.yaml) or
# the CHARITYBOARD_CONFIG environment variable.

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Optional

from .errors import ConfigError

CONFIG_ENV = "CHARITYBOARD_CONFIG"
CONFIG_FILENAME = "charityboard.yaml"   # looked up in the working directory


@dataclass
class Config:
    """Runtime configuration for a charity board workspace."""

    # Admin portal credential (plaintext; demo only)
    admin_username: str = "admin"
    admin_password: str = "123"
    admin_display_name: str = "General Administration"

    # AI description generation
    ai_api_key_env: str = "API_KEY"
    ai_model: str = "gemini-2.5-flash"
    ai_endpoint: str = "https://generativelanguage.googleapis.com/v1beta/models"
    ai_timeout_secs: float = 10.0

    # Behavior
    strict_workflow: bool = False   # False = any column reachable from any column
    seed_data: bool = True

    log_level: str = "INFO"

    @property
    def ai_api_key(self) -> str:
        """Resolve the AI key from the environment at call time."""
        return os.environ.get(self.ai_api_key_env, "")

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML, falling back to defaults when no file exists."""
        if path is None:
            path = os.environ.get(CONFIG_ENV)
        cfg_path = Path(path) if path else Path.cwd() / CONFIG_FILENAME
        if not cfg_path.exists():
            if path:
                raise ConfigError(f"Config file not found: {cfg_path}")
            return cls()

        try:
            with open(cfg_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {cfg_path} must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
