# TaskBoard: configuration
# Defaults, overridden by taskboard.yaml, overridden by TASKBOARD_* env vars.

import logging
import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

CONFIG_FILE = "taskboard.yaml"

ENV_OVERRIDES = {
    "TASKBOARD_DB": "db_path",
    "TASKBOARD_API_URL": "api_url",
    "TASKBOARD_API_SECRET": "api_secret",
    "TASKBOARD_LOG_LEVEL": "log_level",
}

LOG_FORMAT = "%(asctime)s [taskboard] %(levelname)s: %(message)s"


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""
    pass


@dataclass
class Settings:
    """Runtime configuration shared by the server, the client and the seed script."""

    # Store
    db_path: str = "~/.local/share/taskboard/tasks.db"

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    api_secret: str = ""   # empty = mutating routes are open

    # Client
    api_url: str = "http://localhost:3000"
    timeout: float = 5.0

    log_level: str = "INFO"

    def resolve_paths(self):
        """Expand ~ in the database path."""
        self.db_path = str(Path(self.db_path).expanduser())

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Settings":
        """
        Load settings from YAML, then apply environment overrides.

        A missing default file is fine; an explicitly named file that is
        missing or unparsable raises ConfigError.
        """
        cfg_path = Path(path) if path else Path.cwd() / CONFIG_FILE
        data = {}
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Config {cfg_path} must be a mapping, got {type(data).__name__}")
        elif path:
            raise ConfigError(f"Config file not found: {cfg_path}")

        known = {f.name for f in fields(cls)}
        cfg = cls(**{k: v for k, v in data.items() if k in known})

        for env_name, attr in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                setattr(cfg, attr, value)

        try:
            cfg.port = int(cfg.port)
            cfg.timeout = float(cfg.timeout)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

        cfg.resolve_paths()
        return cfg


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging to stdout for the CLI entry points."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
