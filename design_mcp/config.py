"""
Configuration

Process settings come from environment variables, with a local ``.env`` file
merged in by python-dotenv. The registry catalog is described by a JSON file:

    {
      "registries": [
        {
          "name": "...",
          "installCommand": "...",
          "description": "...",
          "useCases": ["..."],
          "components": {
            "basePath": "...",
            "componentDir": "...",
            "componentSubDirs": ["..."],
            "componentFileExtensions": [".md"],
            "storiesDir": "...",
            "storiesSubDirs": ["..."],
            "storiesFileExtensions": [".stories.tsx"]
          }
        }
      ]
    }
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from .catalog.types import RegistryConfig

logger = logging.getLogger(__name__)

DEFAULT_REGISTRIES_CONFIG = "config/registries.json"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigurationError(Exception):
    """Raised when the startup configuration cannot be used."""
    pass


@dataclass
class Settings:
    """Runtime settings of the MCP server."""
    registries_config: Path
    workspace_root: Path
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


def load_settings(dotenv: bool = True) -> Settings:
    """Build Settings from the environment (and ``.env`` when ``dotenv`` is set)."""
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    workspace_root = Path(os.getenv("WORKSPACE_ROOT") or Path.cwd())
    registries_config = Path(os.getenv("REGISTRIES_CONFIG", DEFAULT_REGISTRIES_CONFIG))
    if not registries_config.is_absolute():
        registries_config = workspace_root / registries_config

    port = os.getenv("MCP_PORT", "8000")
    try:
        port = int(port)
    except ValueError:
        raise ConfigurationError(f"MCP_PORT must be an integer, got: {port!r}")

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got: {log_level!r}")

    return Settings(
        registries_config=registries_config,
        workspace_root=workspace_root,
        host=os.getenv("MCP_HOST", "0.0.0.0"),
        port=port,
        log_level=log_level,
    )


def load_registries_config(path: Union[str, Path]) -> List[RegistryConfig]:
    """
    Load the registry definitions from a JSON file.

    Returns an empty list (and logs a warning) if the file is missing or
    defines no registries.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid JSON or
            holds an invalid registry entry
    """
    path = Path(path)

    if not path.exists():
        logger.warning(f"Registry configuration not found: {path}")
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Invalid JSON in registry configuration {path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to read registry configuration {path}: {e}")

    entries = data.get("registries") if isinstance(data, dict) else None
    if not entries:
        logger.warning(f"No registries defined in {path}")
        return []
    if not isinstance(entries, list):
        raise ConfigurationError(f"'registries' in {path} must be a list")

    registries: List[RegistryConfig] = []
    for index, entry in enumerate(entries):
        try:
            registries.append(RegistryConfig.model_validate(entry))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid registry #{index} in {path}: {e}")

    logger.info(f"Loaded {len(registries)} registry definitions from {path}")
    return registries
