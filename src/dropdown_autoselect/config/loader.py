"""
Config Loader - Build Settings from a YAML file, .env and the environment.

Lookup order for the YAML file:
1. The path passed to load_config() / ConfigLoader
2. The path in $DROPDOWN_AUTOSELECT_CONFIG
3. dropdown-autoselect.yaml / .yml in the working directory
4. ~/.config/dropdown-autoselect/config.yaml

Environment variables (DROPDOWN_AUTOSELECT__SECTION__KEY) fill in what the
file leaves unset; explicit overrides win over both.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from dropdown_autoselect.config.settings import Settings
from dropdown_autoselect.exceptions import ConfigurationError

CONFIG_ENV_VAR = "DROPDOWN_AUTOSELECT_CONFIG"

CONFIG_FILENAMES = ("dropdown-autoselect.yaml", "dropdown-autoselect.yml")

USER_CONFIG_PATH = Path.home() / ".config" / "dropdown-autoselect" / "config.yaml"


class ConfigLoader:
    """
    Locate and read the settings file, then layer env and overrides on top.

    Example:
        >>> settings = ConfigLoader("report.yaml").load()
        >>> settings.selection.target_control
        'region'
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else None

    def find_config_file(self) -> Optional[Path]:
        """
        Resolve the YAML file to read.

        Raises:
            ConfigurationError: If an explicitly requested file is missing
        """
        explicit = self.config_path or (
            Path(os.environ[CONFIG_ENV_VAR]) if os.environ.get(CONFIG_ENV_VAR) else None
        )
        if explicit is not None:
            if not explicit.is_file():
                raise ConfigurationError("Config file not found", {"path": str(explicit)})
            return explicit

        for candidate in [Path(name) for name in CONFIG_FILENAMES] + [USER_CONFIG_PATH]:
            if candidate.is_file():
                return candidate
        return None

    def read_file(self, path: Path) -> Dict[str, Any]:
        """
        Parse a settings file; an empty file means no settings.

        Raises:
            ConfigurationError: On invalid YAML or a non-mapping document
        """
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}", {"error": str(e)})

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{path} must contain a mapping of sections", {"found": type(data).__name__}
            )
        return data

    def load(
        self,
        env_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Settings:
        """
        Load settings from all sources.

        Args:
            env_file: .env file to load (defaults to ./.env when present)
            overrides: Nested values applied last
        """
        dotenv_path = Path(env_file) if env_file else Path(".env")
        if dotenv_path.is_file():
            load_dotenv(dotenv_path)

        config_file = self.find_config_file()
        file_values = self.read_file(config_file) if config_file else {}

        # Env vars are applied by pydantic-settings during construction
        settings = Settings(**file_values)
        return settings.merge_with(overrides) if overrides else settings


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> Settings:
    """
    Load settings in one call.

    Example:
        >>> settings = load_config(selection={"target_control": "region"})
    """
    return ConfigLoader(config_path).load(env_file=env_file, overrides=overrides or None)
