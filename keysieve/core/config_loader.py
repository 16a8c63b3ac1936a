"""Loader for keysieve.yaml filter profiles."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog
import yaml

from .config import FilterConfig

logger = structlog.get_logger(__name__)

CONFIG_FILE_NAME = "keysieve.yaml"


class ConfigLoader:
    """Handles loading and parsing of keysieve.yaml profile files.

    The file holds named filter profiles::

        profiles:
          logs:
            filters: [password, token]
            regex_filters: ["(?i)secret"]
            filter_type: exclude
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize config loader.

        Args:
            config_path: Path to keysieve.yaml file. If None, looks in current
                directory and parent directories.
        """
        self.config_path = self._find_config_file(config_path)
        self._config: Optional[Dict[str, Any]] = None

    def _find_config_file(
        self, config_path: Optional[Union[str, Path]] = None
    ) -> Optional[Path]:
        if config_path is not None:
            path = Path(config_path)
            if path.exists():
                return path
            return None

        current = Path.cwd()
        for directory in (current, *current.parents):
            candidate = directory / CONFIG_FILE_NAME
            if candidate.exists():
                return candidate
        return None

    def load(self) -> Dict[str, Any]:
        """Load the configuration file.

        Returns:
            Parsed configuration dictionary, or empty dict if no config file.

        Raises:
            ValueError: If the config file is invalid YAML.
        """
        if self.config_path is None:
            return {}

        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(
                f"Invalid {CONFIG_FILE_NAME} at {self.config_path}: {e}"
            ) from e
        except OSError as e:
            logger.warning("config_read_failed", path=str(self.config_path), error=str(e))
            return {}

        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid {CONFIG_FILE_NAME} at {self.config_path}: expected a mapping"
            )
        self._config = data
        return self._config

    def _profiles(self) -> Dict[str, Any]:
        profiles = self.load().get("profiles") or {}
        if not isinstance(profiles, dict):
            raise ValueError(
                f"Invalid {CONFIG_FILE_NAME} at {self.config_path}: 'profiles' must be a mapping"
            )
        return profiles

    def profile_names(self) -> List[str]:
        profiles = self._profiles()
        return [str(name) for name in profiles]

    def get_profile_config(self, profile_name: str) -> Optional[Dict[str, Any]]:
        """Get the raw settings of a named profile.

        Args:
            profile_name: Name of the profile.

        Returns:
            Profile settings dict, or None if not found.

        Raises:
            ValueError: If the profiles section is not a mapping.
        """
        profiles = self._profiles()
        profile = profiles.get(profile_name)
        return profile if isinstance(profile, dict) else None

    def get_filter_config(self, profile_name: str) -> Optional[FilterConfig]:
        return FilterConfig.from_dict(self.get_profile_config(profile_name))
