"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ytdlp_hq.exceptions import ConfigurationError
from ytdlp_hq.models.config import PipelineConfig

log = logging.getLogger(__name__)


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> PipelineConfig:
        """
        Loads configuration from the INI file (if any), applies CLI overrides,
        and validates it.

        Raises:
            ConfigurationError: If the file cannot be parsed or validation fails.
        """
        config_from_file: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(f"Error parsing configuration file: {e}") from e

            if self._migrate_if_needed():
                log.info(
                    "[yellow]Configuration file was updated with new default values."
                    "[/yellow]"
                )
            config_from_file = self._get_config_as_dict()

        if cli_options:
            config_from_file.update(cli_options)

        try:
            config_dir = self.config_file_path.parent
            return PipelineConfig(**config_from_file, config_path=str(config_dir))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any] | None = None) -> None:
        """Creates and saves a new configuration file, filling in defaults."""
        settings = settings or {}
        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {}

        defaults = PipelineConfig.model_construct()
        for key in sorted(PipelineConfig.get_ini_keys()):
            value = settings.get(key, getattr(defaults, key, None))
            if key == "work_dir" and key not in settings:
                # An empty work_dir means "the directory ytdlp-hq is run from"
                value = ""
            config["DEFAULT"][key] = self._to_ini(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    @staticmethod
    def _to_ini(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return ""
        return str(value)

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        values: dict[str, Any] = {
            "audio_id": section.get("audio_id", "").strip(),
            "video_id": section.get("video_id", "").strip(),
            "downloader_version": section.get("downloader_version", "").strip(),
            "release_base_url": section.get("release_base_url", "").strip(),
            "work_dir": section.get("work_dir", "").strip(),
        }
        try:
            values["json_log"] = section.getboolean("json_log", False)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for json_log: {e}") from e
        # Empty values fall back to the model defaults
        return {k: v for k, v in values.items() if v != ""}

    def get_config_as_dict(self) -> dict[str, Any]:
        """Returns the raw file values, or an empty dict if there is no file."""
        if not self.config_file_path.is_file():
            return {}
        self._parser.read(self.config_file_path, encoding="utf-8")
        return self._get_config_as_dict()

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        defaults = PipelineConfig.model_construct()
        config_section = self._parser["DEFAULT"]
        needs_saving = False

        for key in sorted(PipelineConfig.get_ini_keys()):
            if key not in config_section:
                value = "" if key == "work_dir" else self._to_ini(getattr(defaults, key))
                config_section[key] = value
                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with value '{value}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
