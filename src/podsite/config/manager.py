"""Configuration manager for loading and saving podsite config."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from podsite.config.schema import SiteConfig
from podsite.utils.errors import InvalidConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "podsite.yaml"


class ConfigManager:
    """Manages the site configuration file."""

    def __init__(self, config_file: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_file: Path to the YAML config. Defaults to ./podsite.yaml.
        """
        self.config_file = config_file or Path.cwd() / DEFAULT_CONFIG_FILENAME
        self.root = self.config_file.parent

    def load_config(self) -> SiteConfig:
        """Load and validate the site configuration.

        A missing file yields the default configuration rooted at the
        config file's directory.

        Returns:
            Validated SiteConfig instance

        Raises:
            InvalidConfigError: If the file is not valid YAML or fails validation
        """
        if not self.config_file.exists():
            logger.debug("No config at %s, using defaults", self.config_file)
            return SiteConfig(root=self.root)

        try:
            with open(self.config_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidConfigError(
                f"Invalid YAML in {self.config_file}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: expected a mapping"
            )

        data.pop("root", None)
        try:
            return SiteConfig(**data, root=self.root)
        except ValidationError as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: SiteConfig) -> None:
        """Save site configuration.

        Args:
            config: SiteConfig instance to save
        """
        data = config.model_dump(mode="json")

        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
