import logging
from os import PathLike
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cardsmith.models.failure import ConfigError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CARDSMITH_", extra="ignore")

    app_name: str = "cardsmith"
    debug: bool = False
    log_level: str = "INFO"

    # Deck configuration file used when a deck names none
    default_config: str = "config.yml"


settings = Settings()


class Conf(BaseSettings):
    """
    Per-deck configuration.

    Values come from the deck's YAML config file, then CARDSMITH_* environment
    variables, then the defaults below. Read-only once loaded.
    """

    model_config = SettingsConfigDict(env_prefix="CARDSMITH_", extra="ignore", frozen=True)

    dpi: float = 300
    custom_colors: dict[str, str] = Field(default_factory=dict)
    img_dir: str = "."
    dir: str = "_output"
    prefix: str = "card_"
    count_format: str = "{:02d}"
    antialias: str = "best"

    @field_validator("dpi")
    @classmethod
    def dpi_must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("dpi must be positive")
        return value

    @classmethod
    def load(cls, path: str | PathLike[str] | None) -> "Conf":
        """
        Load a deck configuration file.

        A missing file is not an error: the defaults (plus environment
        overrides) are used.

        Raises:
            ConfigError: If the file is not a YAML mapping or a value is invalid
        """
        data: dict[str, Any] = {}
        if path is not None and Path(path).is_file():
            try:
                with open(path, encoding="utf-8") as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(str(path), f"YAML error: {e}") from e
            if loaded is not None and not isinstance(loaded, dict):
                raise ConfigError(str(path), "top level must be a mapping")
            data = loaded or {}
        else:
            logger.info("No config file at %s; using defaults", path)

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(str(path), str(e)) from e
