"""LinkVault Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import toml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from linkvault.config.models.api_settings import APISettings, AirtableSettings
from linkvault.config.models.app_settings import AppSettings, LoggingSettings
from linkvault.config.models.cache_settings import CacheSettings
from linkvault.config.models.schema_settings import SchemaSettings
from linkvault.shared.constants import AirtableConfig

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values come from the TOML file, then ``LINKVAULT_*`` environment
    variables (nested with ``__``, e.g. ``LINKVAULT_API__AIRTABLE__BASE_ID``)
    for keys the file leaves out, then defaults. The plain
    ``AIRTABLE_API_KEY`` and ``AIRTABLE_BASE_ID`` variables fill
    credentials left empty.
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKVAULT_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: APISettings = Field(default_factory=APISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    tables: SchemaSettings = Field(default_factory=SchemaSettings)

    @model_validator(mode="after")
    def apply_credential_fallbacks(self) -> Settings:
        """Fill empty Airtable credentials from the conventional variables."""
        airtable = self.api.airtable
        if not airtable.api_key:
            airtable.api_key = os.environ.get(AirtableConfig.API_KEY_ENV, "")
        if not airtable.base_id:
            airtable.base_id = os.environ.get(AirtableConfig.BASE_ID_ENV, "")
        return self

    @property
    def airtable(self) -> AirtableSettings:
        """Shortcut for ``settings.api.airtable``."""
        return self.api.airtable

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file, environment filling missing keys.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration from %s", file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file.

        API keys are written too: a config file without them is useless.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
