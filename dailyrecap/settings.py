"""Settings resolution: environment > .env > config.toml > defaults."""

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import SecretStr
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

CONFIG_PATH = Path.home() / ".config" / "dailyrecap" / "config.toml"

ENV_PREFIX = "DAILY_"

LINEAR_ENDPOINT = "https://api.linear.app/graphql"


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load ~/.config/dailyrecap/config.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    with CONFIG_PATH.open() as fh:
        return tomlkit.load(fh)


def _flatten(config: Mapping) -> dict:
    """Turn [linear] api_token = ... into linear_api_token = ...; top-level scalars pass through."""
    flat: dict = {}
    for key, value in config.items():
        # tomlkit Table implements MutableMapping but not dict, so check Mapping
        if isinstance(value, Mapping):
            for sub_key, sub_value in value.items():
                flat[f"{key}_{sub_key}"] = sub_value
        else:
            flat[key] = value
    return flat


class ConfigFileSource(PydanticBaseSettingsSource):
    """Flattened config.toml values, ranked below env vars and .env."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return _flatten(_load_toml()).get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in _flatten(_load_toml()).items()
            if key in self.settings_cls.model_fields
        }


class DailySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Linear
    linear_api_token: SecretStr | None = None
    linear_base_url: str = LINEAR_ENDPOINT

    # GitHub
    github_api_token: SecretStr | None = None
    github_auth: str = "token"  # "token" | "gh-cli"

    # Report
    report_output_dir: Path = Path(".")
    comment_limit: int = 10  # most recent comments shown per item

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, dotenv_settings, ConfigFileSource(settings_cls), file_secret_settings)


def get_settings() -> DailySettings:
    """Return settings with env vars and .env on top of the config file.

    Credentials are not validated here: each source checks what it needs when
    it is first used, so a missing GitHub token only degrades the run.
    """
    return DailySettings()
