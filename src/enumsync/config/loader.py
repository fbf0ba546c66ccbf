"""Layered configuration loading.

Later layers override earlier ones, section by section and key by key:

    built-in defaults
    ~/.config/enumsync/config.yaml
    <project>/.enumsync/config.yaml
    ENUMSYNC__<SECTION>__<KEY> environment variables
    keyword overrides passed to load_config()
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from enumsync.config.constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME
from enumsync.config.models import (
    EnumSyncConfig,
    FeaturesConfig,
    FiltersConfig,
    LocalizationConfig,
    LoggingConfig,
    NamingConfig,
    PathsConfig,
    RefactorConfig,
)
from enumsync.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/enumsync/config.yaml").expanduser()


def repo_config_path(project_root: Path) -> Path:
    return project_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def read_yaml_config(path: Path) -> dict[str, Any]:
    """Mapping stored in ``path``; empty when the file does not exist.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


def merge_sections(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay ``override`` on ``base``; lists are replaced, not joined."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_sections(current, value)
        else:
            merged[key] = value
    return merged


class _YamlLayer(PydanticBaseSettingsSource):
    """Feeds the already merged YAML files to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return self._data


def _settings_for(yaml_data: dict[str, Any]) -> type[BaseSettings]:
    class EnumSyncSettings(BaseSettings):
        model_config = SettingsConfigDict(
            env_prefix="ENUMSYNC__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        paths: PathsConfig = PathsConfig()
        naming: NamingConfig = NamingConfig()
        features: FeaturesConfig = FeaturesConfig()
        localization: LocalizationConfig = LocalizationConfig()
        filters: FiltersConfig = FiltersConfig()
        refactor: RefactorConfig = RefactorConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # First source wins
            return (init_settings, env_settings, _YamlLayer(settings_cls, yaml_data))

    return EnumSyncSettings


def load_config(project_root: Path | None = None, **overrides: Any) -> EnumSyncConfig:
    """Build the configuration for ``project_root`` (default: cwd).

    Relative paths in the result resolve against the project root.
    ``overrides`` are whole or partial sections, for example
    ``paths={"output": "web/enums"}``.

    Raises:
        ConfigError: On unreadable YAML or a value that fails validation.
    """
    root = (project_root or Path.cwd()).resolve()
    yaml_data = merge_sections(
        read_yaml_config(GLOBAL_CONFIG_PATH),
        read_yaml_config(repo_config_path(root)),
    )

    try:
        settings = _settings_for(yaml_data)(**overrides)
        return EnumSyncConfig.model_validate({**settings.model_dump(), "project_root": root})
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(location, first.get("input"), first["msg"]) from e
