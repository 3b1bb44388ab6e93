import argparse
from enum import StrEnum
import os
import sys
from pathlib import Path

from pydantic import BaseModel, Field, RedisDsn, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from cart.constants import DEFAULT_STORAGE_KEY


class ConfigMode(StrEnum):
    LOCAL = "local"
    LOCAL_TESTS = "local-tests"
    PROD = "prod"
    PROD_TESTS = "prod-tests"


class StorageBackend(StrEnum):
    REDIS = "redis"
    MEMORY = "memory"


class _Storage(BaseModel):
    backend: StorageBackend = StorageBackend.MEMORY
    redis_dsn: RedisDsn | None = None

    @model_validator(mode="after")
    def _check_dsn(self):
        if self.backend == StorageBackend.REDIS and self.redis_dsn is None:
            raise ValueError("redis_dsn is required for redis storage backend")
        return self


class _Cart(BaseModel):
    storage_key: str = Field(default=DEFAULT_STORAGE_KEY, min_length=1)


class _Logging(BaseModel):
    error_log_path: str = Field(default="logs/errors.log")


class Config(BaseSettings):
    model_config = SettingsConfigDict(extra="allow", env_nested_delimiter="__")
    mode: ConfigMode
    storage: _Storage = Field(default_factory=_Storage)
    cart: _Cart = Field(default_factory=_Cart)
    logging: _Logging = Field(default_factory=_Logging)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources = (init_settings, env_settings, dotenv_settings)
        yaml_file_path = init_settings.init_kwargs.get("yaml_file")  # type: ignore
        if not yaml_file_path:
            return sources
        return (
            *sources,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file_path),
        )

    @property
    def debug(self):
        return self.mode not in (ConfigMode.PROD, ConfigMode.PROD_TESTS)


def init_config(
    parse_cli: bool = True, config_path: Path | str | None = None
) -> Config:
    cli_args = None
    if parse_cli:
        parser = argparse.ArgumentParser()
        parser.add_argument(
            "--config-path",
            help="Path to the configuration file",
            dest="config_path",
        )
        cli_args, _ = parser.parse_known_args(sys.argv)
    final_cfg_path = config_path or getattr(cli_args, "config_path", None)
    if env_mode := os.environ.get("MODE"):
        final_cfg_path = final_cfg_path or (Path() / "config" / (env_mode + ".yaml"))
    if not final_cfg_path:
        raise ValueError(
            """Missing config_path. Provide it using a cli flag --config-path or a function arg.
            Also you can specify MODE env variable to find config by its value"""
        )
    if not Path(final_cfg_path).exists():
        raise ValueError("Config path doesn't exist: %s" % final_cfg_path)
    return Config(yaml_file=final_cfg_path)  # type: ignore
