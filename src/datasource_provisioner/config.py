"""
Configuration management for Datasource Provisioner.

Uses Pydantic for validation and pydantic-settings for environment variable support.
"""

import re
from pathlib import Path
from typing import Mapping, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from datasource_provisioner.dialects import JDBC_SCHEME
from datasource_provisioner.errors import check_argument


class ExternalStorageConfig(BaseSettings):
    """External storage (database) configuration.

    Describes ``count`` connection slots. Each slot has its own JDBC URL;
    credentials are positional with a fallback to the first entry, so
    ``users`` and ``passwords`` may be shorter than ``count``.

    Environment variables: DB_COUNT, DB_URLS, DB_USERS, DB_PASSWORDS,
    DB_PLATFORM (list values as JSON arrays).
    """

    model_config = SettingsConfigDict(env_prefix="DB_")

    count: int | None = Field(default=None, description="Number of connection slots")
    urls: list[str] = Field(default_factory=list, description="Per-slot JDBC URLs")
    users: list[str] = Field(default_factory=list, description="Usernames, index 0 is the fallback")
    passwords: list[str] = Field(default_factory=list, description="Passwords, index 0 is the fallback")
    platform: str | None = Field(default=None, description="Storage platform: MYSQL, ORACLE, ...")

    @field_validator("platform")
    @classmethod
    def normalize_platform(cls, v: str | None) -> str | None:
        """Strip surrounding whitespace from the platform name."""
        if v is None:
            return None
        return v.strip()

    def check(self) -> None:
        """Validate the settings before any pool is opened.

        Raises:
            ContractViolation: If a required setting is missing or the URL
                list is shorter than ``count``
        """
        check_argument(self.count is not None, "db.num is null")
        check_argument(self.count >= 1, "db.num must be at least 1")
        check_argument(len(self.users) > 0, "db.user or db.user.[index] is null")
        check_argument(len(self.passwords) > 0, "db.password or db.password.[index] is null")
        check_argument(bool(self.platform), "db.platform is null")
        for index in range(self.count):
            check_argument(self.has_url(index), "db.url.%s is null", index)
            check_argument(
                self.urls[index].strip().startswith(JDBC_SCHEME), "URL must start with 'jdbc'"
            )

    def has_url(self, index: int) -> bool:
        """Check that slot ``index`` has a non-blank URL."""
        return index < len(self.urls) and bool(self.urls[index].strip())


class PoolSettings(BaseSettings):
    """Connection pool tuning passed through to every provisioned pool."""

    model_config = SettingsConfigDict(env_prefix="DB_POOL_")

    size: int = Field(default=20, ge=1, le=200, description="Connection pool size")
    max_overflow: int = Field(default=0, ge=0, description="Max overflow connections")
    timeout_seconds: float = Field(default=3.0, gt=0, description="Seconds to wait for a connection")
    recycle_seconds: int = Field(default=1800, ge=-1, description="Connection max lifetime (-1 disables)")
    echo: bool = Field(default=False, description="Echo SQL statements")


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        description="Log format"
    )

    # File logging
    file_enabled: bool = Field(default=True, description="Enable file logging")
    file_path: str = Field(default="logs/datasource_provisioner.log", description="Log file path")
    rotation: str = Field(default="100 MB", description="Log rotation size")
    retention: str = Field(default="30 days", description="Log retention period")

    # Console logging
    console_enabled: bool = Field(default=True, description="Enable console logging")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v

    @field_validator("file_path")
    @classmethod
    def ensure_directory_exists(cls, v: str) -> str:
        """Ensure the log directory exists."""
        Path(v).parent.mkdir(parents=True, exist_ok=True)
        return v


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DSP_",
        case_sensitive=False,
    )

    # Sub-configurations
    db: ExternalStorageConfig = Field(default_factory=ExternalStorageConfig)
    pool: PoolSettings = Field(default_factory=PoolSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Paths
    config_dir: str = Field(default="config", description="Configuration directory")

    def get_config_path(self, name: str) -> Path:
        """Get path to a configuration file."""
        return Path(self.config_dir) / name


# Global configuration instance
_config: Optional[Config] = None

_NESTED_CONFIGS: dict[str, type[BaseSettings]] = {
    "db": ExternalStorageConfig,
    "pool": PoolSettings,
    "logging": LoggingConfig,
}

_PLATFORM_KEYS = ("db.platform", "spring.sql.init.platform", "spring.datasource.platform")


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def load_config_from_yaml(yaml_path: str) -> Config:
    """Load configuration from a YAML file.

    Note: Values loaded from YAML take precedence over environment variables.
    For environment variable overrides, use .env file or set them directly.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        Config instance loaded from the file.
    """
    import yaml

    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

    with yaml_file.open("r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    main_config = {}
    nested_configs = {}

    for key, value in config_dict.items():
        if key in _NESTED_CONFIGS:
            nested_configs[key] = value or {}
        else:
            main_config[key] = value

    # Nested configs are built individually so env vars still fill the gaps
    for key, config_class in _NESTED_CONFIGS.items():
        if key in nested_configs:
            nested_configs[key] = config_class(**nested_configs[key])
        else:
            nested_configs[key] = config_class()

    main_config.update(nested_configs)
    return Config(**main_config)


def _bind_list(properties: Mapping[str, str], key: str) -> list[str]:
    """Bind ``key.N`` / ``key[N]`` entries, or a comma-separated ``key``."""
    pattern = re.compile(rf"^{re.escape(key)}(?:\.(\d+)|\[(\d+)\])$")
    indexed: dict[int, str] = {}
    for name, value in properties.items():
        match = pattern.match(name)
        if match:
            indexed[int(match.group(1) or match.group(2))] = value

    if indexed:
        # A gap ends the list, so db.url.0 + db.url.2 binds one URL
        values = []
        while len(values) in indexed:
            values.append(indexed[len(values)])
        return values

    plain = properties.get(key)
    if plain is None:
        return []
    return [item.strip() for item in plain.split(",") if item.strip()]


def load_config_from_properties(properties: Mapping[str, str]) -> ExternalStorageConfig:
    """Bind external storage settings from flat ``db.*`` properties.

    Args:
        properties: Key/value settings, e.g. ``{"db.num": "2",
            "db.url.0": "jdbc:mysql://...", "db.user": "nacos"}``

    Returns:
        ExternalStorageConfig with the bound values. It is not validated
        here; provisioning calls :meth:`ExternalStorageConfig.check`.
    """
    platform = next(
        (properties[key] for key in _PLATFORM_KEYS if properties.get(key)),
        None,
    )
    return ExternalStorageConfig(
        count=properties.get("db.num"),
        urls=_bind_list(properties, "db.url"),
        users=_bind_list(properties, "db.user"),
        passwords=_bind_list(properties, "db.password"),
        platform=platform,
    )


def reload_config() -> Config:
    """Reload configuration from environment and YAML files.

    Reads ``config.yaml`` from the configured ``config_dir`` when it exists,
    otherwise uses environment variables and defaults only.
    """
    global _config
    _config = None

    env_config = Config()
    config_yaml = env_config.get_config_path("config.yaml")
    if config_yaml.exists():
        _config = load_config_from_yaml(str(config_yaml))
    else:
        _config = env_config

    return _config
