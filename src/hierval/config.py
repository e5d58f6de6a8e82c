"""Configuration management for hierval using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hierval.constants import CONFIG_FILE_NAME


class Environment(str, Enum):
    """Hierarchy service environments."""
    PROD = "prod"
    PPE = "ppe"
    INTERNAL = "internal"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class TlsVersion(str, Enum):
    """Minimum TLS version accepted by the service accessor."""
    TLS1_2 = "TLSv1.2"
    TLS1_3 = "TLSv1.3"


class DocsetConfig(BaseModel):
    """Docset and build inputs for one validation run."""
    repo_url: str = Field(alias="repoUrl")
    repo_branch: str = Field(alias="repoBranch", default="main")
    docset_name: str = Field(alias="docsetName")
    docset_path: str = Field(alias="docsetPath", default=".")
    docset_output_path: str = Field(alias="docsetOutputPath", default="_site")
    publish_file_path: str | None = Field(alias="publishFilePath", default=None)
    dependency_file_path: str | None = Field(alias="dependencyFilePath", default=None)
    manifest_file_path: str = Field(alias="manifestFilePath")
    fallback_docset_path: str | None = Field(alias="fallbackDocsetPath", default=None)
    locale: str = "en-us"
    is_localization_build: bool = Field(alias="isLocalizationBuild", default=False)
    no_drysync: bool = Field(alias="noDrySync", default=False)

    @field_validator("repo_url", "docset_name", "manifest_file_path")
    @classmethod
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("value must not be blank")
        return v

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v):
        return v.strip().lower()

    model_config = ConfigDict(populate_by_name=True)


class ServiceConfig(BaseModel):
    """Hierarchy service connection settings.

    The TLS floor is carried here and handed to the accessor at construction
    instead of being set process-wide.
    """
    environment: Environment = Environment.PROD
    endpoints: dict[str, str] = Field(default_factory=lambda: {
        "prod": "https://hierarchy.learn.example.com/api",
        "ppe": "https://hierarchy-ppe.learn.example.com/api",
        "internal": "https://hierarchy-int.learn.example.com/api",
    })
    timeout_seconds: float = Field(alias="timeoutSeconds", default=300.0)
    min_tls_version: TlsVersion = Field(alias="minTlsVersion", default=TlsVersion.TLS1_2)
    api_key: str | None = Field(alias="apiKey", default=None)

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got: {v}")
        return v

    @property
    def endpoint(self) -> str:
        """Endpoint of the configured environment."""
        env = self.environment.value
        if env not in self.endpoints:
            raise ValueError(f"No endpoint configured for environment '{env}'")
        return self.endpoints[env].rstrip("/")

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO

    model_config = ConfigDict(use_enum_values=True)


class HiervalConfig(BaseModel):
    """Complete hierval configuration model."""
    docset: DocsetConfig
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> HiervalConfig:
    """Load configuration from file.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .hierval.json

    Returns:
        HiervalConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If no config file can be found
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            raise FileNotFoundError(
                f"Configuration file not found: no {CONFIG_FILE_NAME} in {Path.cwd()} or its parents"
            )
    else:
        config_path = Path(config_path)
        if not config_path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = json.load(f)
        return HiervalConfig(**config_data)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest .hierval.json in start_dir or one of its parents.

    Directories that happen to carry the config file name are skipped.
    """
    start = Path(start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None
