"""
Centralized Configuration System for XML Funnel

Type-safe configuration using Pydantic Settings. The parsing engine never
reads these values on its own: the service layer turns them into
ParseOptions / InferenceConfig and hands them to every call.
"""

import json
import os
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class ServiceSettings(BaseSettings):
    """Service configuration settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    xml_funnel_host: str = Field(
        default="localhost",
        description="XML Funnel service host"
    )
    xml_funnel_port: int = Field(
        default=8004,
        description="XML Funnel service port"
    )
    use_https: bool = Field(
        default=False,
        description="Serve over HTTPS"
    )
    ssl_cert_path: str = Field(
        default="./ssl/common/server.crt",
        description="SSL certificate path"
    )
    ssl_key_path: str = Field(
        default="./ssl/common/server.key",
        description="SSL private key path"
    )

    # CORS Configuration
    cors_enabled: bool = Field(
        default=True,
        description="Enable CORS"
    )
    cors_origins: str = Field(
        default='["http://localhost:3000", "http://localhost:3001"]',
        description="CORS allowed origins (JSON array string)"
    )

    @property
    def base_url(self) -> str:
        """Construct XML Funnel base URL"""
        protocol = "https" if self.use_https else "http"
        return f"{protocol}://{self.xml_funnel_host}:{self.xml_funnel_port}"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from JSON string"""
        try:
            return json.loads(self.cors_origins)
        except (json.JSONDecodeError, TypeError):
            return ["*"]


class XmlParsingSettings(BaseSettings):
    """Defaults applied to XML parse requests"""

    model_config = SettingsConfigDict(
        env_prefix="XML_FUNNEL_",
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    default_max_records: int = Field(
        default=1000,
        description="Row cap used when a request does not send maxRecords"
    )
    default_skip_empty_fields: bool = Field(
        default=True,
        description="Drop keys whose value is an empty string"
    )
    default_normalize_field_names: bool = Field(
        default=True,
        description="Rewrite row keys to snake_case"
    )
    type_sample_size: int = Field(
        default=10,
        description="Non-empty samples per column used for type inference"
    )
    type_threshold: float = Field(
        default=0.7,
        description="Share of samples that must match a type"
    )
    sample_record_limit: int = Field(
        default=5,
        description="Rows kept as sampleRecords in stored datasets"
    )
    inline_content_max_bytes: int = Field(
        default=1024 * 1024,
        description="Documents at or above this size are stored as a placeholder"
    )
    parse_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Upper bound for a single parse call in the HTTP layer"
    )

    @field_validator("default_max_records", "type_sample_size", "sample_record_limit")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("type_threshold")
    @classmethod
    def _ratio(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("type_threshold must be in (0, 1]")
        return v


class ApplicationSettings(BaseSettings):
    """Main application settings - aggregates all other settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    services: ServiceSettings = ServiceSettings()
    parsing: XmlParsingSettings = XmlParsingSettings()


settings = ApplicationSettings()


def get_settings() -> ApplicationSettings:
    """
    Get the global settings instance

    Used with FastAPI's Depends() for dependency injection.
    """
    return settings


def reload_settings() -> ApplicationSettings:
    """
    Reload settings from environment (useful for testing)
    """
    global settings
    settings = ApplicationSettings(
        services=ServiceSettings(),
        parsing=XmlParsingSettings(),
    )
    return settings
