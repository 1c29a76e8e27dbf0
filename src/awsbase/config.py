"""Process settings and the resolved AWS environment view."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class CredentialSettings(BaseModel):
    imds_timeout_seconds: float = Field(default=1.0, gt=0, le=60)
    # Validation must fail on the first attempt rather than after repeated timeouts.
    imds_num_attempts: int = Field(default=1, ge=1, le=10)
    sts_connect_timeout_seconds: int = Field(default=5, ge=1, le=300)
    sts_read_timeout_seconds: int = Field(default=15, ge=1, le=300)
    expiry_window_seconds: int = Field(
        default=0,
        ge=0,
        le=3600,
        description="Refresh cached credentials this many seconds before they expire.",
    )


class Settings(BaseModel):
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    credentials: CredentialSettings = Field(default_factory=CredentialSettings)


ENV_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "imds_timeout": "AWSBASE_IMDS_TIMEOUT_SECONDS",
    "imds_num_attempts": "AWSBASE_IMDS_NUM_ATTEMPTS",
    "sts_connect_timeout": "AWSBASE_STS_CONNECT_TIMEOUT_SECONDS",
    "sts_read_timeout": "AWSBASE_STS_READ_TIMEOUT_SECONDS",
    "expiry_window": "AWSBASE_CREDENTIAL_EXPIRY_WINDOW_SECONDS",
}

_TRUE_VALUES = frozenset({"1", "true", "yes"})


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %d", key, value, default
        )
        return default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        _config_logger.warning(
            "Invalid float value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv()

    settings_data: dict[str, object] = {
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": os.getenv(ENV_KEYS["log_file"]) or None,
        },
        "credentials": {
            "imds_timeout_seconds": _env_float(
                ENV_KEYS["imds_timeout"],
                CredentialSettings().imds_timeout_seconds,
            ),
            "imds_num_attempts": _env_int(
                ENV_KEYS["imds_num_attempts"],
                CredentialSettings().imds_num_attempts,
            ),
            "sts_connect_timeout_seconds": _env_int(
                ENV_KEYS["sts_connect_timeout"],
                CredentialSettings().sts_connect_timeout_seconds,
            ),
            "sts_read_timeout_seconds": _env_int(
                ENV_KEYS["sts_read_timeout"],
                CredentialSettings().sts_read_timeout_seconds,
            ),
            "expiry_window_seconds": _env_int(
                ENV_KEYS["expiry_window"],
                CredentialSettings().expiry_window_seconds,
            ),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc


def _default_aws_file(name: str) -> str:
    return str(Path("~", ".aws", name).expanduser())


class EnvConfig(BaseModel):
    """Snapshot of the AWS_* environment variables that affect credential resolution.

    Built once per session with ``EnvConfig.from_environ()`` and passed explicitly
    to the resolver, so tests can supply any view without touching ``os.environ``.
    """

    model_config = ConfigDict(frozen=True)

    profile: str = ""
    shared_credentials_file: str = Field(default_factory=lambda: _default_aws_file("credentials"))
    shared_config_file: str = Field(default_factory=lambda: _default_aws_file("config"))
    access_key_id: str = ""
    secret_access_key: str = ""
    session_token: str = ""
    region: str = ""
    ec2_metadata_service_endpoint: str = ""
    ec2_metadata_disabled: bool = False

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "EnvConfig":
        env = os.environ if environ is None else environ

        def first(*keys: str) -> str:
            for key in keys:
                value = env.get(key, "")
                if value:
                    return value
            return ""

        data: dict[str, object] = {
            "profile": first("AWS_PROFILE", "AWS_DEFAULT_PROFILE"),
            "access_key_id": first("AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY"),
            "secret_access_key": first("AWS_SECRET_ACCESS_KEY", "AWS_SECRET_KEY"),
            "session_token": first("AWS_SESSION_TOKEN"),
            "region": first("AWS_REGION", "AWS_DEFAULT_REGION"),
            "ec2_metadata_service_endpoint": first("AWS_EC2_METADATA_SERVICE_ENDPOINT"),
            "ec2_metadata_disabled": first("AWS_EC2_METADATA_DISABLED").strip().lower()
            in _TRUE_VALUES,
        }
        credentials_file = first("AWS_SHARED_CREDENTIALS_FILE")
        if credentials_file:
            data["shared_credentials_file"] = str(Path(credentials_file).expanduser())
        config_file = first("AWS_CONFIG_FILE")
        if config_file:
            data["shared_config_file"] = str(Path(config_file).expanduser())
        return cls.model_validate(data)

    def has_keys(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)
