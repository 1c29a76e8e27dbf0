"""Credential configuration models."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _ensure_list(v: Any) -> list:
    """Convert None to empty list, pass through lists."""
    if v is None:
        return []
    return v


def _expand_paths(paths: list[str]) -> list[str]:
    return [str(Path(path).expanduser()) for path in paths]


class AssumeRole(BaseModel):
    """Parameters for an STS AssumeRole exchange layered on the base credentials.

    Empty optional fields are omitted from the request rather than sent empty.
    """

    model_config = ConfigDict(frozen=True)

    role_arn: str = ""
    session_name: str = ""
    external_id: str = ""
    duration: timedelta | None = None
    policy: str = ""
    policy_arns: list[str] = Field(default_factory=list)
    tags: dict[str, str] = Field(default_factory=dict)
    transitive_tag_keys: list[str] = Field(default_factory=list)

    @field_validator("policy_arns", "transitive_tag_keys", mode="before")
    @classmethod
    def _validate_lists(cls, v: Any) -> list:
        return _ensure_list(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _validate_tags(cls, v: Any) -> dict:
        if v is None:
            return {}
        return v

    @model_validator(mode="after")
    def _check_transitive_tag_keys(self) -> "AssumeRole":
        unknown = [key for key in self.transitive_tag_keys if key not in self.tags]
        if unknown:
            raise ValueError(f"transitive_tag_keys not present in tags: {', '.join(unknown)}")
        return self

    @property
    def enabled(self) -> bool:
        return bool(self.role_arn)


class Config(BaseModel):
    """Desired credential behavior for one client session."""

    model_config = ConfigDict(frozen=True)

    access_key: str = ""
    secret_key: str = ""
    token: str = ""
    profile: str = ""
    shared_credentials_files: list[str] = Field(default_factory=list)
    shared_config_files: list[str] = Field(default_factory=list)
    assume_role: AssumeRole | None = None

    region: str = ""
    ec2_metadata_service_endpoint: str = ""
    sts_region: str = ""
    sts_endpoint: str = ""

    caller_name: str = Field(default="awsbase", description="Shown in credential error messages")
    caller_documentation_url: str = Field(
        default="https://docs.aws.amazon.com/sdkref/latest/guide/standardized-credentials.html",
    )

    @field_validator("shared_credentials_files", "shared_config_files", mode="before")
    @classmethod
    def _validate_lists(cls, v: Any) -> list:
        return _ensure_list(v)

    def has_static_credentials(self) -> bool:
        return bool(self.access_key or self.secret_key or self.token)

    def resolve_shared_credentials_files(self) -> list[str]:
        return _expand_paths(self.shared_credentials_files)

    def resolve_shared_config_files(self) -> list[str]:
        return _expand_paths(self.shared_config_files)
