"""Credential resolution and partition lookup for AWS API clients."""

from awsbase.credentials import get_credentials_provider
from awsbase.endpoints import Partition, resolve_region
from awsbase.errors import (
    CannotAssumeRoleError,
    NoValidCredentialSourcesError,
    err_code_equals,
    is_cannot_assume_role_error,
    is_no_valid_credential_sources_error,
)
from awsbase.models import AssumeRole, Config
from awsbase.session import AwsSession, get_aws_session

__all__ = [
    "AssumeRole",
    "AwsSession",
    "CannotAssumeRoleError",
    "Config",
    "NoValidCredentialSourcesError",
    "Partition",
    "err_code_equals",
    "get_aws_session",
    "get_credentials_provider",
    "is_cannot_assume_role_error",
    "is_no_valid_credential_sources_error",
    "resolve_region",
]
