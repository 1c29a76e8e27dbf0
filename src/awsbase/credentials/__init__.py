"""AWS credential resolution."""

from awsbase.credentials.assume_role import ASSUME_ROLE_PROVIDER_NAME, AssumeRoleProvider
from awsbase.credentials.cache import CredentialsCache
from awsbase.credentials.providers import (
    EC2_ROLE_PROVIDER_NAME,
    ENV_CREDENTIALS_NAME,
    SHARED_CONFIG_CREDENTIALS_NAME,
    STATIC_CREDENTIALS_NAME,
    ChainCredentialsProvider,
    Credentials,
    CredentialsNotFoundError,
    CredentialsProvider,
    EnvironmentCredentialsProvider,
    InstanceMetadataCredentialsProvider,
    SharedConfigCredentialsProvider,
    SharedConfigProfileNotExistError,
    StaticCredentialsProvider,
)
from awsbase.credentials.resolver import (
    assume_role_credentials_provider,
    get_credentials_provider,
)

__all__ = [
    "ASSUME_ROLE_PROVIDER_NAME",
    "EC2_ROLE_PROVIDER_NAME",
    "ENV_CREDENTIALS_NAME",
    "SHARED_CONFIG_CREDENTIALS_NAME",
    "STATIC_CREDENTIALS_NAME",
    "AssumeRoleProvider",
    "ChainCredentialsProvider",
    "Credentials",
    "CredentialsCache",
    "CredentialsNotFoundError",
    "CredentialsProvider",
    "EnvironmentCredentialsProvider",
    "InstanceMetadataCredentialsProvider",
    "SharedConfigCredentialsProvider",
    "SharedConfigProfileNotExistError",
    "StaticCredentialsProvider",
    "assume_role_credentials_provider",
    "get_credentials_provider",
]
