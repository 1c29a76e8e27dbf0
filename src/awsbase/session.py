"""boto3 session factory backed by the credential resolution pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace

import boto3

from awsbase.config import EnvConfig, Settings
from awsbase.credentials import CredentialsProvider, get_credentials_provider
from awsbase.credentials.providers import isolated_botocore_session
from awsbase.endpoints import Partition, resolve_region
from awsbase.models import Config


@dataclass(frozen=True)
class AwsSession:
    """A boto3 session plus what was resolved to build it.

    The boto3 session holds a snapshot of the credentials. Call ``refreshed()``
    to rebuild it from the (cached) provider once they approach expiry.
    """

    session: boto3.Session
    provider: CredentialsProvider
    credentials_source: str
    region: str
    partition: Partition | None

    async def refreshed(self) -> "AwsSession":
        return replace(self, session=await _boto3_session(self.provider, self.region))


async def _boto3_session(provider: CredentialsProvider, region: str) -> boto3.Session:
    creds = await provider.retrieve()
    return boto3.Session(
        aws_access_key_id=creds.access_key_id,
        aws_secret_access_key=creds.secret_access_key,
        aws_session_token=creds.session_token or None,
        region_name=region or None,
        botocore_session=isolated_botocore_session(),
    )


async def get_aws_session(
    config: Config,
    env: EnvConfig | None = None,
    settings: Settings | None = None,
) -> AwsSession:
    env = env if env is not None else EnvConfig.from_environ()
    provider, source = await get_credentials_provider(config, env, settings)
    region = config.region or env.region
    return AwsSession(
        session=await _boto3_session(provider, region),
        provider=provider,
        credentials_source=source,
        region=region,
        partition=resolve_region(region) if region else None,
    )
