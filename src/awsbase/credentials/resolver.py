"""Selects, validates and wraps the effective credentials provider for a Config."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from botocore.exceptions import BotoCoreError

from awsbase.config import EnvConfig, Settings, load_settings
from awsbase.credentials.assume_role import DEFAULT_STS_REGION, AssumeRoleProvider
from awsbase.credentials.cache import CredentialsCache
from awsbase.credentials.providers import (
    DEFAULT_PROFILE,
    ChainCredentialsProvider,
    CredentialsProvider,
    EnvironmentCredentialsProvider,
    InstanceMetadataCredentialsProvider,
    SharedConfigCredentialsProvider,
    SharedConfigProfileNotExistError,
    StaticCredentialsProvider,
    load_shared_config_profile,
)
from awsbase.errors import CannotAssumeRoleError, NoValidCredentialSourcesError
from awsbase.models import Config

logger = logging.getLogger(__name__)


def _no_valid_credential_sources(config: Config, cause: BaseException) -> NoValidCredentialSourcesError:
    return NoValidCredentialSourcesError(
        cause,
        caller_name=config.caller_name,
        documentation_url=config.caller_documentation_url,
    )


def _base_provider(
    config: Config,
    env: EnvConfig,
    profile: str,
    credentials_files: list[str],
    config_files: list[str],
    settings: Settings,
) -> CredentialsProvider:
    if config.has_static_credentials():
        return StaticCredentialsProvider(config.access_key, config.secret_key, config.token)

    # A named profile ends the chain: it yields credentials or fails.
    region = config.region or env.region
    providers: list[CredentialsProvider] = []
    if config.profile:
        providers.append(
            SharedConfigCredentialsProvider(
                config.profile, credentials_files, config_files, named=True, region=region
            )
        )
    providers.append(EnvironmentCredentialsProvider(env))
    shared_profile = profile or DEFAULT_PROFILE
    if shared_profile != config.profile:
        providers.append(
            SharedConfigCredentialsProvider(
                shared_profile,
                credentials_files,
                config_files,
                named=bool(profile),
                region=region,
            )
        )
    providers.append(
        InstanceMetadataCredentialsProvider(
            env,
            endpoint=config.ec2_metadata_service_endpoint,
            timeout=settings.credentials.imds_timeout_seconds,
            num_attempts=settings.credentials.imds_num_attempts,
        )
    )
    return ChainCredentialsProvider(providers)


async def get_credentials_provider(
    config: Config,
    env: EnvConfig | None = None,
    settings: Settings | None = None,
) -> tuple[CredentialsProvider, str]:
    """Return the validated, cached provider for ``config`` and the base source name.

    Raises:
        NoValidCredentialSourcesError: no source yields base credentials.
        CannotAssumeRoleError: the configured role cannot be assumed.
    """
    env = env if env is not None else EnvConfig.from_environ()
    settings = settings if settings is not None else load_settings()

    profile = config.profile or env.profile
    credentials_files = config.resolve_shared_credentials_files() or [env.shared_credentials_file]
    config_files = config.resolve_shared_config_files() or [env.shared_config_file]

    # Fail on an unknown profile instead of silently falling through to other sources.
    if profile:
        try:
            await asyncio.to_thread(
                load_shared_config_profile, profile, credentials_files, config_files
            )
        except (SharedConfigProfileNotExistError, BotoCoreError, OSError) as exc:
            raise _no_valid_credential_sources(config, exc) from exc

    base = _base_provider(config, env, profile, credentials_files, config_files, settings)
    provider = CredentialsCache(
        base,
        expiry_window=timedelta(seconds=settings.credentials.expiry_window_seconds),
    )

    try:
        creds = await provider.retrieve()
    except Exception as exc:
        raise _no_valid_credential_sources(config, exc) from exc

    logger.debug("Resolved base credentials from %s", creds.source)

    if config.assume_role is None or not config.assume_role.enabled:
        return provider, creds.source

    assumed = await assume_role_credentials_provider(provider, config, env, settings)
    return assumed, creds.source


async def assume_role_credentials_provider(
    base: CredentialsProvider,
    config: Config,
    env: EnvConfig | None = None,
    settings: Settings | None = None,
) -> CredentialsProvider:
    """Layer ``config.assume_role`` on ``base`` and validate it with one exchange."""
    role = config.assume_role
    if role is None or not role.enabled:
        raise ValueError("assume_role.role_arn is required")
    env = env if env is not None else EnvConfig.from_environ()
    settings = settings if settings is not None else load_settings()

    logger.info(
        "Attempting to AssumeRole %s (SessionName: %r, ExternalId: %r)",
        role.role_arn,
        role.session_name,
        role.external_id,
    )

    provider = CredentialsCache(
        AssumeRoleProvider(
            base,
            role,
            region=config.sts_region or config.region or env.region or DEFAULT_STS_REGION,
            endpoint_url=config.sts_endpoint or None,
            connect_timeout=settings.credentials.sts_connect_timeout_seconds,
            read_timeout=settings.credentials.sts_read_timeout_seconds,
        ),
        expiry_window=timedelta(seconds=settings.credentials.expiry_window_seconds),
    )

    try:
        await provider.retrieve()
    except Exception as exc:
        raise CannotAssumeRoleError(
            exc, role_arn=role.role_arn, caller_name=config.caller_name
        ) from exc

    return provider
