"""Base credential providers.

Every provider exposes ``async retrieve() -> Credentials``. Blocking work
(file reads, IMDS requests) runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol, runtime_checkable

import botocore.session
from botocore.configloader import raw_config_parse
from botocore.credentials import (
    AssumeRoleProvider as BotocoreAssumeRoleProvider,
    AssumeRoleWithWebIdentityProvider,
    CredentialProvider as BotocoreCredentialProvider,
    CredentialResolver,
    Credentials as BotocoreCredentials,
    ProcessProvider,
    SSOProvider,
)
from botocore.exceptions import ConfigNotFound, InvalidConfigError, PartialCredentialsError
from botocore.utils import InstanceMetadataFetcher, parse_timestamp

from awsbase.config import EnvConfig

logger = logging.getLogger(__name__)

STATIC_CREDENTIALS_NAME = "StaticCredentials"
ENV_CREDENTIALS_NAME = "EnvConfigCredentials"
SHARED_CONFIG_CREDENTIALS_NAME = "SharedConfigCredentials"
EC2_ROLE_PROVIDER_NAME = "EC2RoleProvider"

DEFAULT_PROFILE = "default"
DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class Credentials:
    """Immutable AWS key material plus the name of the mechanism that produced it."""

    access_key_id: str
    secret_access_key: str
    session_token: str = ""
    source: str = ""
    can_expire: bool = False
    expires: datetime | None = None

    def expired(self, window: timedelta = timedelta(0)) -> bool:
        if not self.can_expire or self.expires is None:
            return False
        exp = self.expires
        if exp.tzinfo is None:
            exp = exp.replace(tzinfo=timezone.utc)
        return exp <= datetime.now(timezone.utc) + window

    def __repr__(self) -> str:
        expires = self.expires.isoformat() if self.expires else None
        return (
            f"Credentials(access_key_id={self.access_key_id[:8]}***, "
            f"source={self.source!r}, expires={expires})"
        )


@runtime_checkable
class CredentialsProvider(Protocol):
    async def retrieve(self) -> Credentials: ...


class CredentialsNotFoundError(Exception):
    """Raised when a provider has no credentials to offer.

    A chain treats this as "try the next provider"; any other exception stops it.
    """


class SharedConfigProfileNotExistError(CredentialsNotFoundError):
    def __init__(self, profile: str, files: list[str]) -> None:
        super().__init__(
            f"failed to get shared config profile, {profile}: not found in {', '.join(files)}"
        )
        self.profile = profile
        self.files = files


class StaticCredentialsProvider:
    def __init__(self, access_key_id: str, secret_access_key: str, session_token: str = "") -> None:
        self._value = Credentials(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            source=STATIC_CREDENTIALS_NAME,
        )

    async def retrieve(self) -> Credentials:
        if not self._value.access_key_id or not self._value.secret_access_key:
            raise CredentialsNotFoundError("static credentials are empty")
        return self._value


class EnvironmentCredentialsProvider:
    """Credentials from the resolved AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY view."""

    def __init__(self, env: EnvConfig) -> None:
        self._env = env

    async def retrieve(self) -> Credentials:
        if not self._env.has_keys():
            raise CredentialsNotFoundError("no credentials in environment variables")
        return Credentials(
            access_key_id=self._env.access_key_id,
            secret_access_key=self._env.secret_access_key,
            session_token=self._env.session_token,
            source=ENV_CREDENTIALS_NAME,
        )


# Keys that let botocore resolve a profile without static keys.
_PROFILE_CREDENTIAL_KEYS = (
    "role_arn",
    "credential_process",
    "sso_session",
    "sso_account_id",
    "web_identity_token_file",
)

_ISOLATED_SESSION_VARS = {
    "profile": (None, None, None, None),
    "config_file": (None, None, None, None),
    "credentials_file": (None, None, None, None),
}


def isolated_botocore_session() -> botocore.session.Session:
    """Return a botocore session that ignores AWS_PROFILE and the ~/.aws files.

    Credentials and shared config are always passed to it explicitly.
    """
    return botocore.session.Session(session_vars=_ISOLATED_SESSION_VARS)


@dataclass
class SharedConfigProfile:
    name: str
    values: dict[str, Any] = field(default_factory=dict)
    sources: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str:
        value = self.values.get(key, "")
        return value if isinstance(value, str) else ""


@dataclass
class SharedConfig:
    """Profiles and sso-session sections merged from the shared files."""

    profiles: dict[str, SharedConfigProfile] = field(default_factory=dict)
    sso_sessions: dict[str, dict[str, Any]] = field(default_factory=dict)

    def profile(self, name: str, files: list[str]) -> SharedConfigProfile:
        try:
            return self.profiles[name]
        except KeyError:
            raise SharedConfigProfileNotExistError(name, files) from None

    def as_botocore_config(self) -> dict[str, Any]:
        """Shape the merged view like ``botocore.session.Session.full_config``."""
        return {
            "profiles": {name: dict(p.values) for name, p in self.profiles.items()},
            "sso_sessions": {name: dict(s) for name, s in self.sso_sessions.items()},
        }


def _parse_file(path: str) -> dict[str, dict[str, Any]] | None:
    try:
        return raw_config_parse(path)
    except ConfigNotFound:
        return None


def load_shared_config(credentials_files: list[str], config_files: list[str]) -> SharedConfig:
    """Merge every profile from the shared config and credentials files.

    Later files override earlier ones; credentials files override config
    files. Missing files are skipped, malformed files raise ConfigParseError.
    """
    shared = SharedConfig()

    def merge(name: str, path: str, section: dict[str, Any]) -> None:
        profile = shared.profiles.setdefault(name, SharedConfigProfile(name=name))
        for key, value in section.items():
            profile.values[key] = value
            profile.sources[key] = path

    for path in config_files:
        for section_name, section in (_parse_file(path) or {}).items():
            if section_name == DEFAULT_PROFILE:
                merge(DEFAULT_PROFILE, path, section)
            elif section_name.startswith("profile "):
                merge(section_name[len("profile "):].strip(), path, section)
            elif section_name.startswith("sso-session "):
                name = section_name[len("sso-session "):].strip()
                shared.sso_sessions.setdefault(name, {}).update(section)

    for path in credentials_files:
        for section_name, section in (_parse_file(path) or {}).items():
            merge(section_name, path, section)

    return shared


def load_shared_config_profile(
    profile: str,
    credentials_files: list[str],
    config_files: list[str],
) -> SharedConfigProfile:
    """Load a single merged profile; raise if no file defines it."""
    shared = load_shared_config(credentials_files, config_files)
    return shared.profile(profile, [*credentials_files, *config_files])


class _ProfileStaticProvider(BotocoreCredentialProvider):
    METHOD = "shared-config-profile"

    def __init__(self, profile_name: str, load_config: Callable[[], dict[str, Any]]) -> None:
        super().__init__()
        self._profile_name = profile_name
        self._load_config = load_config

    def load(self) -> BotocoreCredentials | None:
        profile = self._load_config().get("profiles", {}).get(self._profile_name, {})
        if "aws_access_key_id" not in profile and "aws_secret_access_key" not in profile:
            return None
        try:
            return BotocoreCredentials(
                profile["aws_access_key_id"],
                profile["aws_secret_access_key"],
                profile.get("aws_session_token"),
                method=self.METHOD,
            )
        except KeyError as exc:
            raise PartialCredentialsError(provider=self.METHOD, cred_var=str(exc)) from None


class _ProfileProviderBuilder:
    """Per-profile botocore providers reading the in-memory shared config."""

    def __init__(
        self,
        load_config: Callable[[], dict[str, Any]],
        client_creator: Callable[..., Any],
    ) -> None:
        self._load_config = load_config
        self._client_creator = client_creator

    def providers(self, profile_name: str, disable_env_vars: bool = False) -> list[Any]:
        return [
            AssumeRoleWithWebIdentityProvider(
                load_config=self._load_config,
                client_creator=self._client_creator,
                profile_name=profile_name,
                cache={},
                disable_env_vars=True,
            ),
            SSOProvider(
                load_config=self._load_config,
                client_creator=self._client_creator,
                profile_name=profile_name,
                cache={},
            ),
            _ProfileStaticProvider(profile_name, self._load_config),
            ProcessProvider(profile_name=profile_name, load_config=self._load_config),
        ]


def profile_credential_resolver(
    profile_name: str,
    shared: SharedConfig,
    region: str,
) -> CredentialResolver:
    """Build botocore's profile chain (assume role, web identity, SSO, process).

    Environment variables and instance metadata are not consulted: a named
    profile resolves through its own configuration or not at all.
    """
    full_config = shared.as_botocore_config()

    def load_config() -> dict[str, Any]:
        return full_config

    client_creator = functools.partial(
        isolated_botocore_session().create_client, region_name=region
    )
    builder = _ProfileProviderBuilder(load_config, client_creator)
    web_identity, sso, _static, process = builder.providers(profile_name)
    return CredentialResolver(
        [
            web_identity,
            sso,
            BotocoreAssumeRoleProvider(
                load_config=load_config,
                client_creator=client_creator,
                cache={},
                profile_name=profile_name,
                profile_provider_builder=builder,
            ),
            process,
        ]
    )


class SharedConfigCredentialsProvider:
    """Credentials stored under a profile in the shared files.

    Static keys are read directly. A ``named`` profile (one the caller asked
    for explicitly) without static keys is resolved through botocore's
    profile providers instead of being skipped, and fails if they find
    nothing.
    """

    def __init__(
        self,
        profile: str,
        credentials_files: list[str],
        config_files: list[str],
        *,
        named: bool = False,
        region: str = "",
    ) -> None:
        self._profile = profile
        self._credentials_files = list(credentials_files)
        self._config_files = list(config_files)
        self._named = named
        self._region = region

    @property
    def profile(self) -> str:
        return self._profile

    @property
    def named(self) -> bool:
        return self._named

    async def retrieve(self) -> Credentials:
        return await asyncio.to_thread(self._retrieve_sync)

    def _retrieve_sync(self) -> Credentials:
        shared = load_shared_config(self._credentials_files, self._config_files)
        profile = shared.profile(self._profile, [*self._credentials_files, *self._config_files])
        access_key = profile.get("aws_access_key_id")
        secret_key = profile.get("aws_secret_access_key")
        if not access_key and not secret_key:
            if self._named:
                return self._resolve_through_botocore(shared, profile)
            raise CredentialsNotFoundError(f"profile {self._profile} has no static credentials")
        if not secret_key:
            raise PartialCredentialsError(
                provider=f"profile {self._profile}", cred_var="aws_secret_access_key"
            )
        if not access_key:
            raise PartialCredentialsError(
                provider=f"profile {self._profile}", cred_var="aws_access_key_id"
            )
        return Credentials(
            access_key_id=access_key,
            secret_access_key=secret_key,
            session_token=profile.get("aws_session_token"),
            source=f"{SHARED_CONFIG_CREDENTIALS_NAME}: {profile.sources['aws_access_key_id']}",
        )

    def _resolve_through_botocore(
        self, shared: SharedConfig, profile: SharedConfigProfile
    ) -> Credentials:
        region = self._region or profile.get("region") or DEFAULT_REGION
        resolved = profile_credential_resolver(self._profile, shared, region).load_credentials()
        if resolved is None:
            raise InvalidConfigError(
                error_msg=f"profile {self._profile} has no credentials to resolve"
            )
        frozen = resolved.get_frozen_credentials()
        # RefreshableCredentials keeps its expiry private; static ones have none.
        expires = getattr(resolved, "_expiry_time", None)
        path = next(
            (profile.sources[key] for key in _PROFILE_CREDENTIAL_KEYS if key in profile.sources),
            "",
        )
        logger.info(
            "Resolved profile %s through botocore (method=%s)", self._profile, resolved.method
        )
        return Credentials(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token or "",
            source=f"{SHARED_CONFIG_CREDENTIALS_NAME}: {path}",
            can_expire=expires is not None,
            expires=expires,
        )


class InstanceMetadataCredentialsProvider:
    """Role credentials issued by the EC2 instance metadata service."""

    def __init__(
        self,
        env: EnvConfig,
        endpoint: str = "",
        timeout: float = 1.0,
        num_attempts: int = 1,
    ) -> None:
        self._disabled = env.ec2_metadata_disabled
        self._endpoint = endpoint or env.ec2_metadata_service_endpoint
        self._timeout = timeout
        self._num_attempts = num_attempts

    async def retrieve(self) -> Credentials:
        if self._disabled:
            raise CredentialsNotFoundError("EC2 instance metadata is disabled")
        return await asyncio.to_thread(self._retrieve_sync)

    def _fetcher(self) -> InstanceMetadataFetcher:
        config = {"ec2_metadata_service_endpoint": self._endpoint} if self._endpoint else None
        # An empty env keeps botocore from consulting os.environ directly.
        return InstanceMetadataFetcher(
            timeout=self._timeout,
            num_attempts=self._num_attempts,
            env={},
            config=config,
        )

    def _retrieve_sync(self) -> Credentials:
        data = self._fetcher().retrieve_iam_role_credentials()
        if not data:
            endpoint = self._endpoint or "default endpoint"
            raise CredentialsNotFoundError(
                f"no EC2 IMDS role credentials found ({endpoint})"
            )
        expires = data.get("expiry_time")
        logger.info("Retrieved EC2 instance role credentials (role=%s)", data.get("role_name"))
        return Credentials(
            access_key_id=data["access_key"],
            secret_access_key=data["secret_key"],
            session_token=data.get("token") or "",
            source=EC2_ROLE_PROVIDER_NAME,
            can_expire=expires is not None,
            expires=parse_timestamp(expires) if expires else None,
        )


class ChainCredentialsProvider:
    """Returns the credentials of the first provider that has some."""

    def __init__(self, providers: list[CredentialsProvider]) -> None:
        self._providers = list(providers)

    @property
    def providers(self) -> list[CredentialsProvider]:
        return list(self._providers)

    async def retrieve(self) -> Credentials:
        failures: list[str] = []
        for provider in self._providers:
            try:
                return await provider.retrieve()
            except CredentialsNotFoundError as exc:
                logger.debug("%s: %s", type(provider).__name__, exc)
                failures.append(str(exc))
        raise CredentialsNotFoundError(
            "no credential provider returned credentials: " + "; ".join(failures)
        )
