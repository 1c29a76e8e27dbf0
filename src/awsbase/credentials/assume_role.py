"""STS AssumeRole credential provider.

The base credentials are exchanged for temporary role credentials on every
refresh. Optional request fields are omitted, never sent empty: an empty
``Policy`` or ``PolicyArns`` list is not the same as leaving them out.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import timedelta
from typing import Any

from botocore.config import Config as BotocoreConfig
from botocore.exceptions import ClientError

from awsbase.credentials.providers import (
    Credentials,
    CredentialsProvider,
    isolated_botocore_session,
)
from awsbase.models import AssumeRole

logger = logging.getLogger(__name__)

ASSUME_ROLE_PROVIDER_NAME = "AssumeRoleProvider"

DEFAULT_DURATION = timedelta(minutes=15)
DEFAULT_STS_REGION = "us-east-1"


def build_assume_role_params(role: AssumeRole, session_name: str) -> dict[str, Any]:
    """Translate ``role`` into AssumeRole API parameters."""
    duration = role.duration or DEFAULT_DURATION
    params: dict[str, Any] = {
        "RoleArn": role.role_arn,
        "RoleSessionName": session_name,
        "DurationSeconds": int(duration.total_seconds()),
    }

    if role.external_id:
        params["ExternalId"] = role.external_id

    if role.policy:
        params["Policy"] = role.policy

    if role.policy_arns:
        params["PolicyArns"] = [{"arn": arn} for arn in role.policy_arns]

    if role.tags:
        params["Tags"] = [{"Key": key, "Value": value} for key, value in role.tags.items()]

    if role.transitive_tag_keys:
        params["TransitiveTagKeys"] = list(role.transitive_tag_keys)

    return params


class AssumeRoleProvider:
    """Exchanges base credentials for role credentials through STS."""

    def __init__(
        self,
        base: CredentialsProvider,
        role: AssumeRole,
        *,
        region: str = DEFAULT_STS_REGION,
        endpoint_url: str | None = None,
        connect_timeout: int = 5,
        read_timeout: int = 15,
    ) -> None:
        self._base = base
        self._role = role
        self._region = region
        self._endpoint_url = endpoint_url
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout

    @property
    def role(self) -> AssumeRole:
        return self._role

    def _get_client(self, base: Credentials) -> Any:
        # The base credentials can change between refreshes, so the client is not reused.
        return isolated_botocore_session().create_client(
            "sts",
            region_name=self._region,
            endpoint_url=self._endpoint_url,
            aws_access_key_id=base.access_key_id,
            aws_secret_access_key=base.secret_access_key,
            aws_session_token=base.session_token or None,
            config=BotocoreConfig(
                connect_timeout=self._connect_timeout,
                read_timeout=self._read_timeout,
                retries={"total_max_attempts": 1},
            ),
        )

    def _session_name(self) -> str:
        return self._role.session_name or f"awsbase-{time.time_ns()}"

    async def retrieve(self) -> Credentials:
        base = await self._base.retrieve()
        return await asyncio.to_thread(self._assume_role_sync, base)

    def _assume_role_sync(self, base: Credentials) -> Credentials:
        client = self._get_client(base)
        params = build_assume_role_params(self._role, self._session_name())

        try:
            response = client.assume_role(**params)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            logger.warning(
                "STS AssumeRole failed: role=%s, session=%s, error=%s: %s",
                self._role.role_arn,
                params["RoleSessionName"],
                error.get("Code", "Unknown"),
                error.get("Message", str(exc)),
            )
            raise

        creds = response["Credentials"]
        logger.debug(
            "Assumed role: %s, session=%s", self._role.role_arn, params["RoleSessionName"]
        )

        return Credentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            source=ASSUME_ROLE_PROVIDER_NAME,
            can_expire=True,
            expires=creds["Expiration"],
        )
