"""Show which credential source and partition a configuration resolves to.

    python -m awsbase --profile myprofile --region eu-west-1
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from awsbase.config import EnvConfig
from awsbase.errors import is_cannot_assume_role_error, is_no_valid_credential_sources_error
from awsbase.logging_utils import configure_logging
from awsbase.models import AssumeRole, Config
from awsbase.session import get_aws_session


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="awsbase", description=__doc__.splitlines()[0])
    parser.add_argument("--profile", default="")
    parser.add_argument("--region", default="")
    parser.add_argument("--role-arn", default="")
    parser.add_argument("--session-name", default="")
    parser.add_argument("--external-id", default="")
    parser.add_argument(
        "--shared-credentials-file",
        action="append",
        default=[],
        dest="shared_credentials_files",
    )
    parser.add_argument(
        "--shared-config-file",
        action="append",
        default=[],
        dest="shared_config_files",
    )
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> Config:
    assume_role = None
    if args.role_arn:
        assume_role = AssumeRole(
            role_arn=args.role_arn,
            session_name=args.session_name,
            external_id=args.external_id,
        )
    return Config(
        profile=args.profile,
        region=args.region,
        shared_credentials_files=args.shared_credentials_files,
        shared_config_files=args.shared_config_files,
        assume_role=assume_role,
        caller_name="awsbase",
    )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)
    logger = logging.getLogger("awsbase")

    config = _build_config(args)
    try:
        result = asyncio.run(get_aws_session(config, EnvConfig.from_environ()))
    except Exception as exc:
        if is_no_valid_credential_sources_error(exc) or is_cannot_assume_role_error(exc):
            logger.error("%s", exc)
            print(exc, file=sys.stderr)
            return 1
        raise

    print(f"credentials source: {result.credentials_source}")
    if result.region:
        print(f"region: {result.region}")
    if result.partition is not None:
        print(f"partition: {result.partition.id} ({result.partition.name})")
        print(f"dns suffix: {result.partition.dns_suffix}")
    elif result.region:
        print("partition: unknown")
    return 0


if __name__ == "__main__":
    sys.exit(main())
