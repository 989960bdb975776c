"""Create an Azure ML workspace and its dependent resources, reusing what already exists."""

import argparse
import os

from dotenv import load_dotenv

from ml_workspace import WorkspaceIdentity, authenticate, provision_workspace
from ml_workspace.config import (
    DEFAULT_LOCATION,
    RECLAIM_DELAY_SECONDS,
    RECLAIM_MAX_ATTEMPTS,
    configure_runtime,
)


def add_identity_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--subscription-id", default=os.environ.get("AZURE_SUBSCRIPTION_ID"))
    parser.add_argument("--resource-group", default=os.environ.get("AZURE_RESOURCE_GROUP"))
    parser.add_argument("--workspace-name", default=os.environ.get("AZURE_WORKSPACE_NAME"))
    parser.add_argument("--region", default=os.environ.get("AZURE_LOCATION", DEFAULT_LOCATION))
    parser.add_argument("--verbose", action="store_true", help="Log Azure SDK details")


def identity_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> WorkspaceIdentity:
    missing = [
        flag
        for flag, value in (
            ("--subscription-id", args.subscription_id),
            ("--resource-group", args.resource_group),
            ("--workspace-name", args.workspace_name),
        )
        if not value
    ]
    if missing:
        parser.error(f"missing required arguments: {', '.join(missing)}")
    return WorkspaceIdentity(
        subscription_id=args.subscription_id,
        resource_group=args.resource_group,
        workspace_name=args.workspace_name,
        region=args.region,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    add_identity_arguments(parser)
    parser.add_argument(
        "--reclaim-attempts",
        type=int,
        default=os.environ.get("ML_WORKSPACE_RECLAIM_ATTEMPTS", str(RECLAIM_MAX_ATTEMPTS)),
        help="Polls while waiting for a purged key vault name to free up",
    )
    parser.add_argument(
        "--reclaim-delay",
        type=float,
        default=os.environ.get("ML_WORKSPACE_RECLAIM_DELAY_SECONDS", str(RECLAIM_DELAY_SECONDS)),
        help="Seconds between those polls",
    )
    return parser


def main(argv=None):
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    identity = identity_from_args(parser, args)
    if args.reclaim_attempts < 1:
        parser.error("--reclaim-attempts must be at least 1")

    configure_runtime(verbose=args.verbose)
    session = authenticate(identity.subscription_id)
    provision_workspace(
        session,
        identity,
        max_attempts=args.reclaim_attempts,
        delay_seconds=args.reclaim_delay,
    )


if __name__ == "__main__":
    main()
