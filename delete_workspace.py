"""Delete an Azure ML workspace, its dependent resources and optionally its resource group."""

import argparse

from dotenv import load_dotenv

from create_workspace import add_identity_arguments, identity_from_args
from ml_workspace import ConsoleConfirmation, StaticConfirmation, authenticate, teardown_workspace
from ml_workspace.config import configure_runtime


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    add_identity_arguments(parser)
    parser.add_argument(
        "--delete-resource-group",
        action="store_true",
        help="Also delete the resource group (asks for confirmation)",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt for --delete-resource-group",
    )
    return parser


def main(argv=None):
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    identity = identity_from_args(parser, args)

    configure_runtime(verbose=args.verbose)
    session = authenticate(identity.subscription_id)
    confirmation = StaticConfirmation(True) if args.yes else ConsoleConfirmation()
    teardown_workspace(
        session,
        identity,
        delete_group=args.delete_resource_group,
        confirmation=confirmation,
    )


if __name__ == "__main__":
    main()
