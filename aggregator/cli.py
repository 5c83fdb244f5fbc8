"""CLI for reading campaign views and managing campaign metadata."""

import argparse
import asyncio
import json
import sys
from typing import Any

from aggregator.config import Config
from aggregator.eth.client import LedgerClient
from aggregator.log import get_logger, setup_logging
from aggregator.services import (
    MetadataPublisher,
    MetadataStore,
    build_aggregator,
    build_gateway,
)

logger = get_logger(__name__)


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def metadata_fields(args: argparse.Namespace) -> dict[str, Any]:
    """Collect upload fields from CLI arguments."""
    fields = {
        "title": args.title,
        "description": args.description,
        "imageUrl": args.image_url,
        "videoUrl": args.video_url,
        "goal": args.goal,
    }
    if args.deadline is not None:
        fields["deadline"] = args.deadline
    return fields


async def show_campaign(config: Config, campaign_id: int, uri: str | None) -> None:
    """Print the view for one campaign."""
    view = await build_aggregator(config).aggregate(campaign_id, uri)
    print_json(view.to_json_dict())


async def list_campaigns(config: Config) -> None:
    """Print views for all campaigns."""
    views = await build_aggregator(config).list_campaigns()
    print_json([view.to_json_dict() for view in views])


async def lookup_metadata(config: Config, campaign_id: str) -> int:
    """Print pinned metadata for a campaign id.

    Returns:
        Process exit code
    """
    result = await build_gateway(config).lookup(campaign_id)
    print_json(result.body)
    return 0 if result.ok else 1


async def upload_metadata(config: Config, args: argparse.Namespace) -> int:
    """Upload metadata for an existing campaign id.

    Returns:
        Process exit code
    """
    body = {"campaignId": args.campaign_id, **metadata_fields(args)}
    result = await build_gateway(config).upload(body)
    print_json(result.body)
    return 0 if result.ok else 1


async def publish_metadata(config: Config, args: argparse.Namespace) -> int:
    """Upload metadata for the campaign created by a transaction.

    Returns:
        Process exit code
    """
    ledger = LedgerClient(config)
    receipt = await ledger.get_transaction_receipt(args.tx_hash)

    uri = await MetadataPublisher(MetadataStore(config)).publish(receipt, metadata_fields(args))
    if uri is None:
        print("Metadata was not published", file=sys.stderr)
        return 1

    print(uri)
    return 0


async def show_status(config: Config) -> None:
    """Print ledger connectivity and configuration status."""
    ledger = LedgerClient(config)
    connected = await ledger.is_connected()

    print(f"RPC URL: {config.rpc_url}")
    print(f"Contract Address: {config.contract_address}")
    print(f"RPC Connected: {connected}")
    print(f"Pinata Configured: {config.has_pinata_jwt}")
    print(f"IPFS Gateway: {config.ipfs_gateway_url}")

    if connected:
        print(f"Total Campaigns: {await ledger.campaign_count()}")


def add_metadata_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--title", type=str, required=True, help="Campaign title")
    parser.add_argument("--description", type=str, default="", help="Campaign description")
    parser.add_argument("--image-url", type=str, default="", help="Image URL")
    parser.add_argument("--video-url", type=str, default="", help="Video URL")
    parser.add_argument("--goal", type=str, default="", help="Goal display string (ETH)")
    parser.add_argument("--deadline", type=int, help="Deadline (unix timestamp)")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        description="Crowdfunding campaign aggregator",
        prog="python -m aggregator",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    show_parser = subparsers.add_parser("show", help="Show one campaign view")
    show_parser.add_argument("campaign_id", type=int, help="Campaign id")
    show_parser.add_argument("--uri", type=str, help="Metadata content address (ipfs://...)")

    subparsers.add_parser("list", help="List all campaign views")

    lookup_parser = subparsers.add_parser("lookup", help="Look up pinned metadata by campaign id")
    lookup_parser.add_argument("campaign_id", type=str, help="Campaign id")

    upload_parser = subparsers.add_parser("upload", help="Upload metadata for a campaign id")
    upload_parser.add_argument("--campaign-id", type=str, required=True, help="Campaign id")
    add_metadata_arguments(upload_parser)

    publish_parser = subparsers.add_parser(
        "publish", help="Upload metadata for the campaign created by a transaction"
    )
    publish_parser.add_argument("--tx-hash", type=str, required=True, help="createCampaign transaction hash")
    add_metadata_arguments(publish_parser)

    subparsers.add_parser("status", help="Show connectivity and configuration status")

    return parser


def main() -> None:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Load config
    try:
        config = Config.from_env()
        config.validate()
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    # Setup logging
    setup_logging(config)

    exit_code = 0
    try:
        if args.command == "show":
            asyncio.run(show_campaign(config, args.campaign_id, args.uri))
        elif args.command == "list":
            asyncio.run(list_campaigns(config))
        elif args.command == "lookup":
            exit_code = asyncio.run(lookup_metadata(config, args.campaign_id))
        elif args.command == "upload":
            exit_code = asyncio.run(upload_metadata(config, args))
        elif args.command == "publish":
            exit_code = asyncio.run(publish_metadata(config, args))
        elif args.command == "status":
            asyncio.run(show_status(config))
        else:
            parser.print_help()
            exit_code = 1

    except KeyboardInterrupt:
        print("\nInterrupted")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
