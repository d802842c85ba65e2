import argparse
import asyncio
import logging
import os

from .client import build_client
from .config import ConnectionProfile, ScanConfig, resolve_connection_profile, resolve_scan_config
from .errors import ConfigurationError, ExportError
from .export import DynamoItemSource, scan_and_export

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "out/dynamodb_items.csv"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="ddb-key-export",
        description="Append the primary keys of a DynamoDB table to a CSV file.",
    )
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_FILE,
        help=f"CSV file to append to (default: {DEFAULT_OUTPUT_FILE}).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail instead of writing a partial export when a scan page fails.",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        help="Logging level (default: env LOG_LEVEL or INFO).",
    )
    return parser.parse_args(argv)


async def run(profile: ConnectionProfile, scan_config: ScanConfig) -> int:
    async with build_client(profile) as client:
        return await scan_and_export(DynamoItemSource(client), scan_config)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Both resolvers run before any network call.
    try:
        scan_config = resolve_scan_config()
        profile = resolve_connection_profile()
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    scan_config.output_file = args.output
    if args.strict:
        scan_config.strict = True

    try:
        asyncio.run(run(profile, scan_config))
    except ExportError as e:
        logger.error(f"export failed: {e}")
        return 1

    print("Primary keys have been written to CSV file")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
