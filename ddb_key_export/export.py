import csv
import logging
from pathlib import Path
from typing import AsyncIterator, Iterable, Iterator, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from .config import ScanConfig
from .errors import ScanError, WriteError

logger = logging.getLogger(__name__)

# DynamoDB caps a scan page at 1MB regardless of this limit.
PAGE_SIZE = 1000


class ItemSource(Protocol):
    def scan_pages(
        self, table_name: str, attribute_name: str, page_size: int = PAGE_SIZE
    ) -> AsyncIterator[list]:
        ...


class DynamoItemSource:
    """Projected table scan driven by the client's scan paginator."""

    def __init__(self, client):
        self._client = client

    async def scan_pages(self, table_name, attribute_name, page_size=PAGE_SIZE):
        paginator = self._client.get_paginator("scan")
        pages = paginator.paginate(
            TableName=table_name,
            ProjectionExpression="#pk",
            ExpressionAttributeNames={"#pk": attribute_name},
            Select="SPECIFIC_ATTRIBUTES",
            Limit=page_size,
        )
        async for page in pages:
            yield page.get("Items", [])


async def collect_items(source: ItemSource, config: ScanConfig) -> list:
    """
    Fetch every page of the scan and concatenate the items in scan order.

    A failing page stops the scan; the items gathered up to that point are
    attached to the raised ScanError.
    """
    items = []
    page_count = 0
    try:
        async for page in source.scan_pages(
            config.table_name, config.primary_key_name, PAGE_SIZE
        ):
            page_count += 1
            items.extend(page)
            logger.debug(f"page {page_count}: {len(page)} items")
    except (ClientError, BotoCoreError) as e:
        raise ScanError(
            f"scan of {config.table_name} failed after {page_count} pages: {e}",
            partial=items,
        ) from e

    logger.info(f"scanned {config.table_name}: {len(items)} items in {page_count} pages")
    return items


def primary_key_values(items: Iterable[dict], primary_key_name: str) -> Iterator[str]:
    # Only string-typed values are exported; anything else is skipped.
    for item in items:
        value = item.get(primary_key_name)
        if isinstance(value, dict) and "S" in value:
            yield value["S"]


def write_keys(values: Iterable[str], output_file: str) -> int:
    """
    Append one single-column CSV record per value to output_file.

    The file (and its directory) is created when missing. Existing content is
    kept, so running the export twice duplicates every key. No header row is
    written.
    """
    if not output_file:
        raise WriteError("output file is not set")

    path = Path(output_file)
    written = 0
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            for value in values:
                writer.writerow([value])
                written += 1
    except OSError as e:
        raise WriteError(f"cannot write {output_file}: {e}") from e

    return written


async def scan_and_export(source: ItemSource, config: ScanConfig) -> int:
    """Scan the table and append its string primary keys to the output file.

    In strict mode a scan failure is raised and nothing is written. Otherwise
    the failure is logged and whatever was collected before it is written.
    Returns the number of records written.
    """
    try:
        items = await collect_items(source, config)
    except ScanError as e:
        if config.strict:
            raise
        logger.error(f"Error: {e}")
        items = e.partial

    written = write_keys(primary_key_values(items, config.primary_key_name), config.output_file)
    logger.info(f"wrote {written} keys to {config.output_file}")
    return written
