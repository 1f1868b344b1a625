"""
Preview of the links that are about to be imported.
"""

from typing import Sequence

from common.logging import get_or_setup_logger

UNTITLED = "Untitled Link"


def preview_records(records: Sequence, limit: int = 10) -> None:
    """
    Log a preview of link records.

    Parameters
    ----------
    records : Sequence[LinkRecord]
        Records to preview, in import order.
    limit : int, optional
        Maximum number of records to show (default: 10).

    Returns
    -------
    None
        The preview is written to the log.
    """
    logger = get_or_setup_logger()

    if not records:
        logger.info("No links to preview")
        return

    total = len(records)
    preview_count = min(limit, total)

    logger.info(f"Previewing {preview_count} of {total} links:")

    for i, record in enumerate(records[:preview_count], 1):
        logger.info(f"--- Link {i} of {preview_count} ---")
        logger.info(f"Title: {record.title if record.title is not None else UNTITLED}")
        logger.info(f"URL: {record.url}")
        if record.tags:
            logger.info(f"Tags: {', '.join(record.tags)}")
        if record.time_added:
            logger.info(f"Added: {record.time_added.strftime('%Y-%m-%d %H:%M')}")

    if total > preview_count:
        logger.info(f"... and {total - preview_count} more links (use --preview-limit to show more)")
