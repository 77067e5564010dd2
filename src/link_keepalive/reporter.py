"""End-of-run summary reporting."""

import logging
from datetime import datetime
from typing import List, Optional

from link_keepalive.exceptions import NoSuccessfulVerificationsError
from link_keepalive.models import RunStatistics
from link_keepalive.utils import format_bytes

logger = logging.getLogger(__name__)

RULE = '=' * 60


def build_summary(stats: RunStatistics, verbose: bool = False,
                  now: Optional[datetime] = None) -> List[str]:
    """
    Format run statistics as a fixed-layout summary block.

    Args:
        stats: Statistics of the finished run
        verbose: Include the numbered list of errors
        now: Finish time; defaults to the current time

    Returns:
        Summary lines
    """
    finished_at = now or datetime.now()
    elapsed = (finished_at - stats.started_at).total_seconds()

    lines = [
        RULE,
        'SUMMARY',
        RULE,
        f"Finished at: {finished_at.isoformat(timespec='seconds')}",
        f"Execution time: {elapsed:.2f}s",
        f"URLs processed: {stats.targets_processed}/{stats.total_targets}",
        f"Download links found: {stats.links_found}",
        f"Successful downloads: {stats.successful_verifications}",
        f"Failed downloads: {stats.failed_verifications}",
        f"Bytes transferred: {format_bytes(stats.bytes_transferred)} ({stats.bytes_transferred} bytes)",
    ]

    if stats.errors:
        lines.append(f"Errors encountered: {len(stats.errors)}")
        if verbose:
            for index, record in enumerate(stats.errors, start=1):
                lines.append(f"  {index}. {record.url}: {record.error}")

    return lines


def report(stats: RunStatistics, verbose: bool = False,
           now: Optional[datetime] = None) -> List[str]:
    """Log the summary block and return its lines."""
    lines = build_summary(stats, verbose=verbose, now=now)
    for line in lines:
        logger.info(line)
    return lines


def check_outcome(stats: RunStatistics):
    """Raise if links were discovered but not a single one could be verified."""
    if stats.links_found > 0 and stats.successful_verifications == 0:
        raise NoSuccessfulVerificationsError(
            'No successful downloads were made despite finding download links'
        )
