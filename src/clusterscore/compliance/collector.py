"""Scanner result collection.

Fetches scanner reports for every (scanner, kind) pair in the index, runs
the scanner's mapper over them, and merges everything into one table of
check id -> results.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..models.results import ScannerCheckResult
from ..scanners.base import ResultMapper
from ..scanners.registry import get_result_mapper
from ..storage.base import ResourceSource
from .indexer import SpecIndex

logger = logging.getLogger(__name__)


def merge_check_results(
    table: dict[str, list[ScannerCheckResult]],
    mapped: Optional[dict[str, ScannerCheckResult]],
) -> None:
    """Append mapper output to the table. Existing entries are never replaced."""
    if not mapped:
        return
    for check_id, result in mapped.items():
        table.setdefault(check_id, []).append(result)


def collect_check_results(
    index: SpecIndex,
    source: ResourceSource,
    registry: Optional[dict[str, ResultMapper]] = None,
) -> dict[str, list[ScannerCheckResult]]:
    """Build the check id -> results table for a run.

    Fetch errors and unknown scanners propagate and abort the run.
    """
    table: dict[str, list[ScannerCheckResult]] = {}
    for scanner, kinds in index.scanner_kinds.items():
        mapper = get_result_mapper(scanner, registry)
        for kind in sorted(kinds):
            resources = source.fetch_resources(kind)
            mapped = mapper.map_report_data(kind, resources)
            logger.debug(
                "%s/%s: %d resources, %d checks",
                scanner, kind, len(resources), len(mapped or {}),
            )
            merge_check_results(table, mapped)
    return table
