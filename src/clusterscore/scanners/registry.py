"""Static registry of scanner result mappers, keyed by scanner identity."""

from __future__ import annotations

from typing import Optional

from ..core.errors import UnknownScannerError
from .base import CONFIG_AUDIT, KUBE_BENCH, ResultMapper
from .config_audit import ConfigAuditMapper
from .kube_bench import KubeBenchMapper

MAPPERS: dict[str, ResultMapper] = {
    KUBE_BENCH: KubeBenchMapper(),
    CONFIG_AUDIT: ConfigAuditMapper(),
}


def get_result_mapper(
    scanner: str,
    registry: Optional[dict[str, ResultMapper]] = None,
) -> ResultMapper:
    """Look up the mapper for a scanner identity."""
    mappers = MAPPERS if registry is None else registry
    mapper = mappers.get(scanner)
    if mapper is None:
        raise UnknownScannerError(scanner)
    return mapper
