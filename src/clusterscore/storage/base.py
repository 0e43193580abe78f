"""Storage collaborator protocols.

A ResourceSource returns the live scanner reports for a resource kind. A
ReportStore reads and writes the two persisted compliance report records.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, TypeVar, runtime_checkable

from ..core.errors import ConfigurationError
from ..models.report import ClusterComplianceDetailReport, ClusterComplianceReport

Record = TypeVar("Record", ClusterComplianceReport, ClusterComplianceDetailReport)


@runtime_checkable
class ResourceSource(Protocol):
    def fetch_resources(self, kind: str) -> list[dict]: ...


@runtime_checkable
class ReportStore(Protocol):
    def get(self, model: type[Record], name: str) -> Record:
        """Return the named record or raise NotFoundError."""
        ...

    def create(self, record: Record) -> Record: ...

    def update(self, record: Record) -> Record: ...


def get_store(config: dict):
    """Factory for the configured backend. Every backend is both a source and a store."""
    store_config = config.get("store", {})
    backend = store_config.get("backend", "files")

    if backend == "files":
        from .files import FileStore
        return FileStore(Path(store_config.get("path", ".clusterscore")))
    elif backend == "kubernetes":
        from .kube import KubeClient
        return KubeClient(config.get("kubernetes", {}))
    elif backend == "memory":
        from .memory import MemoryStore
        return MemoryStore()
    else:
        raise ConfigurationError(f"Unknown store backend: {backend}")
