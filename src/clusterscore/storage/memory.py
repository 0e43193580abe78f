"""In-memory resource source and report store."""

from __future__ import annotations

from typing import Optional

from ..core.errors import ConflictError, NotFoundError
from .base import Record


class MemoryStore:
    """Keeps resources and records in dicts. Records are copied on the way in and out."""

    def __init__(self, resources: Optional[dict[str, list[dict]]] = None):
        self.resources: dict[str, list[dict]] = dict(resources or {})
        self.records: dict[tuple[str, str], object] = {}
        self.writes: list[tuple[str, str, str]] = []

    def fetch_resources(self, kind: str) -> list[dict]:
        return list(self.resources.get(kind, []))

    def get(self, model: type[Record], name: str) -> Record:
        record = self.records.get((model.KIND, name))
        if record is None:
            raise NotFoundError(model.KIND, name)
        return record.model_copy(deep=True)

    def create(self, record: Record) -> Record:
        key = (record.KIND, record.metadata.name)
        if key in self.records:
            raise ConflictError(f"{record.KIND} {record.metadata.name} already exists")
        stored = record.model_copy(deep=True)
        stored.metadata.resource_version = "1"
        self.records[key] = stored
        self.writes.append(("create", record.KIND, record.metadata.name))
        return stored.model_copy(deep=True)

    def update(self, record: Record) -> Record:
        key = (record.KIND, record.metadata.name)
        current = self.records.get(key)
        if current is None:
            raise NotFoundError(record.KIND, record.metadata.name)
        if record.metadata.resource_version != current.metadata.resource_version:
            raise ConflictError(
                f"{record.KIND} {record.metadata.name} was modified "
                f"(have {record.metadata.resource_version}, "
                f"stored {current.metadata.resource_version})"
            )
        stored = record.model_copy(deep=True)
        stored.metadata.resource_version = str(int(current.metadata.resource_version or 0) + 1)
        self.records[key] = stored
        self.writes.append(("update", record.KIND, record.metadata.name))
        return stored.model_copy(deep=True)
