"""Directory-backed resource source and report store.

Layout under the root directory:

    resources/<Kind>.yaml                       scanner reports for one kind
    clustercompliancereports/<name>.yaml        summary report records
    clustercompliancedetailreports/<name>.yaml  detail report records

A resource file holds either a YAML list of objects or a Kubernetes list
document with an ``items`` key.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from ..core.errors import CollaboratorError, ConflictError, NotFoundError
from .base import Record


class FileStore:
    def __init__(self, root: Path):
        self.root = Path(root)

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def fetch_resources(self, kind: str) -> list[dict]:
        path = self.root / "resources" / f"{kind}.yaml"
        if not path.exists():
            return []
        data = self._read_yaml(path)
        if data is None:
            return []
        if isinstance(data, dict):
            if "items" not in data:
                raise CollaboratorError(
                    f"Resource file {path} holds a single object, expected a list"
                )
            data = data["items"] or []
        if not isinstance(data, list):
            raise CollaboratorError(f"Resource file {path} must hold a list of objects")
        return [item for item in data if isinstance(item, dict)]

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def _record_path(self, model: type, name: str) -> Path:
        return self.root / model.PLURAL / f"{name}.yaml"

    def get(self, model: type[Record], name: str) -> Record:
        path = self._record_path(model, name)
        if not path.exists():
            raise NotFoundError(model.KIND, name)
        data = self._read_yaml(path) or {}
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise CollaboratorError(f"Invalid {model.KIND} record in {path}: {e}") from e

    def create(self, record: Record) -> Record:
        path = self._record_path(type(record), record.metadata.name)
        if path.exists():
            raise ConflictError(f"{record.KIND} {record.metadata.name} already exists")
        stored = record.model_copy(deep=True)
        stored.metadata.resource_version = "1"
        self._write_yaml(path, stored.to_wire())
        return stored

    def update(self, record: Record) -> Record:
        current = self.get(type(record), record.metadata.name)
        if record.metadata.resource_version != current.metadata.resource_version:
            raise ConflictError(
                f"{record.KIND} {record.metadata.name} was modified since it was read"
            )
        stored = record.model_copy(deep=True)
        stored.metadata.resource_version = str(int(current.metadata.resource_version or 0) + 1)
        self._write_yaml(self._record_path(type(record), record.metadata.name), stored.to_wire())
        return stored

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _read_yaml(path: Path):
        try:
            return yaml.safe_load(path.read_text(encoding="utf-8-sig"))
        except (OSError, yaml.YAMLError) as e:
            raise CollaboratorError(f"Failed to read {path}: {e}") from e

    @staticmethod
    def _write_yaml(path: Path, data: dict) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            content = yaml.dump(
                data,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                width=120,
            )
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise CollaboratorError(f"Failed to write {path}: {e}") from e
