"""Compliance spec YAML loading.

A spec file is either a bare spec document or a ClusterComplianceReport
manifest carrying the spec under ``spec:``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from ..core.errors import ConfigurationError
from ..models.spec import ReportSpec

logger = logging.getLogger(__name__)


def _spec_document(content: object) -> Optional[dict]:
    if not isinstance(content, dict):
        return None
    if isinstance(content.get("spec"), dict):
        return content["spec"]
    return content


def load_spec(path: Path) -> ReportSpec:
    """Parse one spec file."""
    try:
        content = yaml.safe_load(Path(path).read_text(encoding="utf-8-sig"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read spec {path}: {e}") from e

    document = _spec_document(content)
    if document is None:
        raise ConfigurationError(f"Spec {path} is not a mapping")
    try:
        return ReportSpec.model_validate(document)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid spec {path}: {e}") from e


def get_available_specs(specs_dir: Path) -> list[dict]:
    """Get list of all compliance specs in a directory."""
    specs: list[dict] = []

    if not specs_dir.exists():
        return specs

    for yaml_file in sorted(specs_dir.rglob("*.yaml")):
        try:
            document = _spec_document(yaml.safe_load(yaml_file.read_text(encoding="utf-8-sig")))
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Skipping unreadable spec %s: %s", yaml_file, e)
            continue
        if document and document.get("name"):
            specs.append({
                "name": document["name"],
                "kind": document.get("kind", ""),
                "version": str(document.get("version", "")),
                "description": document.get("description", ""),
                "controls": len(document.get("controls") or []),
                "path": str(yaml_file),
            })

    return specs


def get_spec_by_name(name: str, specs_dir: Path) -> Optional[ReportSpec]:
    """Load a specific spec by name (case-insensitive)."""
    specs = get_available_specs(specs_dir)
    match = next((s for s in specs if s["name"].lower() == name.lower()), None)

    if not match:
        return None

    return load_spec(Path(match["path"]))
