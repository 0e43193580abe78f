"""Compliance spec data models."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from .base import WireModel


class SpecCheck(WireModel):
    id: str


class Mapping(WireModel):
    """Binds a control to exactly one scanner and the checks it evaluates."""

    scanner: str
    checks: list[SpecCheck] = []


class Control(WireModel):
    """A single compliance control from a spec."""

    id: str
    name: str = ""
    description: str = ""
    severity: str = ""
    kinds: list[str] = []
    mapping: Mapping


class ReportSpec(WireModel):
    """Full compliance spec: metadata plus an ordered list of controls."""

    model_config = ConfigDict(extra="allow")

    name: str
    kind: str = ""
    description: str = ""
    version: str = ""
    controls: list[Control] = Field(default_factory=list)
