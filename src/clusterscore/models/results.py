"""Scanner result data models."""

from __future__ import annotations

from enum import Enum

from .base import WireModel


class ResultStatus(str, Enum):
    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"


class ResultDetails(WireModel):
    """One resource instance's outcome for one check."""

    name: str = ""
    namespace: str = ""
    msg: str = ""
    status: ResultStatus


class ScannerCheckResult(WireModel):
    id: str
    object_type: str = ""
    remediation: str = ""
    details: list[ResultDetails] = []
