"""Persisted compliance report models.

Records keep unknown fields so that a read-modify-write cycle preserves data
owned by other writers.
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import ConfigDict, Field

from .base import WireModel
from .results import ScannerCheckResult
from .spec import ReportSpec

API_VERSION = "aquasecurity.github.io/v1alpha1"


class ObjectMeta(WireModel):
    model_config = ConfigDict(extra="allow")

    name: str
    labels: dict[str, str] = {}
    annotations: dict[str, str] = {}
    resource_version: Optional[str] = None


class ControlCheck(WireModel):
    """Pass/fail totals for one control."""

    id: str
    name: str = ""
    description: str = ""
    severity: str = ""
    pass_total: int = 0
    fail_total: int = 0


class ControlCheckDetails(WireModel):
    """Full scanner results for one (control, check) pair."""

    id: str
    name: str = ""
    description: str = ""
    severity: str = ""
    check_results: list[ScannerCheckResult] = []


class ComplianceSummary(WireModel):
    pass_count: int = 0
    fail_count: int = 0


class ReportStatus(WireModel):
    model_config = ConfigDict(extra="allow")

    update_timestamp: Optional[datetime] = None
    summary: ComplianceSummary = ComplianceSummary()
    control_checks: list[ControlCheck] = []


class ComplianceType(WireModel):
    kind: str = ""
    name: str = ""
    description: str = ""
    version: str = ""


class ClusterComplianceDetailReportData(WireModel):
    model_config = ConfigDict(extra="allow")

    update_timestamp: Optional[datetime] = None
    summary: ComplianceSummary = ComplianceSummary()
    type: ComplianceType = ComplianceType()
    control_checks: list[ControlCheckDetails] = []


class ClusterComplianceReport(WireModel):
    """Summary report. Pre-created by an operator, updated by the engine."""

    model_config = ConfigDict(extra="allow")

    KIND: ClassVar[str] = "ClusterComplianceReport"
    PLURAL: ClassVar[str] = "clustercompliancereports"

    api_version: str = API_VERSION
    kind: str = KIND
    metadata: ObjectMeta
    spec: Optional[ReportSpec] = None
    status: ReportStatus = Field(default_factory=ReportStatus)


class ClusterComplianceDetailReport(WireModel):
    """Detail report. Created on first run, updated afterwards."""

    model_config = ConfigDict(extra="allow")

    KIND: ClassVar[str] = "ClusterComplianceDetailReport"
    PLURAL: ClassVar[str] = "clustercompliancedetailreports"

    api_version: str = API_VERSION
    kind: str = KIND
    metadata: ObjectMeta
    report: ClusterComplianceDetailReportData = Field(
        default_factory=ClusterComplianceDetailReportData
    )
