"""Summary and detail report construction and upsert.

The merge functions are pure: they take the stored record and the freshly
computed values and return a copy with only the engine-owned fields
replaced. Everything else on the stored record is carried over untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ..core.errors import MissingReportError, NotFoundError
from ..models.report import (
    ClusterComplianceDetailReport,
    ClusterComplianceDetailReportData,
    ClusterComplianceReport,
    ComplianceSummary,
    ComplianceType,
    ControlCheck,
    ControlCheckDetails,
    ObjectMeta,
    ReportStatus,
)
from ..models.spec import ReportSpec
from ..storage.base import ReportStore
from .aggregator import SummaryTotal

logger = logging.getLogger(__name__)

MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"
SPEC_LABEL = "clusterscore.io/spec"
MANAGED_BY = "clusterscore"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def summary_report_name(spec: ReportSpec) -> str:
    return spec.name.lower()


def detail_report_name(spec: ReportSpec) -> str:
    return f"{spec.name}-details".lower()


def report_labels(spec: ReportSpec) -> dict[str, str]:
    return {MANAGED_BY_LABEL: MANAGED_BY, SPEC_LABEL: spec.name.lower()}


def next_timestamp(previous: Optional[datetime], now: datetime) -> datetime:
    """Return ``now``, nudged forward so it is strictly after ``previous``."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if previous is None:
        return now
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


# ---------------------------------------------------------------------------
# Building fresh values
# ---------------------------------------------------------------------------

def build_report_status(
    totals: SummaryTotal,
    checks: list[ControlCheck],
    now: datetime,
) -> ReportStatus:
    """Summary status. The control list is dropped when nothing was evaluated."""
    return ReportStatus(
        update_timestamp=now,
        summary=ComplianceSummary(pass_count=totals.pass_count, fail_count=totals.fail_count),
        control_checks=list(checks) if totals.total > 0 else [],
    )


def build_detail_report_data(
    spec: ReportSpec,
    totals: SummaryTotal,
    details: list[ControlCheckDetails],
    now: datetime,
) -> ClusterComplianceDetailReportData:
    return ClusterComplianceDetailReportData(
        update_timestamp=now,
        summary=ComplianceSummary(pass_count=totals.pass_count, fail_count=totals.fail_count),
        type=ComplianceType(
            kind=spec.kind.lower(),
            name=detail_report_name(spec),
            description=spec.description.lower(),
            version=spec.version,
        ),
        control_checks=details,
    )


# ---------------------------------------------------------------------------
# Merging into stored records
# ---------------------------------------------------------------------------

def merge_summary_report(
    existing: ClusterComplianceReport,
    spec: ReportSpec,
    status: ReportStatus,
    labels: dict[str, str],
) -> ClusterComplianceReport:
    """Replace labels, status and spec; keep every other field of ``existing``."""
    previous = existing.status.update_timestamp if existing.status else None
    stamped = status.model_copy(
        update={"update_timestamp": next_timestamp(previous, status.update_timestamp)}
    )
    return existing.model_copy(
        deep=True,
        update={
            "metadata": existing.metadata.model_copy(update={"labels": dict(labels)}),
            "status": stamped,
            "spec": spec,
        },
    )


def merge_detail_report(
    existing: ClusterComplianceDetailReport,
    data: ClusterComplianceDetailReportData,
    labels: dict[str, str],
) -> ClusterComplianceDetailReport:
    """Replace labels and report data; keep every other field of ``existing``."""
    previous = existing.report.update_timestamp if existing.report else None
    stamped = data.model_copy(
        update={"update_timestamp": next_timestamp(previous, data.update_timestamp)}
    )
    return existing.model_copy(
        deep=True,
        update={
            "metadata": existing.metadata.model_copy(update={"labels": dict(labels)}),
            "report": stamped,
        },
    )


# ---------------------------------------------------------------------------
# Upsert
# ---------------------------------------------------------------------------

def upsert_detail_report(
    store: ReportStore,
    spec: ReportSpec,
    data: ClusterComplianceDetailReportData,
    labels: dict[str, str],
) -> ClusterComplianceDetailReport:
    """Update the detail report, creating it on first run.

    Only a not-found lookup selects the create path; any other lookup
    failure propagates.
    """
    name = detail_report_name(spec)
    try:
        existing = store.get(ClusterComplianceDetailReport, name)
    except NotFoundError:
        logger.info("Creating %s %s", ClusterComplianceDetailReport.KIND, name)
        return store.create(ClusterComplianceDetailReport(
            metadata=ObjectMeta(name=name, labels=dict(labels)),
            report=data,
        ))

    logger.info("Updating %s %s", ClusterComplianceDetailReport.KIND, name)
    return store.update(merge_detail_report(existing, data, labels))


def update_summary_report(
    store: ReportStore,
    spec: ReportSpec,
    status: ReportStatus,
    labels: dict[str, str],
) -> ClusterComplianceReport:
    """Update the pre-created summary report. A missing record is a configuration error."""
    name = summary_report_name(spec)
    try:
        existing = store.get(ClusterComplianceReport, name)
    except NotFoundError as e:
        raise MissingReportError(name) from e

    logger.info("Updating %s %s", ClusterComplianceReport.KIND, name)
    return store.update(merge_summary_report(existing, spec, status, labels))
