"""Compliance report generation.

Pipeline: index the spec, collect scanner results, aggregate per control,
reduce to global totals, then write the detail report followed by the
summary report. Nothing is persisted before the final two writes, and the
two writes are not atomic: a missing summary record fails the run after
the detail report has already been written.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..models.report import ClusterComplianceReport
from ..models.spec import ReportSpec
from ..scanners.base import ResultMapper
from ..storage.base import ReportStore, ResourceSource
from .aggregator import control_check_details, control_checks, get_totals
from .collector import collect_check_results
from .indexer import build_spec_index
from .reports import (
    Clock,
    build_detail_report_data,
    build_report_status,
    report_labels,
    upsert_detail_report,
    update_summary_report,
    utc_now,
)

logger = logging.getLogger(__name__)


class ComplianceManager:
    """Generates compliance reports from scanner results.

    Holds no state between runs. Concurrent runs for the same spec name must
    be serialized by the caller.
    """

    def __init__(
        self,
        source: ResourceSource,
        store: ReportStore,
        registry: Optional[dict[str, ResultMapper]] = None,
        clock: Optional[Clock] = None,
    ):
        self.source = source
        self.store = store
        self.registry = registry
        self.clock = clock or utc_now

    def generate_compliance_report(self, spec: ReportSpec) -> ClusterComplianceReport:
        """Run the full pipeline for one spec and return the stored summary report."""
        index = build_spec_index(spec)
        check_results = collect_check_results(index, self.source, self.registry)
        checks = control_checks(index, check_results)
        totals = get_totals(checks)
        logger.info(
            "%s: %d controls, pass=%d fail=%d",
            spec.name, len(checks), totals.pass_count, totals.fail_count,
        )

        labels = report_labels(spec)
        details = control_check_details(index, check_results)
        upsert_detail_report(
            self.store,
            spec,
            build_detail_report_data(spec, totals, details, self.clock()),
            labels,
        )
        return update_summary_report(
            self.store,
            spec,
            build_report_status(totals, checks, self.clock()),
            labels,
        )


def generate_compliance_report(
    spec: ReportSpec,
    source: ResourceSource,
    store: ReportStore,
    registry: Optional[dict[str, ResultMapper]] = None,
    clock: Optional[Clock] = None,
) -> ClusterComplianceReport:
    """Convenience wrapper around ComplianceManager."""
    return ComplianceManager(source, store, registry, clock).generate_compliance_report(spec)
