"""Control aggregation.

Resolves each control's check ids against the collected scanner results and
produces pass/fail totals per control (summary) and the full result trail per
(control, check) pair (detail).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models.report import ControlCheck, ControlCheckDetails
from ..models.results import ResultDetails, ResultStatus, ScannerCheckResult
from .indexer import SpecIndex

logger = logging.getLogger(__name__)

PASSING = {ResultStatus.PASS, ResultStatus.WARN}


@dataclass(frozen=True)
class SummaryTotal:
    pass_count: int = 0
    fail_count: int = 0

    @property
    def total(self) -> int:
        return self.pass_count + self.fail_count


def control_checks(
    index: SpecIndex,
    check_results: dict[str, list[ScannerCheckResult]],
) -> list[ControlCheck]:
    """Build one ControlCheck per indexed control, zero totals included."""
    checks: list[ControlCheck] = []
    for control_id, check_ids in index.control_check_ids.items():
        pass_total = 0
        fail_total = 0
        for check_id in check_ids:
            for result in check_results.get(check_id, []):
                for detail in result.details:
                    if detail.status in PASSING:
                        pass_total += 1
                    elif detail.status == ResultStatus.FAIL:
                        fail_total += 1

        control = index.controls.get(control_id)
        if control is None:
            logger.warning("Control %s has checks but no control entry; dropped", control_id)
            continue
        checks.append(ControlCheck(
            id=control_id,
            name=control.name,
            description=control.description,
            severity=control.severity,
            pass_total=pass_total,
            fail_total=fail_total,
        ))
    return checks


def control_check_details(
    index: SpecIndex,
    check_results: dict[str, list[ScannerCheckResult]],
) -> list[ControlCheckDetails]:
    """Build one ControlCheckDetails per (control, check) pair that has results."""
    details: list[ControlCheckDetails] = []
    for control_id, check_ids in index.control_check_ids.items():
        control = index.controls.get(control_id)
        if control is None:
            continue
        for check_id in check_ids:
            results = check_results.get(check_id)
            if results is None:
                continue
            details.append(ControlCheckDetails(
                id=control_id,
                name=control.name,
                description=control.description,
                severity=control.severity,
                check_results=[
                    ScannerCheckResult(
                        id=result.id,
                        object_type=result.object_type,
                        remediation=result.remediation,
                        details=[
                            ResultDetails(
                                name=d.name,
                                namespace=d.namespace,
                                msg=d.msg,
                                status=d.status,
                            )
                            for d in result.details
                        ],
                    )
                    for result in results
                ],
            ))
    return details


def get_totals(checks: list[ControlCheck]) -> SummaryTotal:
    """Sum per-control totals into global pass/fail counts."""
    return SummaryTotal(
        pass_count=sum(c.pass_total for c in checks),
        fail_count=sum(c.fail_total for c in checks),
    )
