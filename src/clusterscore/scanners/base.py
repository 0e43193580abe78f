"""Scanner result mappers.

Each scanner writes its own report format. A mapper turns a collection of
those reports into per-check results keyed by check id.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..models.results import ScannerCheckResult

KUBE_BENCH = "kube-bench"
CONFIG_AUDIT = "config-audit"


@runtime_checkable
class ResultMapper(Protocol):
    """Protocol that all scanner result mappers implement."""

    name: str

    def map_report_data(
        self, kind: str, resources: list[dict]
    ) -> Optional[dict[str, ScannerCheckResult]]: ...


class BaseMapper:
    """Shared fold of (check id, result) rows into ScannerCheckResults."""

    name: str = "base"

    def map_report_data(
        self, kind: str, resources: list[dict]
    ) -> Optional[dict[str, ScannerCheckResult]]:
        if not resources:
            return None
        mapped: dict[str, ScannerCheckResult] = {}
        for resource in resources:
            for check_id, remediation, detail in self.iter_results(resource):
                if check_id not in mapped:
                    mapped[check_id] = ScannerCheckResult(
                        id=check_id,
                        object_type=kind,
                        remediation=remediation,
                    )
                mapped[check_id].details.append(detail)
        return mapped or None

    def iter_results(self, resource: dict):
        raise NotImplementedError
