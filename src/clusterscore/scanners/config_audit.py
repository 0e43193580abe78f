"""config-audit (workload configuration audit) report mapper."""

from __future__ import annotations

from ..models.results import ResultDetails, ResultStatus
from .base import CONFIG_AUDIT, BaseMapper


class ConfigAuditMapper(BaseMapper):
    name = CONFIG_AUDIT

    def iter_results(self, resource: dict):
        metadata = resource.get("metadata") or {}
        labels = metadata.get("labels") or {}
        name = labels.get("starboard.resource.name") or metadata.get("name", "")
        namespace = metadata.get("namespace", "")

        report = resource.get("report") or {}
        for check in report.get("checks") or []:
            check_id = check.get("checkID")
            if not check_id:
                continue
            status = ResultStatus.PASS if check.get("success") else ResultStatus.FAIL
            yield check_id, check.get("remediation", ""), ResultDetails(
                name=name,
                namespace=namespace,
                msg=",".join(check.get("messages") or []),
                status=status,
            )
