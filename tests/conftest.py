"""Shared fixtures for ClusterScore tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest

from clusterscore.models.report import ClusterComplianceReport, ObjectMeta
from clusterscore.models.spec import ReportSpec
from clusterscore.storage.memory import MemoryStore


class StepClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock() -> StepClock:
    return StepClock(datetime(2026, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def make_kube_bench_report() -> Callable[..., dict]:
    """Build a CISKubeBenchReport object for a node from (test_number, status) pairs."""

    def _make(node: str, results: list[tuple[str, str]], remediation: str = "fix it") -> dict:
        return {
            "apiVersion": "aquasecurity.github.io/v1alpha1",
            "kind": "CISKubeBenchReport",
            "metadata": {
                "name": node,
                "labels": {
                    "starboard.resource.kind": "Node",
                    "starboard.resource.name": node,
                },
            },
            "report": {
                "sections": [
                    {
                        "id": "1",
                        "node_type": "master",
                        "tests": [
                            {
                                "section": "1.1",
                                "desc": "Master Node Configuration Files",
                                "results": [
                                    {
                                        "test_number": number,
                                        "test_desc": f"check {number}",
                                        "remediation": remediation,
                                        "status": status,
                                        "scored": True,
                                    }
                                    for number, status in results
                                ],
                            }
                        ],
                    }
                ]
            },
        }

    return _make


@pytest.fixture
def make_config_audit_report() -> Callable[..., dict]:
    """Build a ConfigAuditReport object from (checkID, success) pairs."""

    def _make(
        kind: str,
        name: str,
        namespace: str,
        checks: list[tuple[str, bool]],
    ) -> dict:
        return {
            "apiVersion": "aquasecurity.github.io/v1alpha1",
            "kind": "ConfigAuditReport",
            "metadata": {
                "name": f"{kind.lower()}-{name}",
                "namespace": namespace,
                "labels": {
                    "starboard.resource.kind": kind,
                    "starboard.resource.name": name,
                },
            },
            "report": {
                "checks": [
                    {
                        "checkID": check_id,
                        "title": f"title {check_id}",
                        "severity": "MEDIUM",
                        "success": success,
                        "messages": [] if success else [f"{check_id} failed", "see docs"],
                    }
                    for check_id, success in checks
                ]
            },
        }

    return _make


@pytest.fixture
def cis_spec() -> ReportSpec:
    """Single kube-bench control spec."""
    return ReportSpec.model_validate({
        "name": "cis-1.5",
        "kind": "CIS",
        "description": "CIS Kubernetes Benchmark",
        "version": "1.5",
        "controls": [
            {
                "id": "C1",
                "name": "API server pod spec permissions",
                "description": "Ensure permissions are 644",
                "severity": "HIGH",
                "mapping": {"scanner": "kube-bench", "checks": [{"id": "1.1.1"}]},
            }
        ],
    })


@pytest.fixture
def nsa_spec() -> ReportSpec:
    """Mixed spec: config-audit workload controls plus a kube-bench control."""
    return ReportSpec.model_validate({
        "name": "NSA",
        "kind": "compliance",
        "description": "National Security Agency - Kubernetes Hardening Guidance",
        "version": "1.0",
        "controls": [
            {
                "id": "1.0",
                "name": "Non-root containers",
                "severity": "MEDIUM",
                "kinds": ["Workload"],
                "mapping": {"scanner": "config-audit", "checks": [{"id": "KSV012"}]},
            },
            {
                "id": "1.1",
                "name": "Immutable container file systems",
                "severity": "LOW",
                "kinds": ["Workload"],
                "mapping": {
                    "scanner": "config-audit",
                    "checks": [{"id": "KSV014"}, {"id": "KSV012"}],
                },
            },
            {
                "id": "2.0",
                "name": "Kubelet authorization",
                "severity": "HIGH",
                "kinds": ["Node"],
                "mapping": {"scanner": "kube-bench", "checks": [{"id": "4.2.2"}]},
            },
        ],
    })


@pytest.fixture
def summary_shell() -> Callable[[str], ClusterComplianceReport]:
    def _make(name: str) -> ClusterComplianceReport:
        return ClusterComplianceReport(metadata=ObjectMeta(name=name))

    return _make


@pytest.fixture
def store(summary_shell) -> MemoryStore:
    """Memory store with the cis-1.5 summary record pre-created."""
    memory = MemoryStore()
    memory.create(summary_shell("cis-1.5"))
    memory.writes.clear()
    return memory


@pytest.fixture
def specs_dir(tmp_path: Path) -> Path:
    specs = tmp_path / "specs"
    specs.mkdir()
    (specs / "cis.yaml").write_text(
        "name: cis-1.5\n"
        "kind: CIS\n"
        "description: CIS Kubernetes Benchmark\n"
        "version: '1.5'\n"
        "controls:\n"
        "  - id: C1\n"
        "    name: API server pod spec permissions\n"
        "    severity: HIGH\n"
        "    mapping:\n"
        "      scanner: kube-bench\n"
        "      checks:\n"
        "        - id: 1.1.1\n",
        encoding="utf-8",
    )
    (specs / "nsa.yaml").write_text(
        "apiVersion: aquasecurity.github.io/v1alpha1\n"
        "kind: ClusterComplianceReport\n"
        "metadata:\n"
        "  name: nsa\n"
        "spec:\n"
        "  name: nsa\n"
        "  kind: compliance\n"
        "  description: NSA hardening guidance\n"
        "  version: '1.0'\n"
        "  controls:\n"
        "    - id: '1.0'\n"
        "      name: Non-root containers\n"
        "      kinds: [Workload]\n"
        "      mapping:\n"
        "        scanner: config-audit\n"
        "        checks:\n"
        "          - id: KSV012\n",
        encoding="utf-8",
    )
    return specs
