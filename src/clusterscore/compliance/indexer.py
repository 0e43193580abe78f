"""Spec indexing: turn a ReportSpec into lookup tables for one run."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models.spec import Control, ReportSpec
from ..scanners.base import KUBE_BENCH

WORKLOAD = "Workload"
WORKLOAD_KINDS = (
    "Pod",
    "ReplicationController",
    "ReplicaSet",
    "StatefulSet",
    "DaemonSet",
    "CronJob",
    "Job",
)
NODE = "Node"


@dataclass
class SpecIndex:
    scanner_kinds: dict[str, set[str]] = field(default_factory=dict)
    controls: dict[str, Control] = field(default_factory=dict)
    control_check_ids: dict[str, list[str]] = field(default_factory=dict)


def kinds_of(control: Control) -> set[str]:
    """Resource kinds a control's scanner has to read reports for.

    ``Workload`` expands to every workload kind. A kube-bench control with no
    declared kinds reads node reports.
    """
    kinds: set[str] = set()
    for kind in control.kinds:
        if kind == WORKLOAD:
            kinds.update(WORKLOAD_KINDS)
        else:
            kinds.add(kind)
    if not kinds and control.mapping.scanner == KUBE_BENCH:
        kinds.add(NODE)
    return kinds


def build_spec_index(spec: ReportSpec) -> SpecIndex:
    """Index controls by scanner, by id, and by their check ids.

    A repeated control id overwrites the earlier control; check ids under
    one control keep their order and duplicates.
    """
    index = SpecIndex()
    for control in spec.controls:
        scanner = control.mapping.scanner
        index.scanner_kinds.setdefault(scanner, set()).update(kinds_of(control))
        index.controls[control.id] = control
        for check in control.mapping.checks:
            index.control_check_ids.setdefault(control.id, []).append(check.id)
    return index
