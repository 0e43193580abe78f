"""Exception hierarchy.

ConfigurationError aborts a run because the inputs are wrong; CollaboratorError
wraps failures of the resource source or the report store.
"""

from __future__ import annotations


class ClusterScoreError(Exception):
    """Base class for all errors raised by clusterscore."""


class ConfigurationError(ClusterScoreError):
    """The spec, config or pre-created state is invalid."""


class UnknownScannerError(ConfigurationError):
    def __init__(self, scanner: str):
        super().__init__(f"Unknown scanner: {scanner}")
        self.scanner = scanner


class MissingReportError(ConfigurationError):
    def __init__(self, name: str):
        super().__init__(f"report record for name {name} is missing")
        self.name = name


class CollaboratorError(ClusterScoreError):
    """A resource fetch or persistence call failed."""


class NotFoundError(CollaboratorError):
    def __init__(self, kind: str, name: str):
        super().__init__(f"{kind} {name} not found")
        self.kind = kind
        self.name = name


class ConflictError(CollaboratorError):
    """The record changed since it was read."""
