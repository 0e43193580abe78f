"""Kubernetes API resource source and report store.

Talks to the API server over plain REST with httpx. Scanner reports are
the starboard CRDs labelled with the kind of resource they describe.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import httpx
from pydantic import ValidationError

from ..core.errors import CollaboratorError, ConflictError, NotFoundError
from ..models.report import API_VERSION, ClusterComplianceReport
from ..utils.sanitize import sanitize_error
from .base import Record

logger = logging.getLogger(__name__)

RESOURCE_KIND_LABEL = "starboard.resource.kind"

# Kinds whose scanner reports live in a dedicated CRD. Everything else is
# covered by config audit reports.
REPORT_PLURALS = {
    "Node": "ciskubebenchreports",
}
DEFAULT_REPORT_PLURAL = "configauditreports"

STATUS_SUBRESOURCES = {ClusterComplianceReport.KIND}

SERVICE_ACCOUNT_TOKEN = "/var/run/secrets/kubernetes.io/serviceaccount/token"


class KubeClient:
    """Implements both ResourceSource and ReportStore against a cluster."""

    def __init__(
        self,
        kube_config: dict,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = kube_config
        self.api_server = kube_config.get("api_server", "https://kubernetes.default.svc").rstrip("/")
        headers = {"Accept": "application/json"}
        token = self._get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.client = httpx.Client(
            base_url=f"{self.api_server}/apis/{API_VERSION}",
            headers=headers,
            timeout=kube_config.get("timeout_seconds", 30),
            verify=kube_config.get("verify_ssl", True),
            transport=transport,
        )

    def _get_token(self) -> Optional[str]:
        env_var = self.config.get("token_env", "KUBE_TOKEN")
        token = os.environ.get(env_var)
        if token:
            return token
        token_path = self.config.get("token_file", SERVICE_ACCOUNT_TOKEN)
        if token_path and os.path.exists(token_path):
            with open(token_path, encoding="utf-8") as f:
                return f.read().strip()
        return None

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "KubeClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, url: str, kind: str, name: str = "", **kwargs) -> dict:
        try:
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise NotFoundError(kind, name or url) from e
            if status == 409:
                raise ConflictError(sanitize_error(f"{kind} {name}: {e.response.text}")) from e
            raise CollaboratorError(
                sanitize_error(f"{method} {url} failed: {status} | {e.response.text}")
            ) from e
        except httpx.HTTPError as e:
            raise CollaboratorError(sanitize_error(f"{method} {url} failed: {e}")) from e
        except ValueError as e:
            raise CollaboratorError(
                sanitize_error(f"{method} {url} returned a non-JSON body: {e}")
            ) from e
        if not isinstance(data, dict):
            raise CollaboratorError(
                f"{method} {url} returned {type(data).__name__}, expected an object"
            )
        return data

    @staticmethod
    def _validate(model: type[Record], data: dict, name: str) -> Record:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise CollaboratorError(sanitize_error(f"Invalid {model.KIND} record {name}: {e}")) from e

    # ------------------------------------------------------------------
    # ResourceSource
    # ------------------------------------------------------------------

    def fetch_resources(self, kind: str) -> list[dict]:
        plural = REPORT_PLURALS.get(kind, DEFAULT_REPORT_PLURAL)
        params = {}
        if plural == DEFAULT_REPORT_PLURAL:
            params["labelSelector"] = f"{RESOURCE_KIND_LABEL}={kind}"
        data = self._request("GET", f"/{plural}", plural, params=params)
        items = data.get("items") or []
        logger.debug("Fetched %d %s for kind %s", len(items), plural, kind)
        return items

    # ------------------------------------------------------------------
    # ReportStore
    # ------------------------------------------------------------------

    def get(self, model: type[Record], name: str) -> Record:
        data = self._request("GET", f"/{model.PLURAL}/{name}", model.KIND, name)
        return self._validate(model, data, name)

    def create(self, record: Record) -> Record:
        data = self._request(
            "POST", f"/{record.PLURAL}", record.KIND, record.metadata.name, json=record.to_wire()
        )
        return self._validate(type(record), data, record.metadata.name)

    def update(self, record: Record) -> Record:
        name = record.metadata.name
        url = f"/{record.PLURAL}/{name}"
        data = self._request("PUT", url, record.KIND, name, json=record.to_wire())
        if record.KIND in STATUS_SUBRESOURCES:
            body = record.to_wire()
            body["metadata"]["resourceVersion"] = (data.get("metadata") or {}).get("resourceVersion")
            data = self._request("PUT", f"{url}/status", record.KIND, name, json=body)
        return self._validate(type(record), data, name)
