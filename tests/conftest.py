"""Pytest configuration and shared fixtures."""
import os
import sys
from typing import Any, Dict, Optional

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from kubedraw.resources import ResourceRecord  # noqa: E402


def build_manifest(
    kind: str,
    name: str,
    namespace: str = "",
    labels: Optional[Dict[str, str]] = None,
    annotations: Optional[Dict[str, str]] = None,
    **fields: Any,
) -> Dict[str, Any]:
    """Build a manifest dictionary with metadata and arbitrary top-level fields."""
    metadata: Dict[str, Any] = {"name": name}
    if namespace:
        metadata["namespace"] = namespace
    if labels:
        metadata["labels"] = labels
    if annotations:
        metadata["annotations"] = annotations
    manifest = {"apiVersion": "v1", "kind": kind, "metadata": metadata}
    manifest.update(fields)
    return manifest


def workload_manifest(
    name: str,
    kind: str = "Deployment",
    namespace: str = "",
    pod_labels: Optional[Dict[str, str]] = None,
    pod_annotations: Optional[Dict[str, str]] = None,
    annotations: Optional[Dict[str, str]] = None,
    **pod_spec: Any,
) -> Dict[str, Any]:
    """Build a workload manifest with a pod template."""
    template: Dict[str, Any] = {"metadata": {}, "spec": {"containers": []}}
    if pod_labels:
        template["metadata"]["labels"] = pod_labels
    if pod_annotations:
        template["metadata"]["annotations"] = pod_annotations
    template["spec"].update(pod_spec)
    return build_manifest(
        kind, name, namespace, annotations=annotations, spec={"template": template}
    )


@pytest.fixture
def make_record():
    """Factory for ResourceRecords built from keyword arguments."""

    def factory(kind: str, name: str, namespace: str = "", **kwargs: Any) -> ResourceRecord:
        return ResourceRecord.from_manifest(build_manifest(kind, name, namespace, **kwargs))

    return factory


@pytest.fixture
def make_workload():
    """Factory for workload ResourceRecords with a pod template."""

    def factory(name: str, **kwargs: Any) -> ResourceRecord:
        return ResourceRecord.from_manifest(workload_manifest(name, **kwargs))

    return factory


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep KUBEDRAW_* environment variables out of tests."""
    for key in list(os.environ):
        if key.startswith("KUBEDRAW_"):
            monkeypatch.delenv(key, raising=False)
