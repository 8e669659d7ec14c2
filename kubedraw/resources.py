"""
Normalized view of a decoded Kubernetes manifest.

A ResourceRecord exposes the identifying metadata of one document and gives
path-based, never-failing access to the nested fields of the original
structure. Every getter returns a ``(value, found)`` pair; a missing field or
a field of the wrong shape is reported as not found.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

Path = Union[str, Tuple[str, ...], List[str]]


def _split_path(path: Path) -> List[str]:
    if isinstance(path, str):
        return [part for part in path.split(".") if part]
    return list(path)


def nested_get(obj: Any, path: Path) -> Tuple[Any, bool]:
    """
    Walk a nested mapping along ``path``.

    Args:
        obj: Root mapping
        path: Dotted string ("spec.template.spec") or sequence of keys

    Returns:
        Tuple of (value, found)
    """
    current = obj
    for field in _split_path(path):
        if not isinstance(current, Mapping) or field not in current:
            return None, False
        current = current[field]
    if current is None:
        return None, False
    return current, True


def get_string(obj: Any, path: Path) -> Tuple[str, bool]:
    """Return the string at ``path``, or ("", False) if absent or not a string."""
    value, found = nested_get(obj, path)
    if not found or not isinstance(value, str):
        return "", False
    return value, True


def get_mapping(obj: Any, path: Path) -> Tuple[Dict[str, Any], bool]:
    """Return the mapping at ``path``, or ({}, False) if absent or not a mapping."""
    value, found = nested_get(obj, path)
    if not found or not isinstance(value, Mapping):
        return {}, False
    return dict(value), True


def get_sequence(obj: Any, path: Path) -> Tuple[List[Any], bool]:
    """Return the list at ``path``, or ([], False) if absent or not a list."""
    value, found = nested_get(obj, path)
    if not found or not isinstance(value, (list, tuple)):
        return [], False
    return list(value), True


def get_string_mapping(obj: Any, path: Path) -> Tuple[Dict[str, str], bool]:
    """Return a str->str mapping at ``path``; any non-string value makes it not found."""
    value, found = get_mapping(obj, path)
    if not found:
        return {}, False
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        return {}, False
    return value, True


class ResourceRecord:
    """Immutable normalized view of one Kubernetes manifest."""

    __slots__ = ("_kind", "_name", "_namespace", "_labels", "_annotations", "_raw")

    def __init__(
        self,
        kind: str,
        name: str,
        namespace: str = "",
        labels: Optional[Mapping[str, str]] = None,
        annotations: Optional[Mapping[str, str]] = None,
        raw: Optional[Mapping[str, Any]] = None,
    ):
        self._kind = kind
        self._name = name
        self._namespace = namespace or ""
        self._labels = MappingProxyType(dict(labels or {}))
        self._annotations = MappingProxyType(dict(annotations or {}))
        self._raw = MappingProxyType(dict(raw or {}))

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "ResourceRecord":
        """
        Build a record from a decoded manifest dictionary.

        Missing or malformed metadata fields become empty values; validation of
        name and kind happens separately.
        """
        kind, _ = get_string(manifest, "kind")
        name, _ = get_string(manifest, "metadata.name")
        namespace, _ = get_string(manifest, "metadata.namespace")
        labels, _ = get_string_mapping(manifest, "metadata.labels")
        annotations, _ = get_string_mapping(manifest, "metadata.annotations")
        return cls(kind, name, namespace, labels, annotations, manifest)

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def name(self) -> str:
        return self._name

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def labels(self) -> Mapping[str, str]:
        return self._labels

    @property
    def annotations(self) -> Mapping[str, str]:
        return self._annotations

    @property
    def raw(self) -> Mapping[str, Any]:
        return self._raw

    @property
    def key(self) -> str:
        """Composite "kind/name" key used by the dependency map."""
        return f"{self._kind}/{self._name}"

    def get_string(self, path: Path) -> Tuple[str, bool]:
        return get_string(self._raw, path)

    def get_mapping(self, path: Path) -> Tuple[Dict[str, Any], bool]:
        return get_mapping(self._raw, path)

    def get_sequence(self, path: Path) -> Tuple[List[Any], bool]:
        return get_sequence(self._raw, path)

    def get_string_mapping(self, path: Path) -> Tuple[Dict[str, str], bool]:
        return get_string_mapping(self._raw, path)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ResourceRecord):
            return False
        return (
            self._kind == other._kind
            and self._name == other._name
            and self._namespace == other._namespace
        )

    def __hash__(self) -> int:
        return hash((self._kind, self._name, self._namespace))

    def __repr__(self) -> str:
        ns = f" ({self._namespace})" if self._namespace else ""
        return f"ResourceRecord({self._kind}/{self._name}{ns})"
