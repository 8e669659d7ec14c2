"""
Dependency resolution for Kubernetes resources.

Each supported kind has one extractor registered with ExtractorRegistry. An
extractor receives the resource and the full record set and returns the names
the resource depends on. Kinds without an extractor have no dependencies.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from kubedraw.resources import ResourceRecord, get_mapping, get_sequence, get_string
from kubedraw.resource_utils import (
    SERVICE_ACCOUNT_USER_KINDS,
    VAULT_SECRET_PREFIX,
    WORKLOAD_KINDS,
)

logger = logging.getLogger(__name__)

Extractor = Callable[[ResourceRecord, Sequence[ResourceRecord]], List[str]]

# Bank-Vaults webhook annotations
VAULT_TLS_SECRET = "vault.security.banzaicloud.io/vault-tls-secret"
VAULT_SERVICE_ACCOUNT = "vault.security.banzaicloud.io/vault-serviceaccount"
VAULT_TOKEN_AUTH_MOUNT = "vault.security.banzaicloud.io/token-auth-mount"
VAULT_ENV_FROM_PATH = "vault.security.banzaicloud.io/vault-env-from-path"

POD_SPEC = "spec.template.spec"
CRONJOB_POD_SPEC = "spec.jobTemplate.spec.template.spec"


class ExtractorRegistry:
    """
    Registry mapping a resource kind to its dependency extractor.

    Extractors are registered with the ``register`` decorator; a kind can only
    have one extractor.
    """

    _extractors: Dict[str, Extractor] = {}

    @classmethod
    def register(cls, *kinds: str) -> Callable[[Extractor], Extractor]:
        """
        Register an extractor for one or more kinds.

        Args:
            kinds: Resource kinds handled by the decorated function

        Returns:
            Decorator returning the function unchanged

        Raises:
            ValueError: If a kind already has an extractor
        """

        def decorator(func: Extractor) -> Extractor:
            for kind in kinds:
                if kind in cls._extractors and cls._extractors[kind] is not func:
                    raise ValueError(f"Extractor already registered for kind {kind}")
                cls._extractors[kind] = func
            return func

        return decorator

    @classmethod
    def get(cls, kind: str) -> Optional[Extractor]:
        """Return the extractor for a kind, or None."""
        return cls._extractors.get(kind)

    @classmethod
    def kinds(cls) -> List[str]:
        """Return all kinds with a registered extractor."""
        return sorted(cls._extractors)


def selector_matches(selector: Mapping[str, Any], labels: Mapping[str, Any]) -> bool:
    """
    Check if every selector key exists in labels with an equal value.

    An empty selector matches nothing.
    """
    if not selector:
        return False
    for key, value in selector.items():
        if key not in labels or labels[key] != value:
            return False
    return True


def vault_secret_name(path: str) -> str:
    """
    Convert a Vault secret path into a virtual node identifier.

    "secret/myapp/config" becomes "vault-secret-myapp-config". The mapping is
    lossy: "a-b/c" and "a/b-c" produce the same identifier.
    """
    if path.startswith("secret/"):
        path = path[len("secret/") :]
    return VAULT_SECRET_PREFIX + path.replace("/", "-").replace(":", "-")


def _token_auth_volume(value: str) -> Optional[str]:
    # Format is volume:file
    if ":" not in value:
        return None
    volume = value.split(":", 1)[0]
    return volume or None


def _vault_annotation_dependencies(
    annotations: Mapping[str, Any], include_env_paths: bool
) -> List[str]:
    dependencies: List[str] = []

    tls_secret = annotations.get(VAULT_TLS_SECRET)
    if isinstance(tls_secret, str) and tls_secret:
        dependencies.append(tls_secret)

    service_account = annotations.get(VAULT_SERVICE_ACCOUNT)
    if isinstance(service_account, str) and service_account:
        dependencies.append(service_account)

    token_auth_mount = annotations.get(VAULT_TOKEN_AUTH_MOUNT)
    if isinstance(token_auth_mount, str) and token_auth_mount:
        volume = _token_auth_volume(token_auth_mount)
        if volume:
            dependencies.append(volume)

    if include_env_paths:
        env_paths = annotations.get(VAULT_ENV_FROM_PATH)
        if isinstance(env_paths, str) and env_paths:
            for path in env_paths.split(","):
                path = path.strip()
                if path:
                    dependencies.append(vault_secret_name(path))

    return dependencies


def _ref_names(item: Any, *ref_fields: str) -> List[str]:
    names = []
    for ref_field in ref_fields:
        name, found = get_string(item, (ref_field, "name"))
        if found:
            names.append(name)
    return names


def _volume_dependencies(resource: ResourceRecord) -> List[str]:
    volumes, _ = resource.get_sequence(f"{POD_SPEC}.volumes")
    dependencies: List[str] = []
    for volume in volumes:
        for ref_field, name_field in (
            ("configMap", "name"),
            ("secret", "secretName"),
            ("persistentVolumeClaim", "claimName"),
        ):
            name, found = get_string(volume, (ref_field, name_field))
            if found:
                dependencies.append(name)
    return dependencies


def _env_dependencies(resource: ResourceRecord) -> List[str]:
    containers, _ = resource.get_sequence(f"{POD_SPEC}.containers")
    dependencies: List[str] = []
    for container in containers:
        env_from, _ = get_sequence(container, "envFrom")
        for source in env_from:
            dependencies.extend(_ref_names(source, "configMapRef", "secretRef"))

        env, _ = get_sequence(container, "env")
        for variable in env:
            value_from, found = get_mapping(variable, "valueFrom")
            if found:
                dependencies.extend(_ref_names(value_from, "configMapKeyRef", "secretKeyRef"))
    return dependencies


@ExtractorRegistry.register("Service")
def service_dependencies(
    resource: ResourceRecord, records: Sequence[ResourceRecord]
) -> List[str]:
    """Workloads whose pod template labels match the Service selector."""
    selector, found = resource.get_mapping("spec.selector")
    if not found:
        return []

    dependencies = []
    for other in records:
        if other.kind not in WORKLOAD_KINDS:
            continue
        labels, found = other.get_mapping("spec.template.metadata.labels")
        if found and selector_matches(selector, labels):
            dependencies.append(other.name)
    return dependencies


@ExtractorRegistry.register("Ingress")
def ingress_dependencies(
    resource: ResourceRecord, records: Sequence[ResourceRecord]
) -> List[str]:
    """Backend Services referenced by the Ingress rules."""
    rules, _ = resource.get_sequence("spec.rules")
    dependencies = []
    for rule in rules:
        paths, _ = get_sequence(rule, "http.paths")
        for path in paths:
            name, found = get_string(path, "backend.service.name")
            if found:
                dependencies.append(name)
    return dependencies


@ExtractorRegistry.register("Route")
def route_dependencies(
    resource: ResourceRecord, records: Sequence[ResourceRecord]
) -> List[str]:
    """The Service an OpenShift Route points to."""
    target_kind, found = resource.get_string("spec.to.kind")
    if not found or target_kind != "Service":
        return []
    name, found = resource.get_string("spec.to.name")
    return [name] if found else []


@ExtractorRegistry.register("ServiceMonitor")
def service_monitor_dependencies(
    resource: ResourceRecord, records: Sequence[ResourceRecord]
) -> List[str]:
    """Services whose own labels match the monitor's matchLabels."""
    match_labels, found = resource.get_mapping("spec.selector.matchLabels")
    if not found:
        return []
    return [
        other.name
        for other in records
        if other.kind == "Service" and selector_matches(match_labels, other.labels)
    ]


@ExtractorRegistry.register(*WORKLOAD_KINDS)
def workload_dependencies(
    resource: ResourceRecord, records: Sequence[ResourceRecord]
) -> List[str]:
    """ConfigMaps, Secrets, PVCs, ServiceAccount and Vault references of a workload."""
    dependencies = _volume_dependencies(resource)
    dependencies.extend(_env_dependencies(resource))

    service_account, found = resource.get_string(f"{POD_SPEC}.serviceAccountName")
    if found and service_account:
        dependencies.append(service_account)

    dependencies.extend(_vault_annotation_dependencies(resource.annotations, False))

    template_annotations, found = resource.get_string_mapping("spec.template.metadata.annotations")
    if found:
        dependencies.extend(_vault_annotation_dependencies(template_annotations, True))

    return dependencies


@ExtractorRegistry.register("RoleBinding", "ClusterRoleBinding")
def binding_dependencies(
    resource: ResourceRecord, records: Sequence[ResourceRecord]
) -> List[str]:
    """ServiceAccount subjects and the bound Role or ClusterRole."""
    subjects, _ = resource.get_sequence("subjects")
    dependencies = []
    for subject in subjects:
        kind, found = get_string(subject, "kind")
        if not found or kind != "ServiceAccount":
            continue
        name, found = get_string(subject, "name")
        if found:
            dependencies.append(name)

    role_name, found = resource.get_string("roleRef.name")
    if found:
        dependencies.append(role_name)
    return dependencies


@ExtractorRegistry.register("ServiceAccount")
def service_account_users(
    resource: ResourceRecord, records: Sequence[ResourceRecord]
) -> List[str]:
    """Workloads, Jobs and CronJobs running under this ServiceAccount."""
    dependencies = []
    for other in records:
        if other.kind not in SERVICE_ACCOUNT_USER_KINDS:
            continue
        pod_spec = CRONJOB_POD_SPEC if other.kind == "CronJob" else POD_SPEC
        name, found = other.get_string(f"{pod_spec}.serviceAccountName")
        if found and name == resource.name:
            dependencies.append(other.name)
    return dependencies


class DependencyResolver:
    """Computes the dependency map for a set of resource records."""

    def __init__(self, registry: type = ExtractorRegistry):
        self.registry = registry

    def find_dependencies(
        self, resource: ResourceRecord, records: Sequence[ResourceRecord]
    ) -> List[str]:
        """Return the dependency names of a single resource."""
        extractor = self.registry.get(resource.kind)
        if extractor is None:
            return []
        return extractor(resource, records)

    def resolve(self, records: Sequence[ResourceRecord]) -> Dict[str, List[str]]:
        """
        Resolve dependencies for every record.

        Args:
            records: All resource records of one conversion run

        Returns:
            Mapping of "kind/name" to dependency names, in record order. Records
            without dependencies are omitted. When several records share a
            "kind/name" key, the last one with dependencies wins.
        """
        records = list(records)
        dependencies: Dict[str, List[str]] = {}
        for resource in records:
            found = self.find_dependencies(resource, records)
            if not found:
                continue
            logger.debug(f"{resource.key} depends on {found}")
            # Keys are not namespaced; the last record wins, like the node index
            dependencies[resource.key] = found
        logger.debug(f"Resolved dependencies for {len(dependencies)} of {len(records)} resources")
        return dependencies


def resolve_dependencies(records: Sequence[ResourceRecord]) -> Dict[str, List[str]]:
    """Resolve dependencies with the default extractor registry."""
    return DependencyResolver().resolve(records)
