"""
Utility functions and constants for Kubernetes resource classification.
"""

# Workloads whose pod template is at spec.template
WORKLOAD_KINDS = ["Deployment", "StatefulSet", "DaemonSet"]

# Kinds whose pod spec may name a ServiceAccount (CronJob nests it under jobTemplate)
SERVICE_ACCOUNT_USER_KINDS = ["Deployment", "StatefulSet", "DaemonSet", "Job", "CronJob"]

# Kinds that are containers or metadata in the diagram, never nodes
CONTAINER_KINDS = ["Namespace", "Kustomization"]

# Kinds whose dependency names point at Services
REDIRECT_KINDS = ["Route", "ServiceMonitor", "Ingress"]

# Virtual Vault secret nodes
VAULT_SECRET_PREFIX = "vault-secret-"
VAULT_SECRET_KIND = "VaultSecret"
VAULT_NAMESPACE = "vaultstore"

DEFAULT_NAMESPACE = "default"


def is_workload(kind: str) -> bool:
    """Check if a kind is a Deployment, StatefulSet or DaemonSet."""
    return kind in WORKLOAD_KINDS


def is_container_kind(kind: str) -> bool:
    """Check if a kind is rendered as a container/metadata rather than a node."""
    return kind in CONTAINER_KINDS


def is_virtual_name(name: str) -> bool:
    """Check if a dependency name is a synthesized Vault secret identifier."""
    return name.startswith(VAULT_SECRET_PREFIX)


def namespace_key(namespace: str) -> str:
    """Normalize an empty namespace to the default group name."""
    return namespace or DEFAULT_NAMESPACE
