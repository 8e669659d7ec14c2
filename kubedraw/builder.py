"""
Conversion of resource records and their dependencies into a diagram model.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from kubedraw.diagram import Connection, Diagram, DiagramNode, NamespaceGroup
from kubedraw.resources import ResourceRecord
from kubedraw.resource_utils import (
    REDIRECT_KINDS,
    VAULT_NAMESPACE,
    VAULT_SECRET_KIND,
    VAULT_SECRET_PREFIX,
    is_container_kind,
    is_virtual_name,
    is_workload,
    namespace_key,
)

logger = logging.getLogger(__name__)

CONNECTION_LABEL = "uses"
CONNECTION_STYLE = "default"

KIND_STYLES: Dict[str, str] = {
    "Deployment": "workload",
    "StatefulSet": "workload",
    "DaemonSet": "workload",
    "Service": "service",
    "Ingress": "ingress",
    "ConfigMap": "config",
    "Secret": "config",
    "PersistentVolumeClaim": "storage",
    "PersistentVolume": "storage",
    VAULT_SECRET_KIND: "vault",
}


def style_for_kind(kind: str) -> str:
    """Return the style category for a kind."""
    return KIND_STYLES.get(kind, "default")


def vault_secret_label(virtual_name: str) -> str:
    """
    Reconstruct a readable Vault path from a virtual node identifier.

    "vault-secret-myapp-config" becomes "secret/myapp/config". Dashes that were
    part of the original path also turn into slashes.
    """
    path = virtual_name[len(VAULT_SECRET_PREFIX) :].replace("-", "/")
    if not path.startswith("secret/"):
        path = "secret/" + path
    return path


class DiagramBuilder:
    """
    Builds a Diagram from resource records and a dependency map.

    Args:
        layout: Layout name stored on the diagram
        strict_redirects: If True, dependencies of Routes, ServiceMonitors and
            Ingresses only resolve to Services. If False, an unmatched name falls
            back to the plain name index.
    """

    def __init__(self, layout: str = "hierarchical", strict_redirects: bool = True):
        self.layout = layout
        self.strict_redirects = strict_redirects
        self.name_index: Dict[str, str] = {}
        self.resource_index: Dict[str, str] = {}

    def build(
        self,
        records: Sequence[ResourceRecord],
        dependencies: Mapping[str, Sequence[str]],
        namespace: Optional[str] = None,
    ) -> Diagram:
        """
        Build the diagram model.

        Args:
            records: Resource records in input order
            dependencies: "kind/name" -> dependency names, as produced by the resolver
            namespace: Optional namespace filter applied to the records

        Returns:
            Diagram with nodes, connections and namespace groups (zero geometry)
        """
        self.name_index = {}
        self.resource_index = {}
        diagram = Diagram(layout=self.layout)

        if namespace:
            records = [record for record in records if record.namespace == namespace]

        for record in records:
            if is_container_kind(record.kind):
                continue
            node = DiagramNode(
                f"node-{len(diagram.nodes)}",
                record.name,
                record.kind,
                record.namespace,
                style=style_for_kind(record.kind),
            )
            diagram.nodes.append(node)
            self._index_resource(record, node.id)

        for virtual_name in self._virtual_names(dependencies):
            node = DiagramNode(
                f"node-{len(diagram.nodes)}",
                vault_secret_label(virtual_name),
                VAULT_SECRET_KIND,
                VAULT_NAMESPACE,
                width=140,
                height=80,
                style=style_for_kind(VAULT_SECRET_KIND),
            )
            diagram.nodes.append(node)
            self.name_index[virtual_name] = node.id
            self.resource_index[f"{VAULT_SECRET_KIND}/{virtual_name}"] = node.id

        diagram.connections = self._connections(dependencies)
        diagram.namespaces = self._namespace_groups(diagram.nodes)

        logger.debug(
            f"Built diagram with {len(diagram.nodes)} nodes and "
            f"{len(diagram.connections)} connections"
        )
        return diagram

    def _index_resource(self, record: ResourceRecord, node_id: str) -> None:
        # Plain names prefer workloads so Service selectors land on them
        existing = self.name_index.get(record.name)
        if existing is None or is_workload(record.kind):
            self.name_index[record.name] = node_id
        self.resource_index[record.key] = node_id

    def _virtual_names(self, dependencies: Mapping[str, Sequence[str]]) -> List[str]:
        names: List[str] = []
        seen: Set[str] = set()
        for dependency_names in dependencies.values():
            for name in dependency_names:
                if is_virtual_name(name) and name not in seen:
                    seen.add(name)
                    names.append(name)
        return names

    def resolve_target(self, source_kind: str, dependency_name: str) -> Optional[str]:
        """
        Resolve a dependency name to a node id.

        Routes, ServiceMonitors and Ingresses look up ``Service/<name>`` first.
        """
        if source_kind in REDIRECT_KINDS:
            target_id = self.resource_index.get(f"Service/{dependency_name}")
            if target_id is not None or self.strict_redirects:
                return target_id
        return self.name_index.get(dependency_name)

    def _connections(self, dependencies: Mapping[str, Sequence[str]]) -> List[Connection]:
        connections: List[Connection] = []
        seen: Set[Tuple[str, str]] = set()

        for resource_key, dependency_names in dependencies.items():
            source_id = self.resource_index.get(resource_key)
            if source_id is None:
                logger.debug(f"Skipping dependencies of unknown resource {resource_key}")
                continue
            source_kind = resource_key.split("/", 1)[0]

            for dependency_name in dependency_names:
                target_id = self.resolve_target(source_kind, dependency_name)
                if target_id is None:
                    logger.debug(f"Dropping unresolved dependency {resource_key} -> {dependency_name}")
                    continue
                if target_id == source_id or (source_id, target_id) in seen:
                    continue
                seen.add((source_id, target_id))
                connections.append(
                    Connection(source_id, target_id, CONNECTION_LABEL, CONNECTION_STYLE)
                )

        return connections

    def _namespace_groups(self, nodes: Sequence[DiagramNode]) -> Dict[str, NamespaceGroup]:
        node_ids: Dict[str, List[str]] = {}
        for node in nodes:
            node_ids.setdefault(namespace_key(node.namespace), []).append(node.id)
        return {name: NamespaceGroup(name, node_ids[name]) for name in sorted(node_ids)}


def build_diagram(
    records: Sequence[ResourceRecord],
    dependencies: Mapping[str, Sequence[str]],
    namespace: Optional[str] = None,
    layout: str = "hierarchical",
    strict_redirects: bool = True,
) -> Diagram:
    """Build a diagram with a fresh DiagramBuilder."""
    builder = DiagramBuilder(layout=layout, strict_redirects=strict_redirects)
    return builder.build(records, dependencies, namespace=namespace)
