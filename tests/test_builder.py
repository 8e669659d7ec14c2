"""Unit tests for the diagram model builder."""

from kubedraw.builder import (
    DiagramBuilder,
    build_diagram,
    style_for_kind,
    vault_secret_label,
)
from kubedraw.resolver import VAULT_ENV_FROM_PATH, resolve_dependencies


def build(records, **kwargs):
    return build_diagram(records, resolve_dependencies(records), **kwargs)


def ingress_spec(*service_names):
    paths = [{"backend": {"service": {"name": name}}} for name in service_names]
    return {"rules": [{"http": {"paths": paths}}]}


def edges(diagram):
    """Return connections as (source label, target label) pairs."""
    labels = {node.id: node.label for node in diagram.nodes}
    return [(labels[c.source_id], labels[c.target_id]) for c in diagram.connections]


class TestNodeMaterialization:
    """Test cases for node creation."""

    def test_sequential_ids_in_record_order(self, make_record):
        records = [
            make_record("ConfigMap", "a"),
            make_record("Namespace", "prod"),
            make_record("Secret", "b"),
            make_record("Kustomization", "k"),
            make_record("Service", "c"),
        ]
        diagram = build(records)
        assert [node.id for node in diagram.nodes] == ["node-0", "node-1", "node-2"]
        assert [node.label for node in diagram.nodes] == ["a", "b", "c"]

    def test_container_kinds_never_nodes(self, make_record):
        diagram = build([make_record("Namespace", "prod"), make_record("Kustomization", "k")])
        assert diagram.nodes == []
        assert diagram.connections == []
        assert diagram.namespaces == {}

    def test_node_fields(self, make_record):
        diagram = build([make_record("Service", "api", "prod")])
        node = diagram.nodes[0]
        assert node.kind == "Service"
        assert node.namespace == "prod"
        assert node.style == "service"
        assert (node.width, node.height) == (120, 60)

    def test_ids_restart_each_run(self, make_record):
        records = [make_record("ConfigMap", "a")]
        assert build(records).nodes[0].id == build(records).nodes[0].id == "node-0"


class TestConnections:
    """Test cases for edge synthesis."""

    def test_scenario_service_to_deployment(self, make_record, make_workload):
        """Test that a Service selecting a Deployment yields one 'uses' edge."""
        records = [
            make_workload("web", pod_labels={"app": "web"}),
            make_record("Service", "web-svc", spec={"selector": {"app": "web"}}),
        ]
        diagram = build(records)
        assert len(diagram.connections) == 1
        connection = diagram.connections[0]
        assert connection.source_id == "node-1"
        assert connection.target_id == "node-0"
        assert connection.label == "uses"
        assert connection.style == "default"

    def test_unresolved_dependency_dropped(self, make_workload, make_record):
        records = [
            make_workload(
                "app",
                volumes=[{"configMap": {"name": "missing"}}, {"configMap": {"name": "cfg"}}],
            ),
            make_record("ConfigMap", "cfg"),
        ]
        assert edges(build(records)) == [("app", "cfg")]

    def test_unresolved_source_skipped(self, make_record):
        builder = DiagramBuilder()
        diagram = builder.build([make_record("ConfigMap", "cfg")], {"Deployment/ghost": ["cfg"]})
        assert diagram.connections == []

    def test_self_reference_suppressed(self, make_record):
        records = [
            make_record(
                "RoleBinding",
                "same",
                subjects=[{"kind": "ServiceAccount", "name": "same"}],
                roleRef={"name": "same"},
            )
        ]
        assert build(records).connections == []

    def test_duplicate_edges_merged(self, make_workload, make_record):
        records = [
            make_workload(
                "app",
                volumes=[{"configMap": {"name": "cfg"}}],
                containers=[{"envFrom": [{"configMapRef": {"name": "cfg"}}]}],
            ),
            make_record("ConfigMap", "cfg"),
        ]
        assert edges(build(records)) == [("app", "cfg")]

    def test_service_account_reverse_edges(self, make_workload, make_record):
        records = [
            make_workload("api", serviceAccountName="runner"),
            make_record("ServiceAccount", "runner"),
        ]
        assert edges(build(records)) == [("api", "runner"), ("runner", "api")]

    def test_edges_reference_existing_nodes(self, make_workload, make_record):
        records = [
            make_workload("web", pod_labels={"app": "web"}, serviceAccountName="sa"),
            make_record("Service", "web", spec={"selector": {"app": "web"}}),
            make_record("ServiceAccount", "sa"),
            make_record("Ingress", "in", spec=ingress_spec("web")),
        ]
        diagram = build(records)
        ids = set(diagram.node_ids())
        assert diagram.connections
        for connection in diagram.connections:
            assert connection.source_id in ids
            assert connection.target_id in ids
            assert connection.source_id != connection.target_id


class TestNamePriority:
    """Test cases for plain-name collisions."""

    def test_deployment_wins_over_service(self, make_record, make_workload):
        """Test that plain-name lookups prefer the workload regardless of order."""
        for records in (
            [make_record("Service", "x"), make_workload("x")],
            [make_workload("x"), make_record("Service", "x")],
        ):
            builder = DiagramBuilder()
            diagram = builder.build(records, {})
            deployment = next(node for node in diagram.nodes if node.kind == "Deployment")
            service = next(node for node in diagram.nodes if node.kind == "Service")
            assert builder.name_index["x"] == deployment.id
            assert builder.resource_index["Service/x"] == service.id
            assert builder.resource_index["Deployment/x"] == deployment.id

    def test_first_non_workload_kept(self, make_record):
        builder = DiagramBuilder()
        builder.build([make_record("ConfigMap", "x"), make_record("Secret", "x")], {})
        assert builder.name_index["x"] == "node-0"

    def test_binding_resolves_to_workload_name(self, make_record, make_workload):
        records = [
            make_record("ServiceAccount", "x"),
            make_workload("x"),
            make_record(
                "RoleBinding",
                "rb",
                subjects=[{"kind": "ServiceAccount", "name": "x"}],
            ),
        ]
        assert edges(build(records)) == [("rb", "x")]
        diagram = build(records)
        assert diagram.connections[0].target_id == "node-1"


class TestRedirection:
    """Test cases for Service-first resolution."""

    def test_route_prefers_service(self, make_record, make_workload):
        records = [
            make_workload("svc"),
            make_record("Service", "svc"),
            make_record("Route", "r", spec={"to": {"kind": "Service", "name": "svc"}}),
        ]
        diagram = build(records)
        assert len(diagram.connections) == 1
        assert diagram.connections[0].target_id == "node-1"

    def test_service_monitor_prefers_service(self, make_record, make_workload):
        records = [
            make_workload("metrics"),
            make_record("Service", "metrics", labels={"app": "m"}),
            make_record("ServiceMonitor", "mon", spec={"selector": {"matchLabels": {"app": "m"}}}),
        ]
        diagram = build(records)
        assert [(c.source_id, c.target_id) for c in diagram.connections] == [("node-2", "node-1")]

    def test_scenario_ingress_without_service(self, make_record):
        """Test that an Ingress backend matching only a ConfigMap yields no edge."""
        records = [
            make_record("ConfigMap", "api"),
            make_record("Ingress", "in", spec=ingress_spec("api")),
        ]
        assert build(records).connections == []

    def test_fallback_when_not_strict(self, make_record):
        records = [
            make_record("ConfigMap", "api"),
            make_record("Route", "r", spec={"to": {"kind": "Service", "name": "api"}}),
        ]
        diagram = build(records, strict_redirects=False)
        assert edges(diagram) == [("r", "api")]

    def test_other_kinds_use_plain_name(self, make_record, make_workload):
        builder = DiagramBuilder()
        builder.build([make_workload("x"), make_record("Service", "x")], {})
        assert builder.resolve_target("RoleBinding", "x") == "node-0"
        assert builder.resolve_target("Route", "x") == "node-1"
        assert builder.resolve_target("Route", "missing") is None


class TestVirtualNodes:
    """Test cases for virtual Vault secret nodes."""

    def test_scenario_vault_path(self, make_workload):
        """Test that an env-from-path annotation produces one virtual node and edge."""
        records = [make_workload("app", pod_annotations={VAULT_ENV_FROM_PATH: "secret/app/db"})]
        diagram = build(records)
        assert len(diagram.nodes) == 2
        virtual = diagram.nodes[1]
        assert virtual.id == "node-1"
        assert virtual.label == "secret/app/db"
        assert virtual.kind == "VaultSecret"
        assert virtual.namespace == "vaultstore"
        assert virtual.style == "vault"
        assert (virtual.width, virtual.height) == (140, 80)
        assert edges(diagram) == [("app", "secret/app/db")]

    def test_colliding_paths_share_one_node(self, make_workload):
        records = [
            make_workload("one", pod_annotations={VAULT_ENV_FROM_PATH: "secret/a-b/c"}),
            make_workload("two", pod_annotations={VAULT_ENV_FROM_PATH: "secret/a/b-c"}),
        ]
        diagram = build(records)
        virtual = [node for node in diagram.nodes if node.kind == "VaultSecret"]
        assert len(virtual) == 1
        assert [c.target_id for c in diagram.connections] == [virtual[0].id, virtual[0].id]
        assert sorted(c.source_id for c in diagram.connections) == ["node-0", "node-1"]

    def test_virtual_nodes_follow_real_nodes(self, make_workload, make_record):
        records = [
            make_workload("app", pod_annotations={VAULT_ENV_FROM_PATH: "secret/x,secret/y"}),
            make_record("ConfigMap", "cfg"),
        ]
        diagram = build(records)
        assert [node.label for node in diagram.nodes] == ["app", "cfg", "secret/x", "secret/y"]

    def test_virtual_namespace_group(self, make_workload):
        records = [
            make_workload("app", namespace="prod", pod_annotations={VAULT_ENV_FROM_PATH: "secret/x"})
        ]
        diagram = build(records)
        assert list(diagram.namespaces) == ["prod", "vaultstore"]
        assert diagram.namespaces["vaultstore"].node_ids == ["node-1"]


class TestNamespaces:
    """Test cases for namespace grouping and filtering."""

    def test_groups_sorted_and_default(self, make_record):
        records = [
            make_record("ConfigMap", "a", "zeta"),
            make_record("ConfigMap", "b"),
            make_record("ConfigMap", "c", "alpha"),
            make_record("ConfigMap", "d", "zeta"),
        ]
        diagram = build(records)
        assert list(diagram.namespaces) == ["alpha", "default", "zeta"]
        assert diagram.namespaces["zeta"].node_ids == ["node-0", "node-3"]
        assert diagram.namespaces["default"].node_ids == ["node-1"]

    def test_namespace_filter(self, make_record):
        records = [make_record("ConfigMap", "a", "prod"), make_record("ConfigMap", "b", "dev")]
        diagram = build(records, namespace="prod")
        assert [node.label for node in diagram.nodes] == ["a"]

    def test_same_name_in_two_namespaces(self, make_record, make_workload):
        records = [
            make_workload("api", namespace="a", volumes=[{"name": "c", "configMap": {"name": "cfg-a"}}]),
            make_record("ConfigMap", "cfg-a", namespace="a"),
            make_workload("api", namespace="b", volumes=[{"name": "c", "configMap": {"name": "cfg-b"}}]),
            make_record("ConfigMap", "cfg-b", namespace="b"),
        ]
        diagram = build(records)
        # Only the second api is connected, and only to its own ConfigMap
        assert [(c.source_id, c.target_id) for c in diagram.connections] == [("node-2", "node-3")]


class TestHelpers:
    """Test cases for builder helpers."""

    def test_vault_secret_label(self):
        assert vault_secret_label("vault-secret-app-db") == "secret/app/db"

    def test_vault_secret_label_lossy(self):
        assert vault_secret_label("vault-secret-my-app") == "secret/my/app"

    def test_style_for_kind(self):
        assert style_for_kind("StatefulSet") == "workload"
        assert style_for_kind("PersistentVolumeClaim") == "storage"
        assert style_for_kind("Widget") == "default"

    def test_idempotent(self, make_record, make_workload):
        records = [
            make_workload("web", pod_labels={"app": "web"}, serviceAccountName="sa"),
            make_record("Service", "web-svc", spec={"selector": {"app": "web"}}),
            make_record("ServiceAccount", "sa"),
        ]
        first, second = build(records), build(records)
        assert first.nodes == second.nodes
        assert first.connections == second.connections
        assert first.namespaces == second.namespaces
