"""
Diagram model produced from Kubernetes resources.

Nodes, connections and namespace groups carry geometry in pixels. The builder
creates them with zero coordinates; the layout engine fills in positions.
"""

from typing import Dict, List, Optional


class DiagramNode:
    """A diagram vertex: one resource or one virtual Vault secret."""

    def __init__(
        self,
        node_id: str,
        label: str,
        kind: str,
        namespace: str = "",
        x: float = 0.0,
        y: float = 0.0,
        width: float = 120.0,
        height: float = 60.0,
        style: Optional[str] = None,
    ):
        self.id = node_id
        self.label = label
        self.kind = kind
        self.namespace = namespace
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.style = style

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiagramNode):
            return False
        return (
            self.id == other.id
            and self.label == other.label
            and self.kind == other.kind
            and self.namespace == other.namespace
            and self.geometry() == other.geometry()
            and self.style == other.style
        )

    # Mutable: the layout engine assigns geometry after construction
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DiagramNode({self.id}: {self.kind}/{self.label})"

    def geometry(self) -> tuple:
        """Return (x, y, width, height)."""
        return (self.x, self.y, self.width, self.height)

    def display_name(self) -> str:
        """Generate the text shown inside the shape."""
        if self.style == "vault":
            return self.label
        return f"{self.kind}\n{self.label}"


class Connection:
    """A directed edge from the depending node to the depended-upon node."""

    def __init__(
        self,
        source_id: str,
        target_id: str,
        label: str = "uses",
        style: str = "default",
    ):
        self.source_id = source_id
        self.target_id = target_id
        self.label = label
        self.style = style

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Connection):
            return False
        return (
            self.source_id == other.source_id
            and self.target_id == other.target_id
            and self.label == other.label
            and self.style == other.style
        )

    def __hash__(self) -> int:
        return hash((self.source_id, self.target_id, self.label, self.style))

    def __repr__(self) -> str:
        return f"Connection({self.source_id} -> {self.target_id}: {self.label})"


class NamespaceGroup:
    """Bounding box around all nodes of one namespace."""

    def __init__(
        self,
        name: str,
        node_ids: Optional[List[str]] = None,
        x: float = 0.0,
        y: float = 0.0,
        width: float = 0.0,
        height: float = 0.0,
    ):
        self.name = name
        self.node_ids = list(node_ids or [])
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamespaceGroup):
            return False
        return (
            self.name == other.name
            and self.node_ids == other.node_ids
            and self.geometry() == other.geometry()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"NamespaceGroup({self.name}: {len(self.node_ids)} nodes)"

    def geometry(self) -> tuple:
        """Return (x, y, width, height)."""
        return (self.x, self.y, self.width, self.height)


class Diagram:
    """Complete diagram of one conversion run."""

    def __init__(self, layout: str = "hierarchical"):
        self.nodes: List[DiagramNode] = []
        self.connections: List[Connection] = []
        self.namespaces: Dict[str, NamespaceGroup] = {}
        self.layout = layout

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def get_node(self, node_id: str) -> Optional[DiagramNode]:
        """Find a node by id."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None
