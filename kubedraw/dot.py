"""
Graphviz DOT rendering of a diagram.

Namespace groups become cluster subgraphs; coordinates are left to Graphviz.
"""

from typing import List

from kubedraw.diagram import Diagram, DiagramNode
from kubedraw.resource_utils import VAULT_NAMESPACE
from kubedraw.templates import NAMESPACE_COLORS, get_kind_color, get_kind_shape


def _dot_id(value: str) -> str:
    return value.replace("-", "_").replace(".", "_").replace("/", "_")


def _escape(value: str) -> str:
    # Escape quotes and preserve newlines for multi-line labels
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class DOTGenerator:
    """Generates Graphviz DOT format from a diagram."""

    def __init__(self, diagram: Diagram):
        self.diagram = diagram

    def generate(self) -> str:
        """Generate Graphviz DOT format string."""
        lines = ["digraph G {", '    rankdir="TB";', '    node [fontname="Arial"];', ""]

        grouped = set()
        for i, (name, group) in enumerate(self.diagram.namespaces.items()):
            color = NAMESPACE_COLORS[i % len(NAMESPACE_COLORS)]
            label = name if name == VAULT_NAMESPACE else f"Namespace: {name}"

            lines.append(f"    subgraph cluster_{_dot_id(name)} {{")
            lines.append(f'        label="{_escape(label)}";')
            lines.append('        style="filled";')
            lines.append(f'        color="{color}";')
            lines.append('        fontcolor="black";')
            lines.append("")
            for node_id in group.node_ids:
                node = self.diagram.get_node(node_id)
                if node is not None:
                    lines.append("        " + self._node_line(node))
                    grouped.add(node_id)
            lines.append("    }")
            lines.append("")

        # Flat layouts have no groups
        for node in self.diagram.nodes:
            if node.id not in grouped:
                lines.append("    " + self._node_line(node))

        for connection in self.diagram.connections:
            lines.append(
                f"    {_dot_id(connection.source_id)} -> {_dot_id(connection.target_id)} "
                f'[label="{_escape(connection.label)}"];'
            )

        lines.append("}")
        return "\n".join(lines) + "\n"

    def _node_line(self, node: DiagramNode) -> str:
        return (
            f'{_dot_id(node.id)} [label="{_escape(node.display_name())}", '
            f'style="filled", fillcolor="{get_kind_color(node.kind)}", '
            f'shape="{get_kind_shape(node.kind)}"];'
        )


def generate_dot(diagram: Diagram) -> str:
    """Render a diagram as Graphviz DOT."""
    return DOTGenerator(diagram).generate()
