"""
draw.io (mxGraph XML) rendering of a laid-out diagram.
"""

import xml.etree.ElementTree as ET

from kubedraw.diagram import Diagram
from kubedraw.resource_utils import VAULT_NAMESPACE
from kubedraw.templates import CONNECTION_STYLE, NAMESPACE_STYLE, get_shape_style

GRAPH_MODEL_ATTRS = {
    "dx": "1422",
    "dy": "794",
    "grid": "1",
    "gridSize": "10",
    "guides": "1",
    "tooltips": "1",
    "connect": "1",
    "arrows": "1",
    "fold": "1",
    "page": "1",
    "pageScale": "1",
    "pageWidth": "827",
    "pageHeight": "1169",
    "math": "0",
    "shadow": "0",
}


def _num(value: float) -> str:
    return f"{value:.1f}"


class DrawIOGenerator:
    """Generates draw.io XML from a Diagram whose layout has been applied."""

    def __init__(self, diagram: Diagram):
        self.diagram = diagram

    def generate(self) -> str:
        """Generate the mxfile document as a string."""
        mxfile = ET.Element(
            "mxfile",
            {"host": "Electron", "agent": "kubedraw", "version": "1.0.0", "type": "device"},
        )
        diagram_element = ET.SubElement(
            mxfile, "diagram", {"id": "k8s-diagram", "name": "Kubernetes Architecture"}
        )
        model = ET.SubElement(diagram_element, "mxGraphModel", GRAPH_MODEL_ATTRS)
        root = ET.SubElement(model, "root")
        ET.SubElement(root, "mxCell", {"id": "0"})
        ET.SubElement(root, "mxCell", {"id": "1", "parent": "0"})

        for name, group in self.diagram.namespaces.items():
            label = name if name == VAULT_NAMESPACE else f"Namespace: {name}"
            self._add_vertex(
                root, f"ns-{name}", label, NAMESPACE_STYLE, group.x, group.y, group.width, group.height
            )

        for node in self.diagram.nodes:
            self._add_vertex(
                root,
                node.id,
                node.display_name(),
                get_shape_style(node.kind),
                node.x,
                node.y,
                node.width,
                node.height,
            )

        for i, connection in enumerate(self.diagram.connections):
            cell = ET.SubElement(
                root,
                "mxCell",
                {
                    "id": f"conn-{i}",
                    "value": connection.label,
                    "style": CONNECTION_STYLE,
                    "edge": "1",
                    "parent": "1",
                    "source": connection.source_id,
                    "target": connection.target_id,
                },
            )
            ET.SubElement(cell, "mxGeometry", {"relative": "1", "as": "geometry"})

        ET.indent(mxfile, space="  ")
        body = ET.tostring(mxfile, encoding="unicode")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"

    def _add_vertex(
        self,
        root: ET.Element,
        cell_id: str,
        value: str,
        style: str,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        cell = ET.SubElement(
            root,
            "mxCell",
            {"id": cell_id, "value": value, "style": style, "vertex": "1", "parent": "1"},
        )
        ET.SubElement(
            cell,
            "mxGeometry",
            {
                "x": _num(x),
                "y": _num(y),
                "width": _num(width),
                "height": _num(height),
                "as": "geometry",
            },
        )


def generate_drawio(diagram: Diagram) -> str:
    """Render a laid-out diagram as draw.io XML."""
    return DrawIOGenerator(diagram).generate()
