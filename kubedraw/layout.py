"""
Placement of diagram nodes and namespace groups.

Three strategies are available: hierarchical (rows inside namespace boxes
stacked vertically), grid (square-ish grid, no namespaces) and vertical
(one column per namespace). With namespace grouping disabled, hierarchical
and vertical lay out every node as a single sequence and no namespace boxes
are produced.
"""

import logging
import math
from typing import Dict, List, Sequence

import networkx as nx

from kubedraw.diagram import Diagram, NamespaceGroup
from kubedraw.resource_utils import namespace_key

logger = logging.getLogger(__name__)

LAYOUTS = ["hierarchical", "grid", "vertical"]
DEFAULT_LAYOUT = "hierarchical"

MARGIN = 80.0
NODE_WIDTH = 140.0
NODE_HEIGHT = 80.0
HORIZONTAL_SPACING = 220.0
VERTICAL_SPACING = 80.0
NAMESPACE_SPACING = 150.0
GRID_CELL_WIDTH = 220.0
GRID_CELL_HEIGHT = 150.0
VERTICAL_NODE_PITCH = 160.0
VERTICAL_COLUMN_PITCH = 300.0
VERTICAL_NAMESPACE_WIDTH = 220.0


class LayoutEngine:
    """
    Assigns coordinates to a Diagram in place.

    Args:
        algorithm: One of LAYOUTS; unknown names use hierarchical
        no_namespaces: Disable namespace grouping
        rank_by_depth: Split hierarchical partitions into rows by dependency
            depth instead of a single row
    """

    def __init__(
        self,
        algorithm: str = DEFAULT_LAYOUT,
        no_namespaces: bool = False,
        rank_by_depth: bool = False,
    ):
        self.algorithm = algorithm
        self.no_namespaces = no_namespaces
        self.rank_by_depth = rank_by_depth

    def apply_layout(self, diagram: Diagram) -> Diagram:
        """Apply the configured strategy and return the same diagram."""
        if self.algorithm not in LAYOUTS:
            logger.debug(f"Unknown layout {self.algorithm}, using {DEFAULT_LAYOUT}")

        if self.algorithm == "grid":
            self._grid(diagram)
        elif self.algorithm == "vertical":
            if self.no_namespaces:
                self._flat_vertical(diagram)
            else:
                self._vertical(diagram)
        elif self.no_namespaces:
            self._flat_hierarchical(diagram)
        else:
            self._hierarchical(diagram)
        return diagram

    def _partitions(self, diagram: Diagram) -> Dict[str, List[int]]:
        partitions: Dict[str, List[int]] = {}
        for index, node in enumerate(diagram.nodes):
            partitions.setdefault(namespace_key(node.namespace), []).append(index)
        return {name: partitions[name] for name in sorted(partitions)}

    def _place(self, diagram: Diagram, index: int, x: float, y: float) -> None:
        node = diagram.nodes[index]
        node.x = x
        node.y = y
        node.width = NODE_WIDTH
        node.height = NODE_HEIGHT

    def _hierarchical(self, diagram: Diagram) -> None:
        diagram.namespaces = {}
        current_y = MARGIN

        for name, indices in self._partitions(diagram).items():
            ns_x = MARGIN
            ns_y = current_y
            max_x = ns_x
            max_y = ns_y

            # Space for namespace header
            level_y = ns_y + MARGIN
            for level in self.group_into_levels(indices, diagram):
                level_x = ns_x + MARGIN
                max_level_height = 0.0
                for index in level:
                    self._place(diagram, index, level_x, level_y)
                    level_x += HORIZONTAL_SPACING
                    max_level_height = max(max_level_height, diagram.nodes[index].height)
                    max_x = max(max_x, level_x)
                level_y += max_level_height + VERTICAL_SPACING
                max_y = max(max_y, level_y)

            diagram.namespaces[name] = NamespaceGroup(
                name,
                [diagram.nodes[index].id for index in indices],
                x=ns_x,
                y=ns_y,
                width=max_x - ns_x + MARGIN,
                height=max_y - ns_y + MARGIN,
            )
            current_y = max_y + NAMESPACE_SPACING

    def _flat_hierarchical(self, diagram: Diagram) -> None:
        diagram.namespaces = {}
        level_y = MARGIN
        for level in self.group_into_levels(list(range(len(diagram.nodes))), diagram):
            level_x = MARGIN
            max_level_height = 0.0
            for index in level:
                self._place(diagram, index, level_x, level_y)
                level_x += HORIZONTAL_SPACING
                max_level_height = max(max_level_height, diagram.nodes[index].height)
            level_y += max_level_height + VERTICAL_SPACING

    def _grid(self, diagram: Diagram) -> None:
        diagram.namespaces = {}
        if not diagram.nodes:
            return
        cols = int(math.ceil(math.sqrt(len(diagram.nodes))))
        for index in range(len(diagram.nodes)):
            row, col = divmod(index, cols)
            self._place(
                diagram,
                index,
                col * GRID_CELL_WIDTH + MARGIN,
                row * GRID_CELL_HEIGHT + MARGIN,
            )

    def _vertical(self, diagram: Diagram) -> None:
        diagram.namespaces = {}
        current_x = MARGIN

        for name, indices in self._partitions(diagram).items():
            ns_x = current_x
            ns_y = MARGIN
            max_y = ns_y

            node_y = ns_y + MARGIN
            for index in indices:
                self._place(diagram, index, ns_x + MARGIN, node_y)
                node_y += VERTICAL_NODE_PITCH
                max_y = max(max_y, node_y)

            diagram.namespaces[name] = NamespaceGroup(
                name,
                [diagram.nodes[index].id for index in indices],
                x=ns_x,
                y=ns_y,
                width=VERTICAL_NAMESPACE_WIDTH,
                height=max_y - ns_y + MARGIN,
            )
            current_x += VERTICAL_COLUMN_PITCH

    def _flat_vertical(self, diagram: Diagram) -> None:
        diagram.namespaces = {}
        for index in range(len(diagram.nodes)):
            self._place(diagram, index, MARGIN, MARGIN + index * VERTICAL_NODE_PITCH)

    def group_into_levels(self, indices: Sequence[int], diagram: Diagram) -> List[List[int]]:
        """
        Group node indices into rows.

        Without rank_by_depth every node shares one row. With it, a node sits one
        row below the deepest node depending on it; nodes on a cycle, and nodes
        only reachable through one, go to a final row. Order inside a row follows
        the input order.
        """
        if not indices:
            return []
        if not self.rank_by_depth:
            return [list(indices)]

        graph = self.dependency_graph(indices, diagram)

        cyclic = set()
        for component in nx.strongly_connected_components(graph):
            if len(component) > 1:
                cyclic.update(component)
        blocked = set(cyclic)
        for index in cyclic:
            blocked.update(nx.descendants(graph, index))

        acyclic = graph.subgraph(index for index in indices if index not in blocked)
        depth: Dict[int, int] = {}
        for index in nx.topological_sort(acyclic):
            depth[index] = max(
                (depth[parent] + 1 for parent in acyclic.predecessors(index)), default=0
            )

        if blocked:
            cycle_depth = max(depth.values(), default=-1) + 1
            for index in blocked:
                depth[index] = cycle_depth

        levels: List[List[int]] = [[] for _ in range(max(depth.values()) + 1)]
        for index in indices:
            levels[depth[index]].append(index)
        return [level for level in levels if level]

    @staticmethod
    def dependency_graph(indices: Sequence[int], diagram: Diagram) -> nx.DiGraph:
        """Build a directed graph of node indices from the diagram connections."""
        id_to_index = {diagram.nodes[index].id: index for index in indices}
        graph = nx.DiGraph()
        graph.add_nodes_from(indices)
        for connection in diagram.connections:
            source = id_to_index.get(connection.source_id)
            target = id_to_index.get(connection.target_id)
            if source is None or target is None or source == target:
                continue
            graph.add_edge(source, target)
        return graph


def apply_layout(
    diagram: Diagram,
    algorithm: str = DEFAULT_LAYOUT,
    no_namespaces: bool = False,
    rank_by_depth: bool = False,
) -> Diagram:
    """Lay out a diagram with a fresh LayoutEngine."""
    return LayoutEngine(algorithm, no_namespaces, rank_by_depth).apply_layout(diagram)
