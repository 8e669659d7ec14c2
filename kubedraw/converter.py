"""
End-to-end conversion of Kubernetes manifests into a diagram file.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from kubedraw.builder import DiagramBuilder
from kubedraw.diagram import Diagram
from kubedraw.dot import generate_dot
from kubedraw.drawio import generate_drawio
from kubedraw.kustomize import KustomizeProcessor
from kubedraw.layout import DEFAULT_LAYOUT, LayoutEngine
from kubedraw.loader import ManifestError, ManifestLoader
from kubedraw.resolver import DependencyResolver
from kubedraw.resources import ResourceRecord
from kubedraw.validator import Validator

logger = logging.getLogger(__name__)

RENDERERS: Dict[str, Callable[[Diagram], str]] = {
    "drawio": generate_drawio,
    "dot": generate_dot,
}


class ConvertOptions:
    """Settings of one conversion run."""

    def __init__(
        self,
        input_dir: Union[str, Path],
        output_file: Optional[Union[str, Path]] = None,
        use_kustomize: bool = False,
        namespace: Optional[str] = None,
        layout: str = DEFAULT_LAYOUT,
        no_namespaces: bool = False,
        output_format: str = "drawio",
        rank_by_depth: bool = False,
        strict_redirects: bool = True,
    ):
        self.input_dir = Path(input_dir)
        self.output_file = Path(output_file) if output_file else None
        self.use_kustomize = use_kustomize
        self.namespace = namespace or None
        self.layout = layout
        self.no_namespaces = no_namespaces
        self.output_format = output_format
        self.rank_by_depth = rank_by_depth
        self.strict_redirects = strict_redirects


class ConversionResult:
    """Summary of a finished conversion."""

    def __init__(
        self,
        output_file: Optional[Path],
        resource_count: int,
        node_count: int,
        connection_count: int,
        kind_counts: Dict[str, int],
    ):
        self.output_file = output_file
        self.resource_count = resource_count
        self.node_count = node_count
        self.connection_count = connection_count
        self.kind_counts = kind_counts

    def __repr__(self) -> str:
        return (
            f"ConversionResult({self.resource_count} resources, {self.node_count} nodes, "
            f"{self.connection_count} connections -> {self.output_file})"
        )


class Converter:
    """Runs load, validate, resolve, build, layout and render for one input."""

    def __init__(self, options: ConvertOptions):
        self.options = options

    def load_resources(self) -> List[ResourceRecord]:
        """Read the input directory, expanding kustomize overlays if enabled."""
        if self.options.use_kustomize:
            return KustomizeProcessor(self.options.namespace).process(self.options.input_dir)
        return ManifestLoader(self.options.namespace).load_directory(self.options.input_dir)

    def build_diagram(self, records: List[ResourceRecord]) -> Diagram:
        """Resolve dependencies, build the model and apply the layout."""
        dependencies = DependencyResolver().resolve(records)
        builder = DiagramBuilder(
            layout=self.options.layout, strict_redirects=self.options.strict_redirects
        )
        diagram = builder.build(records, dependencies)
        engine = LayoutEngine(
            self.options.layout,
            no_namespaces=self.options.no_namespaces,
            rank_by_depth=self.options.rank_by_depth,
        )
        return engine.apply_layout(diagram)

    def render(self, diagram: Diagram) -> str:
        """
        Render a laid-out diagram in the configured format.

        Raises:
            ValueError: If the output format is unknown
        """
        renderer = RENDERERS.get(self.options.output_format)
        if renderer is None:
            raise ValueError(
                f"Unknown output format: {self.options.output_format} "
                f"(expected one of {', '.join(sorted(RENDERERS))})"
            )
        return renderer(diagram)

    def convert(self) -> ConversionResult:
        """
        Convert the input manifests and write the diagram file.

        Raises:
            ValueError: If no output file is configured or validation fails
            ManifestError: If the output file cannot be written
        """
        if self.options.output_file is None:
            raise ValueError("output file is required")

        records = self.load_resources()
        Validator().validate(records)
        diagram = self.build_diagram(records)
        content = self.render(diagram)

        output_path = self.options.output_file
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content)
        except OSError as e:
            raise ManifestError(f"failed to write output file {output_path}: {e}") from e
        logger.info(f"Converted {len(records)} resources to {output_path}")

        return ConversionResult(
            output_path,
            len(records),
            len(diagram.nodes),
            len(diagram.connections),
            dict(Counter(record.kind for record in records)),
        )

    def validate(self) -> int:
        """Load and validate the input; return the number of resources."""
        records = self.load_resources()
        Validator().validate(records)
        return len(records)
