"""
Kubedraw - Convert Kubernetes manifests into Draw.io architecture diagrams.
"""

__version__ = "1.0.0"

from kubedraw.resources import ResourceRecord
from kubedraw.resolver import DependencyResolver, ExtractorRegistry, resolve_dependencies
from kubedraw.diagram import Connection, Diagram, DiagramNode, NamespaceGroup
from kubedraw.builder import DiagramBuilder, build_diagram
from kubedraw.layout import LayoutEngine, apply_layout
from kubedraw.loader import ManifestError, ManifestLoader
from kubedraw.kustomize import KustomizeProcessor
from kubedraw.validator import ValidationError, Validator
from kubedraw.converter import ConversionResult, ConvertOptions, Converter
from kubedraw.config import Config

__all__ = [
    "ResourceRecord",
    "DependencyResolver",
    "ExtractorRegistry",
    "resolve_dependencies",
    "Connection",
    "Diagram",
    "DiagramNode",
    "NamespaceGroup",
    "DiagramBuilder",
    "build_diagram",
    "LayoutEngine",
    "apply_layout",
    "ManifestError",
    "ManifestLoader",
    "KustomizeProcessor",
    "ValidationError",
    "Validator",
    "ConversionResult",
    "ConvertOptions",
    "Converter",
    "Config",
]
