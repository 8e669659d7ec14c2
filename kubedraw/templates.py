"""
Visual style tables for rendered diagrams.

All tables are read-only mappings. Lookups for unknown kinds fall back to the
Deployment entry (draw.io) or a plain box (DOT).
"""

from types import MappingProxyType
from typing import Mapping

from kubedraw.resource_utils import VAULT_SECRET_KIND

_WORKLOAD_STYLE = "rounded=1;whiteSpace=wrap;html=1;fillColor=#d5e8d4;strokeColor=#82b366;"

SHAPE_STYLES: Mapping[str, str] = MappingProxyType(
    {
        "Deployment": _WORKLOAD_STYLE,
        "StatefulSet": _WORKLOAD_STYLE,
        "DaemonSet": _WORKLOAD_STYLE,
        "Service": "ellipse;whiteSpace=wrap;html=1;fillColor=#fff2cc;strokeColor=#d6b656;",
        "Ingress": "rhombus;whiteSpace=wrap;html=1;fillColor=#f8cecc;strokeColor=#b85450;",
        "ConfigMap": (
            "shape=note;whiteSpace=wrap;html=1;backgroundOutline=1;darkOpacity=0.05;"
            "fillColor=#e1d5e7;strokeColor=#9673a6;"
        ),
        "Secret": (
            "shape=note;whiteSpace=wrap;html=1;backgroundOutline=1;darkOpacity=0.05;"
            "fillColor=#f5f5f5;strokeColor=#666666;"
        ),
        "PersistentVolumeClaim": (
            "shape=cylinder3;whiteSpace=wrap;html=1;boundedLbl=1;backgroundOutline=1;"
            "size=15;fillColor=#dae8fc;strokeColor=#6c8ebf;"
        ),
        VAULT_SECRET_KIND: (
            "shape=hexagon;whiteSpace=wrap;html=1;backgroundOutline=1;darkOpacity=0.05;"
            "fillColor=#ffe6cc;strokeColor=#d79b00;"
        ),
        "Route": (
            "shape=trapezoid;whiteSpace=wrap;html=1;fillColor=#ffc9c9;"
            "strokeColor=#d6536d;size=0.2;"
        ),
        "ServiceMonitor": "shape=monitor;whiteSpace=wrap;html=1;fillColor=#e6f3ff;strokeColor=#4a90e2;",
    }
)

CONNECTION_STYLE = "endArrow=classic;html=1;rounded=0;"

NAMESPACE_STYLE = (
    "swimlane;fontStyle=0;childLayout=stackLayout;horizontal=1;startSize=30;"
    "horizontalStack=0;resizeParent=1;resizeParentMax=0;resizeLast=0;collapsible=1;"
    "marginBottom=0;fillColor=#e1d5e7;strokeColor=#9673a6;"
)

# Color scheme for different resource kinds
KIND_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "Deployment": "#FFE5B4",
        "StatefulSet": "#FFE5B4",
        "DaemonSet": "#FFE5B4",
        "Job": "#FFE5B4",
        "CronJob": "#FFE5B4",
        "Service": "#B4E5FF",
        "ConfigMap": "#E5FFE5",
        "Secret": "#FFE5E5",
        "PersistentVolumeClaim": "#E5E5FF",
        "ServiceAccount": "#FFF5E5",
        "Role": "#F0E5FF",
        "ClusterRole": "#F0E5FF",
        "RoleBinding": "#F5E5FF",
        "ClusterRoleBinding": "#F5E5FF",
        "Ingress": "#E5FFF5",
        "Route": "#E5FFF5",
        "ServiceMonitor": "#E6F3FF",
        VAULT_SECRET_KIND: "#FFE6CC",
    }
)

# Shape for different resource kinds
KIND_SHAPES: Mapping[str, str] = MappingProxyType(
    {
        "Deployment": "box",
        "StatefulSet": "box",
        "DaemonSet": "box",
        "Job": "box",
        "CronJob": "box",
        "Service": "diamond",
        "ConfigMap": "note",
        "Secret": "note",
        "PersistentVolumeClaim": "cylinder",
        "ServiceAccount": "ellipse",
        "Role": "hexagon",
        "ClusterRole": "hexagon",
        "RoleBinding": "parallelogram",
        "ClusterRoleBinding": "parallelogram",
        "Ingress": "trapezium",
        "Route": "trapezium",
        "ServiceMonitor": "component",
        VAULT_SECRET_KIND: "hexagon",
    }
)

# Namespace cluster colors
NAMESPACE_COLORS = (
    "#E8F4F8",
    "#FFF5E5",
    "#E5FFE5",
    "#FFE5E5",
    "#E5E5FF",
    "#F0E5FF",
    "#E5FFF5",
    "#FFE5B4",
    "#B4E5FF",
)


def get_shape_style(kind: str) -> str:
    """Return the draw.io style for a kind, defaulting to the Deployment style."""
    return SHAPE_STYLES.get(kind, SHAPE_STYLES["Deployment"])


def get_kind_color(kind: str) -> str:
    return KIND_COLORS.get(kind, "#FFFFFF")


def get_kind_shape(kind: str) -> str:
    return KIND_SHAPES.get(kind, "box")
