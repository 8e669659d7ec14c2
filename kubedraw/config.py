"""
Environment-driven defaults for kubedraw.

Command-line flags take precedence over these values.
"""

import os
from typing import Optional


class Config:
    """Static accessors for KUBEDRAW_* environment variables."""

    @staticmethod
    def get(key: str, default: Optional[str] = None, required: bool = False) -> str:
        """
        Get an environment variable with optional default and validation.

        Raises:
            ValueError: If required=True and variable is not set
        """
        value = os.getenv(key, default)
        if required and value is None:
            raise ValueError(f"Required environment variable {key} is not set")
        return value or ""

    @staticmethod
    def get_bool(key: str, default: bool = False) -> bool:
        """Get a boolean environment variable ("true", "1", "yes", "on")."""
        value = os.getenv(key, "").lower()
        if value in ("true", "1", "yes", "on"):
            return True
        elif value in ("false", "0", "no", "off"):
            return False
        return default

    @staticmethod
    def layout() -> str:
        """Default layout algorithm (defaults to "hierarchical")."""
        return Config.get("KUBEDRAW_LAYOUT", "hierarchical")

    @staticmethod
    def namespace() -> Optional[str]:
        """Namespace filter, or None when unset."""
        return Config.get("KUBEDRAW_NAMESPACE") or None

    @staticmethod
    def no_namespaces() -> bool:
        """Whether namespace grouping is disabled."""
        return Config.get_bool("KUBEDRAW_NO_NAMESPACES", False)

    @staticmethod
    def output_format() -> str:
        """Default output format (defaults to "drawio")."""
        return Config.get("KUBEDRAW_FORMAT", "drawio")

    @staticmethod
    def kustomize_bin() -> str:
        """Kustomize executable (defaults to "kustomize")."""
        return Config.get("KUBEDRAW_KUSTOMIZE_BIN", "kustomize")
