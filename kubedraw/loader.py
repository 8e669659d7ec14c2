"""
Loading Kubernetes manifests from YAML into resource records.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

import yaml

from kubedraw.resources import ResourceRecord

logger = logging.getLogger(__name__)


class ManifestError(RuntimeError):
    """Raised when manifests cannot be read, parsed or expanded."""


class ManifestLoader:
    """
    Reads YAML manifests and decodes each document into a ResourceRecord.

    Args:
        namespace: If set, only documents in this namespace are kept
    """

    def __init__(self, namespace: Optional[str] = None):
        self.namespace = namespace or None

    def load_directory(self, directory: Union[str, Path]) -> List[ResourceRecord]:
        """
        Load every *.yaml and *.yml file directly inside a directory.

        Raises:
            FileNotFoundError: If the directory does not exist
            ManifestError: If a file cannot be read or parsed
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Input directory not found: {directory}")

        files = sorted(directory.glob("*.yaml")) + sorted(directory.glob("*.yml"))
        logger.debug(f"Found {len(files)} manifest files in {directory}")

        records: List[ResourceRecord] = []
        for path in files:
            records.extend(self.load_file(path))
        return records

    def load_file(self, path: Union[str, Path]) -> List[ResourceRecord]:
        """Load all documents of a single YAML file."""
        path = Path(path)
        try:
            with open(path, "r") as f:
                documents = list(yaml.safe_load_all(f))
        except (yaml.YAMLError, IOError, OSError) as e:
            raise ManifestError(f"failed to parse file {path}: {e}") from e
        return self.parse_documents(documents)

    def load_stream(self, content: str) -> List[ResourceRecord]:
        """Load all documents of a YAML stream held in memory."""
        try:
            documents = list(yaml.safe_load_all(content))
        except yaml.YAMLError as e:
            raise ManifestError(f"failed to parse manifests: {e}") from e
        return self.parse_documents(documents)

    def parse_documents(self, documents: Iterable[Any]) -> List[ResourceRecord]:
        """Decode documents, skipping empty ones and applying the namespace filter."""
        records = []
        for doc in documents:
            if doc is None or not isinstance(doc, dict):
                continue
            record = ResourceRecord.from_manifest(doc)
            if self.namespace is not None and record.namespace != self.namespace:
                continue
            records.append(record)
        return records
