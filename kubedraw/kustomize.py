"""
Expansion of a kustomize overlay directory into resource records.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from kubedraw.config import Config
from kubedraw.executor import CommandExecutor, get_executor
from kubedraw.loader import ManifestError, ManifestLoader
from kubedraw.resources import ResourceRecord

logger = logging.getLogger(__name__)

KUSTOMIZATION_FILES = ["kustomization.yaml", "kustomization.yml"]


class KustomizeProcessor:
    """
    Builds a kustomization with the kustomize binary (or ``kubectl kustomize``)
    and decodes the rendered stream.

    Args:
        namespace: Optional namespace filter for the rendered resources
        executor: Command executor; defaults to the shared executor
        kustomize_bin: kustomize executable; defaults to Config.kustomize_bin()
    """

    def __init__(
        self,
        namespace: Optional[str] = None,
        executor: Optional[CommandExecutor] = None,
        kustomize_bin: Optional[str] = None,
    ):
        self.loader = ManifestLoader(namespace)
        self.executor = executor or get_executor()
        self.kustomize_bin = kustomize_bin or Config.kustomize_bin()

    @staticmethod
    def find_kustomization(directory: Path) -> Optional[Path]:
        """Return the kustomization file of a directory, if any."""
        for name in KUSTOMIZATION_FILES:
            candidate = directory / name
            if candidate.exists():
                return candidate
        return None

    def build_command(self, directory: Path) -> List[str]:
        """Choose the kustomize command for this machine."""
        if self.executor.available(self.kustomize_bin):
            return [self.kustomize_bin, "build", str(directory)]
        if self.executor.available("kubectl"):
            return ["kubectl", "kustomize", str(directory)]
        return [self.kustomize_bin, "build", str(directory)]

    def process(self, directory: Union[str, Path]) -> List[ResourceRecord]:
        """
        Render the kustomization in ``directory``.

        Raises:
            ManifestError: If there is no kustomization file or the build fails
        """
        directory = Path(directory)
        if self.find_kustomization(directory) is None:
            raise ManifestError(f"no kustomization.yaml found in {directory}")

        cmd = self.build_command(directory)
        try:
            result = self.executor.run(cmd)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit code {e.returncode}"
            raise ManifestError(f"failed to build kustomization: {detail}") from e
        except FileNotFoundError as e:
            raise ManifestError(
                f"failed to build kustomization: {cmd[0]} is not installed"
            ) from e

        records = self.loader.load_stream(result.stdout or "")
        logger.debug(f"Kustomization in {directory} rendered {len(records)} resources")
        return records
