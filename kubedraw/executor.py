"""
Subprocess execution for external manifest tooling (kustomize, kubectl).
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any, List, Optional

from kubedraw.output import get_output

logger = logging.getLogger(__name__)


class CommandExecutor:
    """
    Runs external commands with consistent logging and error reporting.

    Args:
        check: If True, raise CalledProcessError on non-zero exit codes
        capture_output: If True, capture stdout and stderr
    """

    def __init__(self, check: bool = True, capture_output: bool = True):
        self.check = check
        self.capture_output = capture_output

    @staticmethod
    def available(command: str) -> bool:
        """Check if an executable is on PATH."""
        return shutil.which(command) is not None

    def run(
        self,
        cmd: List[str],
        cwd: Optional[Path] = None,
        check: Optional[bool] = None,
        **kwargs: Any,
    ) -> subprocess.CompletedProcess:
        """
        Execute a command and return the result.

        Args:
            cmd: Command to execute as a list of strings
            cwd: Working directory for the command
            check: Override default check behavior
            **kwargs: Additional arguments to pass to subprocess.run

        Returns:
            CompletedProcess with text stdout and stderr

        Raises:
            subprocess.CalledProcessError: If check is enabled and the command fails
            FileNotFoundError: If the executable is not found
        """
        check = check if check is not None else self.check
        cwd_str = str(cwd) if cwd else None
        output = get_output()

        logger.debug(f"Executing command: {' '.join(cmd)}")
        output.verbose(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd_str,
                check=check,
                capture_output=self.capture_output,
                text=True,
                **kwargs,
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"Command failed: {' '.join(cmd)} (return code {e.returncode})")
            if e.stderr:
                logger.error(f"Stderr: {e.stderr}")
                output.verbose(f"Stderr: {e.stderr}")
            raise
        except FileNotFoundError:
            logger.error(f"Command not found: {cmd[0]}")
            raise

        logger.debug(f"Command completed with return code: {result.returncode}")
        return result


_default_executor = CommandExecutor()


def get_executor() -> CommandExecutor:
    """Return the default command executor."""
    return _default_executor
