"""
Process Invoker
---------------
Runs the external CLI with a prepared argument vector.

Rules:
- No shell=True in subprocess
- Executable resolved through PATH by name
- stdin closed, environment inherited unchanged
- Output fully buffered; no timeout, no retry
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Sequence
import logging
import subprocess

from core.errors import ProcessLaunchError


DEFAULT_EXECUTABLE = "sf"


@dataclass
class CapturedOutput:
    """Buffered result of one external process run."""
    stdout: str
    stderr: str
    exit_status: int
    argv: List[str] = field(default_factory=list)
    execution_time_ms: float = 0.0

    @property
    def exited_cleanly(self) -> bool:
        return self.exit_status == 0

    def __repr__(self) -> str:
        return (
            f"CapturedOutput(exit={self.exit_status}, stdout={len(self.stdout)} chars, "
            f"stderr={len(self.stderr)} chars)"
        )


class ProcessInvoker:
    """
    Blocking runner for the external CLI.

    One call owns its CapturedOutput; the invoker itself keeps no state
    between calls, so a single instance is shared by every tool.
    """

    def __init__(self, executable: str = DEFAULT_EXECUTABLE):
        self.executable = executable
        self._logger = logging.getLogger("sf_bridge.tools.invoker")

    def run(self, args: Sequence[str]) -> CapturedOutput:
        """
        Execute `<executable> *args` and wait for it to exit.

        Returns a CapturedOutput for any exit status. Raises
        ProcessLaunchError when the program cannot be started at all.
        """
        argv = [self.executable, *args]
        start_time = datetime.now(timezone.utc)
        self._logger.debug(f"Running: {argv}")

        try:
            completed = subprocess.run(
                argv,
                shell=False,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise ProcessLaunchError(self.executable, f"executable not found on PATH ({e})") from e
        except PermissionError as e:
            raise ProcessLaunchError(self.executable, f"permission denied ({e})") from e
        except OSError as e:
            raise ProcessLaunchError(self.executable, str(e)) from e

        execution_time = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
        captured = CapturedOutput(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            exit_status=completed.returncode,
            argv=argv,
            execution_time_ms=execution_time,
        )

        self._logger.info(
            f"{self.executable} {' '.join(args[:2])} exited {captured.exit_status} "
            f"in {execution_time:.0f}ms",
            extra={"execution_time_ms": execution_time},
        )
        return captured
