"""
Test Configuration
------------------
Shared fixtures and configuration for all tests.

The real Salesforce CLI is never run: tools are wired to a recording
fake invoker, and any stray attempt to launch `sf` fails loudly.
"""

import json
import subprocess
import sys
from pathlib import Path
from typing import Any, List, Optional

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.errors import ProcessLaunchError
from tools.dispatcher import ToolDispatcher
from tools.invoker import CapturedOutput
from tools.salesforce import create_salesforce_tools


# =============================================================================
# Test Isolation: Block Side Effects
# =============================================================================

@pytest.fixture(autouse=True)
def block_salesforce_cli(monkeypatch):
    """
    Block subprocess.run() calls that would launch the real `sf` binary.

    Other subprocess calls (e.g. the Python interpreter used by the
    invoker tests) are allowed through.
    """
    _original_run = subprocess.run

    def _guarded_run(args, *a, **kwargs):
        if isinstance(args, (list, tuple)) and args and args[0] == "sf":
            raise RuntimeError(
                "Launching the real sf CLI is forbidden during tests. "
                "Use the fake_invoker fixture."
            )
        return _original_run(args, *a, **kwargs)

    monkeypatch.setattr(subprocess, "run", _guarded_run)


class FakeInvoker:
    """
    Stand-in for ProcessInvoker.

    Records every argument vector it is asked to run and replies with a
    configurable CapturedOutput (or launch failure).
    """

    def __init__(self):
        self.executable = "sf"
        self.calls: List[List[str]] = []
        self.stdout = json.dumps({"status": 0, "result": {"records": []}})
        self.stderr = ""
        self.exit_status = 0
        self.launch_error: Optional[ProcessLaunchError] = None

    def reply(self, stdout: Any = "", stderr: str = "", exit_status: int = 0) -> "FakeInvoker":
        self.stdout = stdout if isinstance(stdout, str) else json.dumps(stdout)
        self.stderr = stderr
        self.exit_status = exit_status
        return self

    def fail_launch(self, reason: str = "executable not found on PATH") -> "FakeInvoker":
        self.launch_error = ProcessLaunchError(self.executable, reason)
        return self

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def run(self, args) -> CapturedOutput:
        self.calls.append(list(args))
        if self.launch_error is not None:
            raise self.launch_error
        return CapturedOutput(
            stdout=self.stdout,
            stderr=self.stderr,
            exit_status=self.exit_status,
            argv=[self.executable, *args],
        )


@pytest.fixture(scope="session")
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def fake_invoker():
    return FakeInvoker()


@pytest.fixture
def registry(fake_invoker):
    """Salesforce tools bound to the fake invoker."""
    return create_salesforce_tools(fake_invoker)


@pytest.fixture
def dispatcher(registry):
    return ToolDispatcher(registry)


@pytest.fixture
def query_args():
    """Minimal valid query_records arguments."""
    return {"targetOrg": "o", "sObject": "Account", "fields": "Id,Name"}
