"""
pytest configuration for terminator tests.

Adds src directory to Python path for imports and provides shared fixtures.
"""

import io
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from terminator.config import TerminatorConfig, reset_config  # noqa: E402
from terminator.hooks import ManualExitHook  # noqa: E402
from terminator.logging.context import clear_log_context  # noqa: E402
from terminator.orchestrator import Terminator, reset_terminator, set_terminator  # noqa: E402


class RecordingHandler:
    """Handler that appends its name to a shared log when run."""

    def __init__(self, name, log, fail_with=None, on_run=None):
        self.name = name
        self.log = log
        self.fail_with = fail_with
        self.on_run = on_run
        self.calls = 0

    def run(self):
        self.calls += 1
        self.log.append(self.name)
        if self.on_run is not None:
            self.on_run()
        if self.fail_with is not None:
            raise self.fail_with


@pytest.fixture(autouse=True)
def _isolate_process_state():
    reset_config()
    reset_terminator()
    clear_log_context()
    yield
    reset_terminator()
    reset_config()
    clear_log_context()


@pytest.fixture
def run_log():
    return []


@pytest.fixture
def make_handler(run_log):
    def _make(name, fail_with=None, on_run=None):
        return RecordingHandler(name, run_log, fail_with=fail_with, on_run=on_run)

    return _make


@pytest.fixture
def exit_hook():
    return ManualExitHook()


@pytest.fixture
def diagnostics():
    return io.StringIO()


@pytest.fixture
def terminator(exit_hook, diagnostics):
    return Terminator(
        exit_hook=exit_hook,
        config=TerminatorConfig(),
        diagnostic_stream=diagnostics,
    )


@pytest.fixture
def default_terminator(terminator):
    """Install the test terminator as the process-wide instance."""
    set_terminator(terminator)
    return terminator
