"""Tests for terminator.logging.context and LogContext."""

from terminator.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from terminator.logging.context_managers import LogContext


class TestLogContextVars:
    def setup_method(self):
        clear_log_context()

    def teardown_method(self):
        clear_log_context()

    def test_defaults_are_empty(self):
        ctx = get_log_context()
        assert ctx == {"shutdown_id": "", "phase": "", "component": ""}

    def test_set_all_fields(self):
        set_log_context(shutdown_id="s-1", phase="shutdown", component="api")
        ctx = get_log_context()
        assert ctx["shutdown_id"] == "s-1"
        assert ctx["phase"] == "shutdown"
        assert ctx["component"] == "api"

    def test_partial_set_preserves_others(self):
        set_log_context(shutdown_id="s-1", phase="register")
        set_log_context(phase="shutdown")
        ctx = get_log_context()
        assert ctx["shutdown_id"] == "s-1"
        assert ctx["phase"] == "shutdown"

    def test_clear_resets_all(self):
        set_log_context(shutdown_id="s-1", phase="shutdown", component="api")
        clear_log_context()
        assert all(v == "" for v in get_log_context().values())


class TestLogContextManager:
    def setup_method(self):
        clear_log_context()

    def teardown_method(self):
        clear_log_context()

    def test_sets_context_inside_block(self):
        with LogContext(shutdown_id="s-2", phase="shutdown"):
            ctx = get_log_context()
            assert ctx["shutdown_id"] == "s-2"
            assert ctx["phase"] == "shutdown"

    def test_restores_previous_context(self):
        set_log_context(component="worker", phase="register")

        with LogContext(phase="shutdown"):
            assert get_log_context()["phase"] == "shutdown"
            assert get_log_context()["component"] == "worker"

        assert get_log_context()["phase"] == "register"

    def test_restores_on_exception(self):
        try:
            with LogContext(shutdown_id="s-3"):
                raise RuntimeError("fail")
        except RuntimeError:
            pass

        assert get_log_context()["shutdown_id"] == ""
