"""Tests for exit hook implementations."""

from unittest.mock import patch

from terminator.hooks import AtexitHook, ManualExitHook


class TestAtexitHook:

    def test_install_registers_with_atexit(self):
        hook = AtexitHook()
        callback = lambda: None  # noqa: E731

        with patch("terminator.hooks.atexit") as mock_atexit:
            hook.install(callback)

        mock_atexit.register.assert_called_once_with(callback)

    def test_uninstall_unregisters_installed_callbacks(self):
        hook = AtexitHook()
        first = lambda: None  # noqa: E731
        second = lambda: None  # noqa: E731

        with patch("terminator.hooks.atexit") as mock_atexit:
            hook.install(first)
            hook.install(second)
            hook.uninstall()
            hook.uninstall()

        assert mock_atexit.unregister.call_count == 2
        unregistered = {call.args[0] for call in mock_atexit.unregister.call_args_list}
        assert unregistered == {first, second}


class TestManualExitHook:

    def test_not_installed_initially(self):
        hook = ManualExitHook()
        assert hook.installed is False
        assert hook.install_count == 0

    def test_fire_invokes_callbacks_in_order(self):
        hook = ManualExitHook()
        calls = []
        hook.install(lambda: calls.append(1))
        hook.install(lambda: calls.append(2))

        hook.fire()

        assert calls == [1, 2]
        assert hook.install_count == 2

    def test_fire_without_callbacks(self):
        ManualExitHook().fire()
