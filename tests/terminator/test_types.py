"""Tests for terminator.types module."""

from terminator.types import Handler, LateRegistrationPolicy, Lifecycle


class TestLifecycle:

    def test_values(self):
        assert Lifecycle.UNINITIALIZED.value == "uninitialized"
        assert Lifecycle.READY.value == "ready"
        assert Lifecycle.COMPLETED.value == "completed"

    def test_member_count(self):
        assert len(Lifecycle) == 3


class TestLateRegistrationPolicy:

    def test_values(self):
        assert {policy.value for policy in LateRegistrationPolicy} == {"error", "run", "drop"}

    def test_lookup_by_value(self):
        assert LateRegistrationPolicy("run") is LateRegistrationPolicy.RUN


class TestHandlerProtocol:

    def test_object_with_run_is_handler(self):
        class Closer:
            def run(self):
                pass

        assert isinstance(Closer(), Handler)

    def test_object_without_run_is_not_handler(self):
        assert not isinstance(object(), Handler)
