"""Unit tests for RegistrationState"""

import threading
import time

import pytest

from jwt_security.core.auth.registration_state import (
    RegistrationFlag,
    RegistrationState,
    get_registration_state,
    reset_registration_state,
)

pytestmark = pytest.mark.unit


class TestRunOnce:

    def test_runs_first_time_only(self, state):
        calls = []

        assert state.run_once(RegistrationFlag.TOKEN_SCHEME, lambda: calls.append(1)) is True
        assert state.run_once(RegistrationFlag.TOKEN_SCHEME, lambda: calls.append(2)) is False

        assert calls == [1]
        assert state.is_set(RegistrationFlag.TOKEN_SCHEME)

    def test_failed_action_leaves_flag_unset(self, state):
        def fail():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            state.run_once(RegistrationFlag.GOOGLE, fail)

        assert not state.is_set(RegistrationFlag.GOOGLE)
        assert state.run_once(RegistrationFlag.GOOGLE, lambda: None) is True

    def test_excluded_flag_blocks(self, state):
        state.run_once(RegistrationFlag.CUSTOM_PROVIDER, lambda: None)

        ran = state.run_once(
            RegistrationFlag.DEFAULT_PROVIDER,
            lambda: pytest.fail("must not run"),
            excludes=(RegistrationFlag.CUSTOM_PROVIDER,),
        )

        assert ran is False
        assert not state.is_set(RegistrationFlag.DEFAULT_PROVIDER)

    def test_nested_run_once(self, state):
        def outer():
            state.run_once(RegistrationFlag.DOCUMENTATION, lambda: None)

        state.run_once(RegistrationFlag.TOKEN_SCHEME, outer)

        assert state.snapshot() == frozenset(
            {RegistrationFlag.TOKEN_SCHEME, RegistrationFlag.DOCUMENTATION}
        )

    def test_concurrent_first_callers_run_once(self, state):
        calls = []
        barrier = threading.Barrier(8)

        def action():
            time.sleep(0.01)
            calls.append(threading.get_ident())

        def worker():
            barrier.wait()
            state.run_once(RegistrationFlag.FACEBOOK, action)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1

    def test_result_kept_for_later_callers(self, state):
        state.run_once(RegistrationFlag.TOKEN_SCHEME, lambda: "policy")
        state.run_once(RegistrationFlag.TOKEN_SCHEME, lambda: "other")

        assert state.result(RegistrationFlag.TOKEN_SCHEME) == "policy"

    def test_no_result_after_failure(self, state):
        def fail():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            state.run_once(RegistrationFlag.TOKEN_SCHEME, fail)

        assert state.result(RegistrationFlag.TOKEN_SCHEME) is None

    def test_reset(self, state):
        state.run_once(RegistrationFlag.PIPELINE, lambda: "activated")
        state.reset()

        assert state.snapshot() == frozenset()
        assert state.result(RegistrationFlag.PIPELINE) is None


class TestProcessState:

    def test_shared_until_reset(self):
        first = get_registration_state()
        assert get_registration_state() is first

        reset_registration_state()

        assert get_registration_state() is not first
