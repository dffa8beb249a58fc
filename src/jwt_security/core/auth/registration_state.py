"""Registration state.

One-way flags that make security wiring idempotent. Each flag flips from
unset to set at most once; the guarded action runs inside the same critical
section as the check, so concurrent first callers cannot both run it.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


class RegistrationFlag(str, Enum):
    """Wiring steps that must happen at most once"""
    TOKEN_SCHEME = "token-scheme-configured"
    DOCUMENTATION = "documentation-annotated"
    PIPELINE = "pipeline-activated"
    DEFAULT_PROVIDER = "default-provider-registered"
    CUSTOM_PROVIDER = "custom-provider-registered"
    FACEBOOK = "facebook-provider-registered"
    GOOGLE = "google-provider-registered"
    TWITTER = "twitter-provider-registered"
    AZURE_AD = "azure-ad-provider-registered"


class RegistrationState:
    """Thread-safe set of registration flags.

    Pass one instance to every builder that should share "configure once"
    semantics. Tests create their own instance, or reset the process default.
    """

    def __init__(self):
        self._flags: set[RegistrationFlag] = set()
        self._results: dict[RegistrationFlag, Any] = {}
        # Re-entrant: a guarded action may itself run other guarded steps
        self._lock = threading.RLock()

    def is_set(self, flag: RegistrationFlag) -> bool:
        with self._lock:
            return flag in self._flags

    def run_once(
        self,
        flag: RegistrationFlag,
        action: Callable[[], object],
        excludes: Iterable[RegistrationFlag] = (),
    ) -> bool:
        """Run action and set flag, unless flag or any excluded flag is set.

        The flag is only set when action returns normally, and its return
        value is kept for result(flag); exceptions propagate and leave the
        state unchanged.

        Returns:
            True if action ran, False if the call was a no-op
        """
        with self._lock:
            if flag in self._flags:
                logger.debug(f"Skipping {flag.value}: already done")
                return False
            blocking = [f for f in excludes if f in self._flags]
            if blocking:
                logger.debug(f"Skipping {flag.value}: {blocking[0].value} already set")
                return False

            self._results[flag] = action()
            self._flags.add(flag)
            return True

    def result(self, flag: RegistrationFlag) -> Any:
        """Return what the action guarded by flag returned, or None if unset."""
        with self._lock:
            return self._results.get(flag)

    def snapshot(self) -> frozenset[RegistrationFlag]:
        with self._lock:
            return frozenset(self._flags)

    def reset(self) -> None:
        """Clear every flag (for testing)."""
        with self._lock:
            self._flags.clear()
            self._results.clear()


# Process default, shared by callers that do not pass their own state
_state_instance: Optional[RegistrationState] = None
_state_lock = threading.Lock()


def get_registration_state() -> RegistrationState:
    """Get the process-wide registration state."""
    global _state_instance

    if _state_instance is None:
        with _state_lock:
            if _state_instance is None:
                _state_instance = RegistrationState()
    return _state_instance


def reset_registration_state() -> None:
    """Reset the process-wide registration state (for testing)."""
    global _state_instance
    with _state_lock:
        _state_instance = None
