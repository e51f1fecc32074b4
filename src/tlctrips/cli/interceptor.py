"""Context manager logging failures of batch CLI operations."""

from __future__ import annotations

import logging

from ..errors import TripsError

log = logging.getLogger("cli")


class Interceptor:
    """
    Context manager to intercept pipeline exceptions.

    Use as a context manager when looping over independent operations
    that should not stop at the first failure:

        interceptor = Interceptor()
        for key in keys:
            with interceptor:
                manager.ensure_local(key)
        raise SystemExit(interceptor.exitcode())

    TripsError exceptions are logged and suppressed; any other
    exception propagates since it signals a bug.
    """

    def __init__(self):
        self.failures = 0

    @property
    def failed(self) -> bool:
        return self.failures > 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None or not issubclass(exc_type, TripsError):
            return False
        log.error("operation failed: %s", exc_value)
        self.failures += 1
        return True  # suppress the exception

    def exitcode(self) -> int:
        """
        Return the exitcode to pass to sys.exit.

        Zero on success, 1 on failure.
        """
        return int(self.failed)
