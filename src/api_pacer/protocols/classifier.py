# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for rate limit classification."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RateLimitClassifierProtocol(Protocol):
    """
    Protocol for recognising rate-limited outcomes.

    The scheduler calls the classifier with every value an action returns.
    Implementations return the server's retry delay in seconds when the
    value reports a rate limit rejection, and None for any other outcome.
    """

    def __call__(self, result: Any) -> float | None:
        """
        Classify an action result.

        Args:
            result: Value returned by a submitted action

        Returns:
            Retry delay in seconds, or None if the call was not rate limited
        """
        ...
