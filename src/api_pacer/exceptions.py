# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the api-pacer library.

All exceptions inherit from PacerError, making it easy to catch
every library-originated error with a single except clause. Errors raised
by a submitted action are never wrapped; they reach the caller unchanged.
"""


class PacerError(Exception):
    """Base exception for all api-pacer errors.

    Example:
        try:
            response = await client.call("chat.postMessage", params)
        except PacerError as e:
            logger.error(f"API call failed: {e}")
    """

    pass


class TransportExhaustedError(PacerError):
    """Raised when the transport used up its retry budget.

    The transport retries server errors (status >= 500) and connectivity
    failures. Once every attempt has failed this error is raised with
    the details of the final attempt.

    Attributes:
        attempts: Number of attempts that were made.
        last_status: HTTP status of the last attempt, or None if the last
            attempt failed at the connection level.
        last_error: Exception raised by the last attempt, or None if the
            last attempt produced a server error response.

    Example:
        try:
            response = await transport.perform(request)
        except TransportExhaustedError as e:
            logger.error(f"Gave up after {e.attempts} attempts")
    """

    def __init__(
        self,
        message: str,
        attempts: int,
        last_status: int | None = None,
        last_error: BaseException | None = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_status = last_status
        self.last_error = last_error


class SchedulerError(PacerError):
    """Raised when the scheduler cannot accept work.

    Currently this means submit() was called outside a running event loop.
    """

    pass


__all__ = [
    "PacerError",
    "SchedulerError",
    "TransportExhaustedError",
]
