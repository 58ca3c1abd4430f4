from __future__ import annotations

from typing import Any


class InvalidStateError(Exception):
    pass


class RejectedError(Exception):
    """Raised by :meth:`Deferred.result` when the rejection reason is not an exception."""

    def __init__(self, reason: Any):
        super().__init__(reason)
        self.reason = reason
