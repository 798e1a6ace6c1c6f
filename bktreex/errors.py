from __future__ import annotations


class CancellationIncomplete(RuntimeError):
    """A concurrent range search was abandoned before every node was visited."""

    def __init__(self, reason: str = "cancelled") -> None:
        super().__init__(
            f"Concurrent range search did not complete ({reason}); partial matches were discarded."
        )
        self.reason = reason


__all__ = ["CancellationIncomplete"]
