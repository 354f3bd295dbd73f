"""Cooperative cancellation token for the totals walk."""


class CancellationToken:
    """Abort flag scoped to a single totals walk.

    The walk polls ``cancelled`` at every page boundary; an in-flight request
    is never interrupted.
    """

    def __init__(self) -> None:
        """Initialize an un-cancelled token."""
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation."""
        self._cancelled = True
