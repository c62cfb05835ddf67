from __future__ import annotations

import threading

from .errors import WorkflowCancelledError


class CancellationToken:
    """Cooperative cancellation signal shared between a caller and a runner.

    Children created with :meth:`child` are cancelled together with their
    parent, but cancelling a child leaves the parent untouched. Fan-out uses a
    child so that one failed sibling can stop the others without cancelling
    the caller's whole workflow.
    """

    def __init__(self, parent: CancellationToken | None = None) -> None:
        self._event = threading.Event()
        self._parent = parent

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def cancel(self) -> None:
        self._event.set()

    def child(self) -> CancellationToken:
        return CancellationToken(parent=self)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise WorkflowCancelledError("Workflow was cancelled")
