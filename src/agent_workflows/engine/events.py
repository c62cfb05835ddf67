from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WorkflowEvent:
    """A progress signal emitted by a runner.

    Events are observational only. Handlers never influence control flow:
    an exception raised by a handler is logged and the run carries on.
    """

    type: str
    payload: dict[str, object]


EventHandler = Callable[[WorkflowEvent], None]


def emit(handler: EventHandler | None, event_type: str, **payload: object) -> None:
    if handler is None:
        return
    try:
        handler(WorkflowEvent(type=event_type, payload=payload))
    except Exception:
        logger.exception(f"Event handler failed on {event_type}", extra={"event": event_type})
