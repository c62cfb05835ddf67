"""Unit tests for structured logging."""

from __future__ import annotations

import json
import logging

from agent_workflows.logging import JsonFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="agent_workflows.engine.chain",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Chain %s running",
        args=("step 0",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_emits_message_and_extra_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record(workflow="chain", step=0)))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "agent_workflows.engine.chain"
    assert payload["message"] == "Chain step 0 running"
    assert payload["extra"] == {"workflow": "chain", "step": 0}


def test_json_formatter_omits_empty_extra() -> None:
    payload = json.loads(JsonFormatter().format(_record()))

    assert "extra" not in payload
