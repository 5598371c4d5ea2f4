"""Structured Logging — JSON formatter fields and idempotent setup."""

import json
import logging

from conference_status.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "conference_status.test", logging.WARNING, __file__, 1,
        "Transition %s", ("c1",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_domain_fields():
    line = JSONFormatter().format(_record(
        conference_id="c1", from_status="upcoming", to_status="live",
    ))
    payload = json.loads(line)
    assert payload["message"] == "Transition c1"
    assert payload["level"] == "WARNING"
    assert payload["conference_id"] == "c1"
    assert payload["from_status"] == "upcoming"
    assert payload["to_status"] == "live"


def test_json_formatter_omits_absent_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert "conference_id" not in payload
    assert "error_code" not in payload


def test_setup_logging_does_not_stack_handlers():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("DEBUG", "text")
        ours = [h for h in logging.root.handlers if h.get_name() == "conference_status"]
        assert len(ours) == 1
        assert not isinstance(ours[0].formatter, JSONFormatter)
        assert logging.root.level == logging.DEBUG
    finally:
        logging.root.handlers[:] = before
        logging.root.setLevel(level)
