"""Unit tests for structured log formatting.

Run with: pytest tests/unit/test_logging.py -v
"""

import json
import logging

from caseintake.logging import JSONFormatter, get_context_logger


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="caseintake.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Committed %d records",
        args=(3,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_core_fields(self):
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "caseintake.test"
        assert data["message"] == "Committed 3 records"
        assert "timestamp" in data

    def test_extra_fields_are_included(self):
        data = json.loads(JSONFormatter().format(_record(submitted=3, user_id="u-1")))

        assert data["submitted"] == 3
        assert data["user_id"] == "u-1"

    def test_reserved_attributes_are_not_duplicated(self):
        data = json.loads(JSONFormatter().format(_record()))

        assert "args" not in data
        assert "msg" not in data


def test_context_logger_adds_context(caplog):
    logger = get_context_logger("caseintake.test.context", component="parser")

    with caplog.at_level(logging.INFO, logger="caseintake.test.context"):
        logger.info("parsed")

    assert caplog.records[-1].component == "parser"
