"""
Unit tests for structured logging.
"""

import json
import logging

from app.utils.logger import JSONFormatter, configure_logging, get_logger


def make_record(**extra):
    record = logging.LogRecord("windspire.test", logging.WARNING, __file__, 10, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["message"] == "hello world"
        assert data["level"] == "WARNING"
        assert data["logger"] == "windspire.test"

    def test_extra_data_is_merged(self):
        data = json.loads(JSONFormatter().format(make_record(extra_data={"error_code": "NOT_FOUND"})))
        assert data["error_code"] == "NOT_FOUND"


class TestConfigureLogging:

    def test_text_format_and_namespace(self):
        root = configure_logging(debug=True, log_format="text")

        assert root.level == logging.DEBUG
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)
        assert get_logger("app.module").name == "windspire.app.module"

        configure_logging(debug=False)
        assert isinstance(logging.getLogger("windspire").handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
