# tests/test_obs/test_logging.py

import json
import logging
from datetime import datetime, timezone
from types import SimpleNamespace

from loguru import logger

from moviereview.core import logger as log_setup


def test_stdlib_records_are_forwarded_to_loguru():
    log_setup.patch_std_loggers()
    captured = []
    sink_id = logger.add(lambda message: captured.append(message.record), level="INFO")
    try:
        logging.getLogger("moviereview.services.review_service").warning("review %s rejected", 42)
    finally:
        logger.remove(sink_id)

    records = [r for r in captured if r["message"] == "review 42 rejected"]
    assert records and records[0]["level"].name == "WARNING"
    # Caller location points at the code that logged, not at the logging module
    assert records[0]["function"] == "test_stdlib_records_are_forwarded_to_loguru"
    assert records[0]["name"] == __name__


def test_request_id_is_bound_in_context():
    captured = []
    sink_id = logger.add(lambda message: captured.append(message.record["extra"].copy()), level="INFO")
    try:
        with logger.contextualize(request_id="abc-123"):
            logger.info("inside request")
    finally:
        logger.remove(sink_id)

    assert captured[-1]["request_id"] == "abc-123"


def test_json_formatter_keeps_payload_out_of_the_template():
    record = {
        "time": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "level": SimpleNamespace(name="INFO"),
        "name": "moviereview.tests",
        "function": "f",
        "line": 1,
        "message": 'quote " and {braces}',
        "extra": {"request_id": "rid"},
    }

    template = log_setup._fmt_json(record)

    assert template == "{extra[_json]}\n{exception}"
    payload = json.loads(record["extra"]["_json"])
    assert payload["message"] == 'quote " and {braces}'
    assert payload["request_id"] == "rid"
