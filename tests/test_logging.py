import logging

from netflim_api.core.config import settings
from netflim_api.core.logger import RequestContextFilter
from netflim_api.core.sentry import init_sentry
from netflim_api.core.trace import (
    get_session_id,
    set_session_id,
    set_trace_id,
)


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg",
                               None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_filter_adds_request_context():
    set_trace_id("trace-1")
    set_session_id("session_abcdef123456789")

    record = make_record()
    assert RequestContextFilter().filter(record) is True

    assert record.trace_id == "trace-1"
    assert record.session_id == "session_abcd"
    assert record.service == settings.app_name
    assert record.env == settings.env


def test_filter_keeps_explicit_fields():
    record = make_record(trace_id="given", service="worker")
    RequestContextFilter().filter(record)
    assert record.trace_id == "given"
    assert record.service == "worker"


def test_empty_session_is_dash():
    set_session_id("")
    assert get_session_id() == "-"


def test_sentry_stays_off_without_dsn():
    assert init_sentry("") is False
