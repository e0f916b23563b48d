import logging

from app.main import ContextFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_plain_record_has_no_context_suffix():
    assert ContextFormatter("%(message)s").format(_record()) == "hello"


def test_context_fields_are_appended():
    line = ContextFormatter("%(message)s").format(_record(user_id="alice", outcome="committed", resources_created=4))
    assert line == "hello | user_id=alice outcome=committed resources_created=4"
