import json
import logging

import pytest

from mbbs.core.logging import JsonFormatter


def _record(**extra):
    record = logging.LogRecord("mbbs.services.thread", logging.INFO, __file__, 1, "thread %s", ("created",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
def test_json_formatter_includes_extra_fields():
    line = JsonFormatter(service="mbbs", env="test").format(_record(thread_id=3, permissions=("a", "b")))
    entry = json.loads(line)
    assert entry["message"] == "thread created"
    assert entry["level"] == "INFO"
    assert entry["service"] == "mbbs" and entry["env"] == "test"
    assert entry["thread_id"] == 3
    assert entry["permissions"] == ["a", "b"]
    assert "lineno" not in entry and "args" not in entry


@pytest.mark.unit
def test_json_formatter_keeps_non_ascii():
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "（有隐藏内容）", None, None)
    assert "（有隐藏内容）" in JsonFormatter().format(record)
