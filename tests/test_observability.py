import io
import logging

import pytest

from codefresh_sync.logging import LogfmtFormatter, setup_logging
from codefresh_sync.observability import log_event


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "codefresh_sync.test", logging.INFO, __file__, 1, msg, None, None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_request_fields_are_formatted_in_order():
    line = LogfmtFormatter().format(
        _record("op.request", status=404, method="GET", path="/contexts/ctx", duration_ms=7)
    )

    assert line == (
        "level=info logger=codefresh_sync.test event=op.request "
        "method=GET path=/contexts/ctx status=404 duration_ms=7"
    )


def test_resource_fields_include_the_replaced_rule():
    line = LogfmtFormatter().format(
        _record(
            "resource.permission.replace",
            resource="permission",
            resource_id="perm-2",
            replaced="perm-1",
        )
    )

    assert line.endswith("resource=permission resource_id=perm-2 replaced=perm-1")


def test_error_bodies_stay_on_one_line():
    line = LogfmtFormatter().format(
        _record("resource.permission.delete_failed", error='500 Internal, {"msg": "a\nb"}')
    )

    assert "\n" not in line
    assert 'error="500 Internal, {\\"msg\\": \\"a\\nb\\"}"' in line


def test_unknown_extras_are_not_printed():
    line = LogfmtFormatter().format(_record("hello", token="secret"))
    assert line == "level=info logger=codefresh_sync.test event=hello"


def test_log_event_sets_resource_fields(caplog):
    log = logging.getLogger("codefresh_sync.resources.context")
    caplog.set_level(logging.INFO, logger=log.name)

    log_event("resource.context.create", log, resource="context", resource_id=None)

    record = next(
        r for r in caplog.records if r.getMessage() == "resource.context.create"
    )
    assert record.resource == "context"
    assert not hasattr(record, "resource_id")


def test_log_event_level(caplog):
    log = logging.getLogger("codefresh_sync.resources.permission")
    caplog.set_level(logging.INFO, logger=log.name)

    log_event("resource.permission.delete_failed", log, level=logging.WARNING, error="boom")

    record = next(
        r for r in caplog.records if r.getMessage() == "resource.permission.delete_failed"
    )
    assert record.levelno == logging.WARNING
    assert record.error == "boom"


def test_log_event_rejects_fields_the_formatter_would_drop():
    with pytest.raises(TypeError) as exc:
        log_event("resource.context.create", logging.getLogger("x"), name="clobbered")
    assert "name" in str(exc.value)


def test_setup_logging_replaces_its_own_handler():
    log = logging.getLogger("codefresh_sync")
    saved_handlers, saved_level = list(log.handlers), log.level
    stream = io.StringIO()
    try:
        setup_logging("debug")
        handler = setup_logging("debug", stream=stream)

        ours = [h for h in log.handlers if isinstance(h.formatter, LogfmtFormatter)]
        assert ours == [handler]
        assert log.level == logging.DEBUG

        logging.getLogger("codefresh_sync.client").debug("op.request", extra={"status": 200})
        assert stream.getvalue() == (
            "level=debug logger=codefresh_sync.client event=op.request status=200\n"
        )
    finally:
        for h in list(log.handlers):
            log.removeHandler(h)
        for h in saved_handlers:
            log.addHandler(h)
        log.setLevel(saved_level)
