from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.connection",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Connection state changed from %s",
        args=("Live",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_extra_keys() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    output = formatter.format(
        _record(state="Offline", reason="stale", elapsed_s=10.0, has_data=False, ignored="x")
    )

    assert output == (
        "Connection state changed from Live | has_data=false state=Offline "
        "reason=stale elapsed_s=10.000"
    )


def test_formatter_skips_missing_and_none_values() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", extra_keys=["device_id", "status_code"])

    assert formatter.format(_record(device_id=None)) == "Connection state changed from Live"
