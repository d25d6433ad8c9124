import logging

from kitchenunits import config
from kitchenunits.observability import (
    Diagnostic,
    bind_sink,
    capture_diagnostics,
    current_sink,
    emit_diagnostic,
    reset_sink,
)


def test_emit_diagnostic_logs_and_returns_record(caplog):
    with caplog.at_level(logging.WARNING, logger="kitchenunits"):
        diagnostic = emit_diagnostic("unrecognized-unit", "Unrecognized unit: tasses", unit="tasses")

    assert diagnostic == Diagnostic(
        code="unrecognized-unit",
        message="Unrecognized unit: tasses",
        level=logging.WARNING,
        context={"unit": "tasses"},
    )
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.payload == {"code": "unrecognized-unit", "unit": "tasses"}


def test_bind_and_reset_sink():
    received = []
    assert current_sink() is None
    token = bind_sink(received.append)
    try:
        emit_diagnostic("demo", "first")
    finally:
        reset_sink(token)
    emit_diagnostic("demo", "second")

    assert [d.message for d in received] == ["first"]
    assert current_sink() is None
    reset_sink(None)


def test_capture_diagnostics_nests():
    with capture_diagnostics() as outer:
        emit_diagnostic("demo", "outer")
        with capture_diagnostics() as inner:
            emit_diagnostic("demo", "inner")
        emit_diagnostic("demo", "outer again")

    assert [d.message for d in outer] == ["outer", "outer again"]
    assert [d.message for d in inner] == ["inner"]


def test_log_level_from_environment(monkeypatch):
    monkeypatch.delenv("KITCHENUNITS_LOG_LEVEL", raising=False)
    assert config.log_level() == logging.WARNING
    monkeypatch.setenv("KITCHENUNITS_LOG_LEVEL", "debug")
    assert config.log_level() == logging.DEBUG
    monkeypatch.setenv("KITCHENUNITS_LOG_LEVEL", "chatty")
    assert config.log_level() == logging.WARNING


def test_silent_units_defaults(monkeypatch):
    monkeypatch.delenv("KITCHENUNITS_SILENT_UNITS", raising=False)
    assert config.silent_units() == frozenset({"", "p"})
    monkeypatch.setenv("KITCHENUNITS_SILENT_UNITS", "")
    assert config.silent_units() == frozenset({""})


def test_api_title(monkeypatch):
    monkeypatch.setenv("KITCHENUNITS_API_TITLE", "Pantry")
    assert config.api_title() == "Pantry"
