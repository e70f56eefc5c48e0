from __future__ import annotations

from typing import Iterator

import pytest

from jot_engine.adapters.textual import app as app_module
from jot_engine.runtime import telemetry
from jot_engine.runtime.telemetry import LogSettings


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("LOG_FILE", "LOG_PRESET", "LOG_LEVEL"):
        monkeypatch.delenv(f"JOT_ENGINE_{name}", raising=False)
    yield
    telemetry.configure(LogSettings())


def test_settings_from_env_reads_overrides() -> None:
    settings = LogSettings.from_env(
        {
            "JOT_ENGINE_LOG_LEVEL": "debug",
            "JOT_ENGINE_NO_COLOR": "1",
            "JOT_ENGINE_LOG_BUFFERED": "yes",
            "JOT_ENGINE_LOG_BUFFER_SIZE": "64",
        }
    )

    assert settings == LogSettings(level="DEBUG", color=False, buffer_size=64)
    assert LogSettings.from_env({}) == LogSettings()


def test_negative_buffer_size_is_rejected() -> None:
    with pytest.raises(ValueError):
        LogSettings(buffer_size=-1)


def test_preset_lookup_is_case_insensitive_and_redirectable() -> None:
    assert telemetry.preset_settings("Quiet") == LogSettings(level="ERROR", console=False)

    production = telemetry.preset_settings("production", log_file="notes.log")
    assert production.log_file == "notes.log"
    assert production.level == "INFO"
    assert not production.console


def test_unknown_preset_raises_value_error() -> None:
    with pytest.raises(ValueError, match="Unknown log preset"):
        telemetry.configure(preset="chatty")


def test_configure_rejects_settings_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(LogSettings(), preset="quiet")


def test_configure_with_preset_rebuilds_loggers() -> None:
    first = telemetry.get_logger("jot_engine.test")
    assert telemetry.get_logger("jot_engine.test") is first

    settings = telemetry.configure(preset="quiet")

    assert telemetry.active_settings() is settings
    assert settings.level == "ERROR"
    assert telemetry.get_logger("jot_engine.test") is not first


def test_preset_honors_log_file_variable(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    target = tmp_path / "jot.log"
    monkeypatch.setenv("JOT_ENGINE_LOG_FILE", str(target))

    settings = telemetry.configure(preset="quiet")

    assert settings.log_file == str(target)


def test_span_reraises_after_logging_failure() -> None:
    telemetry.configure(preset="quiet")

    with pytest.raises(KeyError):
        with telemetry.span(
            "test::fail", component="tests", metadata={"n": 1}
        ) as handle:
            handle.add_metadata("stage", "body")
            raise KeyError("boom")

    assert handle.metadata == {"n": "1", "stage": "body"}


def test_cli_log_preset_flag_and_environment_default(monkeypatch: pytest.MonkeyPatch) -> None:
    assert app_module._parse_args([]).log_preset is None
    assert app_module._parse_args(["--log-preset", "quiet"]).log_preset == "quiet"

    monkeypatch.setenv("JOT_ENGINE_LOG_PRESET", "development")
    assert app_module._parse_args([]).log_preset == "development"

    with pytest.raises(SystemExit):
        app_module._parse_args(["--log-preset", "chatty"])


def test_main_applies_log_preset(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    launched = []
    monkeypatch.setattr(app_module.JotApp, "run", lambda self: launched.append(self))

    app_module.main(["--log-preset", "quiet", "--notes-dir", str(tmp_path)])

    assert telemetry.active_settings().level == "ERROR"
    assert len(launched) == 1
