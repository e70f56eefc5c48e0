import pytest

from jot_engine.runtime.config import EditorConfig
from jot_engine.runtime.timers import TimerBank


def test_config_defaults() -> None:
    config = EditorConfig()

    assert config.undo_depth == 500
    assert config.save_debounce_seconds == 0.5
    assert config.indent_width(numbered=False) == 2
    assert config.indent_width(numbered=True) == 3
    assert config.accepts_file("Notes.MD")
    assert not config.accepts_file("photo.png")


def test_config_from_env_overrides_defaults() -> None:
    config = EditorConfig.from_env(
        {
            "JOT_ENGINE_UNDO_DEPTH": "20",
            "JOT_ENGINE_SAVE_DEBOUNCE_MS": "250",
            "JOT_ENGINE_BULLET_MARKERS": "-, *",
            "JOT_ENGINE_FILE_EXTENSIONS": "md,Markdown",
            "JOT_ENGINE_CHECKED_MARK": "",
        }
    )

    assert config.undo_depth == 20
    assert config.save_debounce_ms == 250
    assert config.bullet_markers == ("-", "*")
    assert config.file_extensions == (".md", ".markdown")
    assert config.checked_mark == "x"


@pytest.mark.parametrize(
    "changes",
    [
        {"undo_depth": 0},
        {"save_debounce_ms": -1},
        {"bullet_markers": ()},
        {"bullet_markers": ("1",)},
        {"checked_mark": "v"},
        {"numbered_indent": 0},
    ],
)
def test_config_rejects_invalid_values(changes: dict) -> None:
    with pytest.raises(ValueError):
        EditorConfig().with_overrides(**changes)


def test_rearming_timer_pushes_deadline_back() -> None:
    now = [0.0]
    timers = TimerBank(clock=lambda: now[0])

    timers.arm("save", 500)
    now[0] = 0.4
    timers.arm("save", 500)

    assert timers.due(0.6) == []
    assert timers.is_pending("save")
    assert timers.due(1.0) == ["save"]
    assert not timers.is_pending("save")


def test_due_returns_timers_in_arming_order() -> None:
    timers = TimerBank(clock=lambda: 0.0)
    timers.arm("keys", 100)
    timers.arm("save", 50)

    assert timers.due(1.0) == ["keys", "save"]


def test_cancel_and_fire_now() -> None:
    timers = TimerBank(clock=lambda: 0.0)
    timers.arm("save", 500)

    timers.cancel("save")
    assert timers.get("save") is None
    assert timers.fire_now("save") is False

    timers.arm("save", 500)
    assert timers.fire_now("save") is True
    assert timers.due(10.0) == []
