"""Executable Textual app that hosts the editing session."""

from __future__ import annotations

import argparse
import os
import webbrowser
from pathlib import Path
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import VerticalScroll
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use jot_engine.adapters.textual.app"
    ) from exc

from jot_engine.runtime import telemetry
from jot_engine.runtime.config import EditorConfig
from jot_engine.session import EditingSession
from jot_engine.storage import ensure_directory, resolve_notes_directory

from .controller import TextualJotAdapter, TextualUIHooks


class JotApp(App[None]):
    """Minimal Textual UI embedding the editing session."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#document-area {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        path: Optional[str] = None,
        notes_dir: Optional[Path] = None,
        config: Optional[EditorConfig] = None,
    ) -> None:
        super().__init__()
        self._path = path
        self._notes_dir = notes_dir
        self._config = config or EditorConfig.from_env()
        self.adapter: TextualJotAdapter | None = None
        self._document_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with VerticalScroll(id="document-area"):
            self._document_widget = Static("", id="document-view")
            yield self._document_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        session = EditingSession(config=self._config)
        hooks = TextualUIHooks(
            update_document=self._update_document,
            update_status=self._update_status,
            update_title=self._update_title,
            open_link=self._open_link,
        )
        self.adapter = TextualJotAdapter(session, hooks, notes_dir=self._notes_dir)
        if self._path:
            self.adapter.open(self._path)
        self.set_interval(0.1, self._process_timers)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.session.flush_save()

    def _process_timers(self) -> None:
        if self.adapter:
            self.adapter.process_timers()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text = normalized
        self.adapter.handle_textual_key(key, text=text)
        event.stop()

    def on_click(self, event: events.Click) -> None:
        if not self.adapter or self._document_widget is None:
            return
        offset = event.get_content_offset(self._document_widget)
        if offset is None:
            return
        self.adapter.handle_click(offset.y, offset.x, ctrl=bool(event.ctrl))

    def _update_document(self, lines: Sequence[Text]) -> None:
        if self._document_widget:
            self._document_widget.update(Text("\n").join(lines))

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _update_title(self, title: str) -> None:
        self.sub_title = title

    def _open_link(self, url: str) -> None:
        webbrowser.open(url)

    @staticmethod
    def _normalize_key(event: events.Key) -> Optional[Tuple[str, Optional[str]]]:
        key = event.key
        if key == "ctrl+q":
            return None
        character = event.character
        text = character if character and character.isprintable() else None
        return (key, text)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a markdown note in the terminal.")
    parser.add_argument("path", nargs="?", help="Note to open")
    parser.add_argument(
        "--notes-dir",
        default=os.environ.get("JOT_ENGINE_NOTES_DIR"),
        help="Directory new notes are saved to (default: ~/Documents/Jotite)",
    )
    parser.add_argument(
        "--log-preset",
        choices=sorted(telemetry.PRESETS),
        default=os.environ.get("JOT_ENGINE_LOG_PRESET") or None,
        help="Named log setup; JOT_ENGINE_LOG_* variables apply when omitted",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    notes_dir = ensure_directory(resolve_notes_directory(args.notes_dir))
    app = JotApp(path=args.path, notes_dir=notes_dir)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
