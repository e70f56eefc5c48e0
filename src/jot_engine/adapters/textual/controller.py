"""Minimal Textual adapter that wires EditingSession hooks into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set

from rich.text import Text

from jot_engine.document import Position, Selection
from jot_engine.keymaps import KeyStroke
from jot_engine.render import StyledRun, source_column, visible_runs
from jot_engine.session import EditingSession, SessionHooks, SessionResult
from jot_engine.storage import suggest_filename, write_document

from .styles import styled_line


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_document: Callable[[Sequence[Text]], None]
    update_status: Callable[[str], None] = _noop
    update_title: Callable[[str], None] = _noop
    open_link: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualJotAdapter:
    """Keeps a rich rendering of every line in sync with the session.

    Each line's ``Text`` is cached.  A refresh restyles only the lines the
    session re-rendered plus the lines the cursor left and entered, since
    those are the only ones whose delimiter visibility can change.
    """

    def __init__(
        self,
        session: EditingSession,
        hooks: TextualUIHooks,
        *,
        notes_dir: Optional[Path] = None,
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.notes_dir = notes_dir
        count = session.document.line_count
        self._runs: List[tuple[StyledRun, ...]] = [
            session.document.runs_for(index) for index in range(count)
        ]
        self._shown: List[tuple[StyledRun, ...]] = [()] * count
        self._lines: List[Text] = [Text()] * count
        self._stale: Set[int] = set(range(count))
        self._cursor_line = session.document.cursor[0]
        self._dirty_title = False
        session.hooks = SessionHooks(
            render_line=self._on_render_line,
            line_count_changed=self._on_line_count,
            dirty_changed=self._on_dirty_changed,
            save_requested=self._on_save_requested,
            notify=self._on_notify,
            cursor_changed=self._on_cursor_changed,
            open_link=hooks.open_link,
        )
        self._refresh_document()
        self._refresh_title()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> SessionResult:
        """Translate a Textual key event into a KeyStroke and dispatch it."""

        stroke = KeyStroke.parse(key, text=text)
        extra = tuple(modifiers)
        if extra:
            stroke = KeyStroke(stroke.key, stroke.modifiers + extra, text)
        self._log_state("key ->", key=stroke.token, text=text)
        result = self.session.handle_key(stroke)
        self._log_state("result <-", status=result.status, message=result.message)
        return result

    def handle_click(self, line: int, column: int, *, ctrl: bool = False) -> SessionResult:
        """Dispatch a click at a drawn ``column``, which skips concealed markup."""

        if 0 <= line < len(self._shown):
            self._restyle_stale()
            column = source_column(self._shown[line], column)
        result = self.session.click(line, column, follow_link=ctrl)
        self._log_state("click ->", line=line, column=column, status=result.status)
        return result

    def process_timers(self) -> List[str]:
        """Forward expired timers and surface results to the UI."""

        fired = self.session.process_timers()
        for name in fired:
            self._log_state("timer ->", timer=name)
        return fired

    def open(self, path: str) -> SessionResult:
        result = self.session.load_file(path)
        if result.status == "applied":
            self.hooks.update_status(f"Opened {path}")
        return result

    def rendered_lines(self) -> List[Text]:
        self._restyle_stale()
        return list(self._lines)

    def save_path(self) -> Optional[Path]:
        if self.session.path:
            return Path(self.session.path)
        if self.notes_dir is None:
            return None
        return self.notes_dir / suggest_filename(self.session.text)

    # -- session hooks ---------------------------------------------------

    def _on_render_line(self, index: int, runs: tuple[StyledRun, ...]) -> None:
        if index >= len(self._runs):
            self._on_line_count(index + 1)
        self._runs[index] = runs
        self._stale.add(index)

    def _on_line_count(self, count: int) -> None:
        for cache in (self._runs, self._shown):
            del cache[count:]
            cache.extend([()] * (count - len(cache)))
        del self._lines[count:]
        self._lines.extend(Text() for _ in range(count - len(self._lines)))
        self._stale = {index for index in self._stale if index < count}

    def _on_dirty_changed(self, dirty: bool) -> None:
        self._dirty_title = dirty
        self._refresh_title()

    def _on_save_requested(self, text: str) -> None:
        path = self.save_path()
        if path is None:
            self.hooks.update_status("Unsaved changes")
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            write_document(path, text)
        except (OSError, UnicodeError) as exc:
            self._log_state("save failed", path=str(path), error=str(exc))
            self.hooks.update_status(f"Save failed: {exc}")
            return
        self.session.mark_saved(str(path))
        self.hooks.update_status(f"Saved {path}")
        self._refresh_title()

    def _on_notify(self, message: str) -> None:
        self.hooks.update_status(message)

    def _on_cursor_changed(self, cursor: Position, selection: Optional[Selection]) -> None:
        del selection
        self._stale.update((self._cursor_line, cursor[0]))
        self._cursor_line = cursor[0]
        self._refresh_document()

    # -- helpers ---------------------------------------------------------

    def _refresh_document(self) -> None:
        self.hooks.update_document(self.rendered_lines())

    def _restyle_stale(self) -> None:
        document = self.session.document
        line, column = document.cursor
        for index in sorted(self._stale):
            if index >= len(self._runs):
                continue
            cursor = column if index == line else None
            shown = visible_runs(self._runs[index], cursor)
            self._shown[index] = shown
            self._lines[index] = styled_line(
                document.get_line(index), shown, cursor_column=cursor
            )
        self._stale.clear()

    def _refresh_title(self) -> None:
        name = self.session.path or "untitled"
        prefix = "● " if self._dirty_title else ""
        self.hooks.update_title(f"{prefix}{name}")

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        document = self.session.document
        return {
            "cursor": document.cursor,
            "selection": document.selection,
            "dirty": self.session.is_dirty,
            "version": document.version,
        }


__all__ = ["TextualJotAdapter", "TextualUIHooks"]
