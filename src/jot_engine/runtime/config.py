"""Editor configuration passed explicitly into sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

ENV_PREFIX = "JOT_ENGINE_"


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True, slots=True)
class EditorConfig:
    """Construction-time knobs for the editing core.

    ``bullet_indent`` and ``numbered_indent`` are the whitespace widths of one
    nesting level for the respective list kinds.
    """

    undo_depth: int = 500
    save_debounce_ms: int = 500
    file_extensions: tuple[str, ...] = (".md", ".txt")
    bullet_markers: tuple[str, ...] = ("-", "*", "+")
    bullet_indent: int = 2
    numbered_indent: int = 3
    checked_mark: str = "x"
    tab_text: str = "    "

    def __post_init__(self) -> None:
        if self.undo_depth <= 0:
            raise ValueError("undo_depth must be positive")
        if self.save_debounce_ms <= 0:
            raise ValueError("save_debounce_ms must be positive")
        if self.bullet_indent <= 0 or self.numbered_indent <= 0:
            raise ValueError("indent widths must be positive")
        if not self.bullet_markers:
            raise ValueError("at least one bullet marker is required")
        for marker in self.bullet_markers:
            if len(marker) != 1 or marker.isspace() or marker.isdigit():
                raise ValueError(f"invalid bullet marker {marker!r}")
        if self.checked_mark not in {"x", "X"}:
            raise ValueError("checked_mark must be 'x' or 'X'")
        extensions = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in self.file_extensions
        )
        object.__setattr__(self, "file_extensions", extensions)

    @property
    def save_debounce_seconds(self) -> float:
        return self.save_debounce_ms / 1000.0

    def indent_width(self, numbered: bool) -> int:
        return self.numbered_indent if numbered else self.bullet_indent

    def accepts_file(self, name: str) -> bool:
        lowered = name.lower()
        return any(lowered.endswith(ext) for ext in self.file_extensions)

    def with_overrides(self, **changes: object) -> "EditorConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "EditorConfig":
        """Build a config from ``JOT_ENGINE_*`` variables over the defaults."""

        env = os.environ if environ is None else environ
        changes: dict[str, object] = {}

        def lookup(name: str) -> Optional[str]:
            value = env.get(f"{ENV_PREFIX}{name}")
            return value if value else None

        undo_depth = lookup("UNDO_DEPTH")
        if undo_depth is not None:
            changes["undo_depth"] = int(undo_depth)
        debounce = lookup("SAVE_DEBOUNCE_MS")
        if debounce is not None:
            changes["save_debounce_ms"] = int(debounce)
        markers = lookup("BULLET_MARKERS")
        if markers is not None:
            changes["bullet_markers"] = _split_csv(markers)
        extensions = lookup("FILE_EXTENSIONS")
        if extensions is not None:
            changes["file_extensions"] = _split_csv(extensions)
        checked = lookup("CHECKED_MARK")
        if checked is not None:
            changes["checked_mark"] = checked
        return cls(**changes)  # type: ignore[arg-type]


DEFAULT_CONFIG = EditorConfig()

__all__ = ["EditorConfig", "DEFAULT_CONFIG"]
