"""Plain-text note files on disk.

Reading wraps every failure in ``LoadFailure`` so the session can keep the
previous document.  Writing goes through a temporary file in the target
directory followed by ``os.replace``, so a crash never leaves a truncated
note behind.
"""

from __future__ import annotations

import datetime as _dt
import os
import re
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from jot_engine.document.errors import LoadFailure
from jot_engine.runtime import telemetry
from jot_engine.runtime.config import DEFAULT_CONFIG, EditorConfig

PathLike = Union[str, "os.PathLike[str]"]

MAX_FILENAME_LENGTH = 50
DEFAULT_NOTES_DIR = ("Documents", "Jotite")

_TITLE = re.compile(r"^#[ \t]+(?P<title>.+)$")


def read_document(path: PathLike, config: EditorConfig = DEFAULT_CONFIG) -> str:
    """Return the text of ``path``; raise ``LoadFailure`` when it can't be read."""

    name = os.fspath(path)
    if not config.accepts_file(name):
        raise LoadFailure(f"Unsupported file type: {name}", path=name)
    with telemetry.span(
        "storage::read",
        component="storage",
        metadata={"path": name},
    ) as handle:
        try:
            with open(name, "r", encoding="utf-8", newline="") as handle_file:
                text = handle_file.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadFailure(f"Could not open {name}: {exc}", path=name) from exc
        handle.add_metadata("chars", len(text))
        return text


def write_document(path: PathLike, text: str) -> None:
    """Atomically replace ``path`` with ``text``."""

    name = os.fspath(path)
    dir_name = os.path.dirname(name) or "."
    with telemetry.span(
        "storage::write",
        component="storage",
        metadata={"path": name, "chars": len(text)},
    ):
        temp_filename: Optional[str] = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                newline="",
                dir=dir_name,
                prefix=".",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(text)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_filename, name)
        except BaseException:
            if temp_filename is not None and os.path.exists(temp_filename):
                os.remove(temp_filename)
            raise


def normalize_filename(title: str) -> str:
    normalized = re.sub(r"\s+", "-", title.strip())
    normalized = re.sub(r"[^a-zA-Z0-9\-_]", "", normalized).lower()
    return normalized[:MAX_FILENAME_LENGTH]


def generate_filename(title: str = "", today: Optional[_dt.date] = None) -> str:
    """``<normalized-title>.md``, or the date when the title normalizes away."""

    if title:
        normalized = normalize_filename(title)
        if normalized:
            return f"{normalized}.md"
    day = today or _dt.date.today()
    return f"{day:%Y-%m-%d}.md"


def extract_title(lines: Iterable[str]) -> str:
    """Text of the first level-one heading, or ``""``."""

    for line in lines:
        match = _TITLE.match(line)
        if match:
            return match.group("title").strip()
    return ""


def suggest_filename(text: str, today: Optional[_dt.date] = None) -> str:
    return generate_filename(extract_title(text.split("\n")), today)


def resolve_notes_directory(
    setting: Optional[str] = None, *, home: Optional[PathLike] = None
) -> Path:
    """Expand a notes-directory setting; relative paths hang off ``home``."""

    base = Path(home) if home is not None else Path.home()
    if not setting:
        return base.joinpath(*DEFAULT_NOTES_DIR)
    if setting == "~":
        return base
    if setting.startswith("~/"):
        return base / setting[2:]
    candidate = Path(setting)
    return candidate if candidate.is_absolute() else base / candidate


def ensure_directory(path: PathLike) -> Path:
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def list_documents(
    directory: PathLike, config: EditorConfig = DEFAULT_CONFIG
) -> List[Path]:
    """Note files directly inside ``directory``, sorted by name."""

    root = Path(directory)
    if not root.is_dir():
        return []
    return sorted(
        entry
        for entry in root.iterdir()
        if entry.is_file() and config.accepts_file(entry.name)
    )


__all__ = [
    "DEFAULT_NOTES_DIR",
    "MAX_FILENAME_LENGTH",
    "ensure_directory",
    "extract_title",
    "generate_filename",
    "list_documents",
    "normalize_filename",
    "read_document",
    "resolve_notes_directory",
    "suggest_filename",
    "write_document",
]
