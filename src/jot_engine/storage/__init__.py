"""Reading and writing note files."""

from .files import (
    DEFAULT_NOTES_DIR,
    MAX_FILENAME_LENGTH,
    ensure_directory,
    extract_title,
    generate_filename,
    list_documents,
    normalize_filename,
    read_document,
    resolve_notes_directory,
    suggest_filename,
    write_document,
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
