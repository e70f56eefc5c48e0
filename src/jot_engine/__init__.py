"""UI-agnostic markdown note editing core."""

__all__ = [
    "actions",
    "adapters",
    "document",
    "keymaps",
    "lines",
    "render",
    "runtime",
    "session",
    "storage",
    "structure",
]

__version__ = "0.1.0"
