"""Pick the binding that answers a key stroke in the current editor context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from jot_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


def _rank(binding: Binding) -> tuple[int, int, str]:
    return (-binding.priority, -binding.specificity, binding.id)


class KeymapResolver:
    """Answers "what does this key do right now?".

    Candidates for a key are ordered by priority, then by how many ``when``
    clauses they carry (``ctrl+t`` gated on ``on_todo`` beats an ungated
    ``ctrl+t``), then by id.  The first candidate whose clauses all hold in
    the context wins.  The ordering is rebuilt whenever the registry revision
    changes.
    """

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._ranked: Dict[str, tuple[Binding, ...]] = {}
        self._revision: Optional[int] = None

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def candidates(self, key: str) -> tuple[Binding, ...]:
        revision = self._registry.revision()
        if revision != self._revision:
            self._ranked = {}
            self._revision = revision
        ranked = self._ranked.get(key)
        if ranked is None:
            ranked = tuple(sorted(self._registry.bindings_for_key(key), key=_rank))
            self._ranked[key] = ranked
        return ranked

    def resolve(
        self,
        stroke: KeyStroke | str,
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> Optional[ResolutionMatch]:
        if not isinstance(stroke, KeyStroke):
            stroke = KeyStroke.parse(stroke)
        key = stroke.token
        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"key": key},
        ) as handle:
            for binding in self.candidates(key):
                if binding.allows(ctx):
                    handle.add_metadata("binding_id", binding.id)
                    action = self._registry.get_action(binding.action_id)
                    return ResolutionMatch(binding=binding, action=action)
            handle.add_metadata("binding_id", None)
            return None


__all__ = [
    "KeymapResolver",
    "ResolutionMatch",
]
