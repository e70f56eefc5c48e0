"""Storage for editor actions and the key bindings that trigger them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional

from jot_engine.runtime.telemetry import span

from .models import ActionRef, Binding


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    bound_keys: int


class KeymapConflictError(RuntimeError):
    """Raised when a binding would tie with an existing one on the same key."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        super().__init__(
            f"Binding '{binding.id}' on {binding.key} ties with "
            f"{[b.id for b in conflicts_tuple]}"
        )
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns action references and bindings, grouped by key token.

    Two bindings may share a key as long as one outranks the other, either by
    ``priority`` or by having different ``when`` gates.  An exact tie is a
    :class:`KeymapConflictError` unless the new binding is registered with
    ``replace=True``, which evicts the bindings it ties with.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._by_key: Dict[str, list[str]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        """Counter bumped on every binding change; resolvers key caches on it."""

        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if not replace and action.id in self._actions:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "key": binding.key},
        ) as handle:
            if binding.action_id not in self._actions:
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action "
                    f"'{binding.action_id}'"
                )
            if binding.id in self._bindings and not replace:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            conflicts = [
                existing
                for existing in self.bindings_for_key(binding.key)
                if existing.id != binding.id and existing.conflicts_with(binding)
            ]
            if conflicts and not replace:
                raise KeymapConflictError(binding, conflicts)

            evicted = [c.id for c in conflicts]
            if binding.id in self._bindings:
                evicted.append(binding.id)
            for binding_id in evicted:
                self._discard(binding_id)
            if evicted:
                handle.add_metadata("evicted", ",".join(evicted))

            self._bindings[binding.id] = binding
            self._by_key.setdefault(binding.key, []).append(binding.id)
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._discard(binding_id)
        if binding is not None:
            self._revision += 1
        return binding

    def iter_bindings(self) -> Iterator[Binding]:
        yield from self._bindings.values()

    def bindings_for_key(self, key: str) -> list[Binding]:
        return [self._bindings[bid] for bid in self._by_key.get(key, ())]

    def bindings_for_action(self, action_id: str) -> list[Binding]:
        return [b for b in self._bindings.values() if b.action_id == action_id]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            bound_keys=len(self._by_key),
        )

    def _discard(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.pop(binding_id, None)
        if binding is None:
            return None
        ids = self._by_key[binding.key]
        ids.remove(binding_id)
        if not ids:
            del self._by_key[binding.key]
        return binding


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
