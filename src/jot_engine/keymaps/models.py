"""Key strokes, context gates, actions and the bindings that tie them together."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

_MODIFIER_ALIASES = {"control": "ctrl", "cmd": "meta", "option": "alt"}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = (m.strip().lower() for m in modifiers)
    return tuple(sorted({_MODIFIER_ALIASES.get(m, m) for m in values if m}))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press.

    ``key`` is a named key (``enter``, ``up``, ``tab``) or a single
    character; ``text`` carries the printable text a host reported for the
    press, if any.
    """

    key: str
    modifiers: tuple[str, ...] = ()
    text: str | None = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        modifiers = _normalize_modifiers(self.modifiers)
        object.__setattr__(self, "modifiers", modifiers)
        if len(self.key) > 1 or modifiers:
            object.__setattr__(self, "key", self.key.lower())

    @property
    def token(self) -> str:
        """Canonical ``"ctrl+shift+z"`` form used as the binding lookup key."""

        return "+".join((*self.modifiers, self.key))

    @property
    def is_command(self) -> bool:
        """True when a modifier other than shift is held."""

        return any(modifier != "shift" for modifier in self.modifiers)

    @classmethod
    def parse(cls, spec: str, *, text: str | None = None) -> "KeyStroke":
        """Parse ``"ctrl+shift+z"``-style strings; a trailing ``+`` is the plus key."""

        raw = spec.strip()
        if raw == "+":
            return cls(key="+", text=text)
        if raw.endswith("++"):
            return cls(key="+", modifiers=tuple(raw[:-2].split("+")), text=text)
        *modifiers, key = raw.split("+")
        return cls(key=key, modifiers=tuple(modifiers), text=text)


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Gate on one editor context flag such as ``on_todo`` or ``has_selection``.

    ``"!has_selection"`` parses to a clause that only holds while the flag is
    false.
    """

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        negated = expr.startswith("!")
        flag = expr[1:].strip() if negated else expr
        if not flag:
            raise ValueError(f"invalid when expression: {expression!r}")
        return cls(flag, not negated)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) is self.expected

    def __str__(self) -> str:
        return self.flag if self.expected else f"!{self.flag}"


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named editor command.

    Handlers are called as ``handler(session, match)``; ``metadata`` lets one
    handler serve several actions (the cursor motions share two handlers).
    """

    id: str
    handler: Callable[..., object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Maps one key stroke to an action while every ``when`` clause holds.

    ``key`` accepts any spelling :meth:`KeyStroke.parse` understands and is
    stored in canonical token form, so ``"Control+T"`` and ``"ctrl+t"`` bind
    the same press.
    """

    id: str
    key: str
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        object.__setattr__(self, "key", KeyStroke.parse(self.key).token)
        clauses: dict[str, bool] = {}
        for clause in self.when:
            if isinstance(clause, WhenClause):
                parsed = clause
            else:
                parsed = WhenClause.parse(str(clause))
            if clauses.get(parsed.flag, parsed.expected) != parsed.expected:
                raise ValueError(
                    f"binding '{self.id}' requires both {parsed} and its negation"
                )
            clauses[parsed.flag] = parsed.expected
        ordered = sorted(clauses.items())
        object.__setattr__(self, "when", tuple(WhenClause(f, v) for f, v in ordered))

    @property
    def specificity(self) -> int:
        return len(self.when)

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    def conflicts_with(self, other: "Binding") -> bool:
        """True when neither binding would ever win over the other."""

        if self.key != other.key or self.priority != other.priority:
            return False
        return self.when == other.when


__all__ = [
    "KeyStroke",
    "WhenClause",
    "ActionRef",
    "Binding",
]
