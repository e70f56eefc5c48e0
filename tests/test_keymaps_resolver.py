from __future__ import annotations

from jot_engine.keymaps import (
    ActionRef,
    Binding,
    KeyStroke,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
    load_default_keymaps,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    key: str = "ctrl+d",
    action_id: str = "edit.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        key=key,
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def make_default_resolver() -> KeymapResolver:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    return KeymapResolver(registry)


def test_keystroke_tokens_are_normalized() -> None:
    assert KeyStroke.parse("Ctrl+Shift+Z").token == "ctrl+shift+z"
    assert KeyStroke("z", modifiers=("shift", "control")).token == "ctrl+shift+z"
    assert KeyStroke.parse("ctrl++").token == "ctrl++"
    assert KeyStroke.parse("+").token == "+"
    assert KeyStroke("A").token == "A"
    assert KeyStroke.parse("shift+tab").is_command is False
    assert KeyStroke.parse("ctrl+t").is_command is True


def test_resolver_matches_single_stroke() -> None:
    binding = make_binding("edit.d")
    resolver = KeymapResolver(build_registry([binding]))

    match = resolver.resolve(KeyStroke.parse("ctrl+d"))

    assert match is not None
    assert match.binding.id == binding.id
    assert match.action.id == "edit.test"


def test_resolver_accepts_key_strings() -> None:
    resolver = KeymapResolver(build_registry([make_binding("edit.d")]))

    match = resolver.resolve("Control+D")

    assert match is not None
    assert match.binding.id == "edit.d"


def test_resolver_misses_unbound_key() -> None:
    resolver = KeymapResolver(build_registry([make_binding("edit.d")]))

    assert resolver.resolve("ctrl+e") is None


def test_resolver_honors_when_clauses() -> None:
    gating = make_binding(
        "todo.toggle",
        key="ctrl+t",
        when=(WhenClause("on_todo"),),
        action_id="structure.toggle_todo",
    )
    resolver = KeymapResolver(build_registry([gating]))

    assert resolver.resolve("ctrl+t", context={}) is None

    hit = resolver.resolve("ctrl+t", context={"on_todo": True})
    assert hit is not None
    assert hit.binding.id == gating.id


def test_resolver_prefers_gated_binding_over_fallback() -> None:
    fallback = make_binding("cut.line", key="ctrl+x", action_id="edit.cut_line")
    gated = make_binding(
        "cut.selection",
        key="ctrl+x",
        action_id="edit.cut_selection",
        when=(WhenClause("has_selection"),),
    )
    resolver = KeymapResolver(build_registry([fallback, gated]))

    with_selection = resolver.resolve("ctrl+x", context={"has_selection": True})
    without = resolver.resolve("ctrl+x", context={"has_selection": False})

    assert with_selection is not None and with_selection.binding.id == "cut.selection"
    assert without is not None and without.binding.id == "cut.line"


def test_resolver_priority_beats_specificity() -> None:
    gated = make_binding(
        "gated", key="tab", action_id="edit.gated", when=(WhenClause("in_list"),)
    )
    urgent = make_binding("urgent", key="tab", action_id="edit.urgent", priority=5)
    resolver = KeymapResolver(build_registry([gated, urgent]))

    match = resolver.resolve("tab", context={"in_list": True})

    assert match is not None
    assert match.binding.id == "urgent"
    assert [b.id for b in resolver.candidates("tab")] == ["urgent", "gated"]


def test_default_history_keys_resolve_independently() -> None:
    resolver = make_default_resolver()

    undo = resolver.resolve("ctrl+z")
    redo = resolver.resolve("ctrl+shift+z")
    redo_alt = resolver.resolve("ctrl+y")

    assert undo is not None and undo.action.id == "history.undo"
    assert redo is not None and redo.action.id == "history.redo"
    assert redo_alt is not None and redo_alt.action.id == "history.redo"


def test_default_toggle_todo_needs_todo_context() -> None:
    resolver = make_default_resolver()

    assert resolver.resolve("ctrl+t", context={"on_todo": False}) is None
    match = resolver.resolve("ctrl+t", context={"on_todo": True})
    assert match is not None and match.action.id == "structure.toggle_todo"


def test_resolver_cache_refreshes_on_revision() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    assert resolver.resolve("ctrl+e") is None

    new_binding = make_binding("edit.e", key="ctrl+e", action_id="edit.e")
    registry.register_action(make_action("edit.e"))
    registry.register_binding(new_binding)

    match = resolver.resolve("ctrl+e")
    assert match is not None
    assert match.binding.id == new_binding.id

    registry.unregister_binding("edit.e")
    assert resolver.resolve("ctrl+e") is None
