import pytest

from jot_engine.document import Document, NotATodo, OutOfRange
from jot_engine.runtime.config import EditorConfig
from jot_engine.structure import ListEditor


def make_document(*lines: str, cursor: tuple[int, int] | None = None) -> Document:
    document = Document(list(lines))
    if cursor is not None:
        document.set_cursor(*cursor)
    return document


def apply(editor_result, document: Document) -> tuple[str, ...]:
    assert editor_result is not None
    document.apply_operation(editor_result)
    return document.lines


def test_enter_on_empty_bullet_exits_list() -> None:
    document = make_document("- ", cursor=(0, 2))

    assert apply(ListEditor().on_enter(document), document) == ("",)


def test_enter_continues_bullet_list() -> None:
    document = make_document("- item", cursor=(0, 6))

    assert apply(ListEditor().on_enter(document), document) == ("- item", "- ")
    assert document.cursor == (1, 2)


def test_enter_mid_item_carries_tail_to_new_item() -> None:
    document = make_document("- alpha beta", cursor=(0, 8))

    assert apply(ListEditor().on_enter(document), document) == ("- alpha ", "- beta")


def test_enter_continues_todo_unchecked() -> None:
    document = make_document("  - [x] done", cursor=(0, 12))

    assert apply(ListEditor().on_enter(document), document) == ("  - [x] done", "  - [ ] ")


def test_enter_in_numbered_list_renumbers_following_items() -> None:
    document = make_document("1. a", "2. b", cursor=(0, 4))

    lines = apply(ListEditor().on_enter(document), document)

    assert lines == ("1. a", "2. ", "3. b")
    assert document.cursor == (1, 3)


def test_enter_inside_marker_splits_plainly() -> None:
    document = make_document("- item", cursor=(0, 1))

    assert apply(ListEditor().on_enter(document), document) == ("-", " item")


def test_enter_replaces_selection() -> None:
    document = make_document("hello world")
    document.set_selection((0, 5), (0, 11))

    assert apply(ListEditor().on_enter(document), document) == ("hello", "")


def test_toggle_checkbox_twice_is_identity() -> None:
    document = make_document("- [ ] task", cursor=(0, 0))
    editor = ListEditor()

    apply(editor.toggle_checkbox(document), document)
    assert document.lines == ("- [x] task",)
    apply(editor.toggle_checkbox(document), document)
    assert document.lines == ("- [ ] task",)


def test_toggle_checkbox_uses_configured_mark() -> None:
    document = make_document("- [ ] task")
    editor = ListEditor(EditorConfig(checked_mark="X"))

    assert apply(editor.toggle_checkbox(document, 0), document) == ("- [X] task",)


def test_toggle_checkbox_rejects_plain_bullet() -> None:
    document = make_document("- task")

    with pytest.raises(NotATodo):
        ListEditor().toggle_checkbox(document)


def test_indent_bullet_uses_bullet_width() -> None:
    document = make_document("- a", "- b", cursor=(1, 3))

    assert apply(ListEditor().indent(document), document) == ("- a", "  - b")
    assert document.cursor == (1, 5)


def test_indent_numbered_item_restarts_nested_block() -> None:
    document = make_document("1. a", "2. b", "3. c", cursor=(1, 0))
    editor = ListEditor()

    assert apply(editor.indent(document), document) == ("1. a", "   1. b", "2. c")
    assert apply(editor.outdent(document), document) == ("1. a", "2. b", "3. c")


def test_tab_on_plain_line_inserts_tab_text() -> None:
    document = make_document("text", cursor=(0, 2))

    assert apply(ListEditor().indent(document), document) == ("te    xt",)


def test_indent_selection_covers_every_line() -> None:
    document = make_document("- a", "plain", "- b")
    document.set_selection((0, 0), (2, 1))

    lines = apply(ListEditor().indent(document), document)

    assert lines == ("  - a", "    plain", "  - b")


def test_heading_levels_move_with_indent_and_outdent() -> None:
    editor = ListEditor()
    document = make_document("## Title")

    assert apply(editor.indent(document), document) == ("### Title",)
    assert apply(editor.outdent(document), document) == ("## Title",)

    assert editor.indent(make_document("###### Deep")) is None
    assert editor.outdent(make_document("# Top")) is None


def test_outdent_at_level_zero_does_nothing() -> None:
    assert ListEditor().outdent(make_document("- a")) is None


def test_insert_item_renumbers_block() -> None:
    document = make_document("1. a", "2. b", "3. c")

    lines = apply(ListEditor().insert_item(document, 1, "x"), document)

    assert lines == ("1. a", "2. x", "3. b", "4. c")


def test_insert_item_adopts_following_marker() -> None:
    document = make_document("intro", "- a")

    assert apply(ListEditor().insert_item(document, 1, "x"), document) == (
        "intro",
        "- x",
        "- a",
    )

    numbered = make_document("intro", "1. a")
    assert apply(ListEditor().insert_item(numbered, 1, "x"), numbered) == (
        "intro",
        "1. x",
        "2. a",
    )


def test_insert_item_out_of_range() -> None:
    with pytest.raises(OutOfRange):
        ListEditor().insert_item(make_document("a"), 5, "x")


def test_remove_item_renumbers_remaining() -> None:
    document = make_document("1. a", "2. b", "3. c")

    assert apply(ListEditor().remove_item(document, 0), document) == ("1. b", "2. c")


def test_remove_last_line_leaves_empty_document() -> None:
    document = make_document("- only")

    assert apply(ListEditor().remove_item(document, 0), document) == ("",)
