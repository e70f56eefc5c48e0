import pytest

from jot_engine.document import (
    CompoundEdit,
    DeleteRange,
    Document,
    Indent,
    InsertLine,
    InsertText,
    JoinLines,
    MoveLines,
    NotATodo,
    OutOfRange,
    RemoveLine,
    ReplaceLine,
    SplitLine,
    ToggleCheckbox,
)


def make_document(*lines: str) -> Document:
    return Document(list(lines))


def test_insert_text_moves_cursor_and_yields_inverse() -> None:
    document = make_document("hello")

    edit = document.apply_operation(InsertText((0, 5), " world"))

    assert document.lines == ("hello world",)
    assert document.cursor == (0, 11)
    assert edit.inverse == DeleteRange((0, 5), (0, 11))
    assert edit.changed_lines == (0,)
    assert document.version == 1

    document.apply_operation(edit.inverse)
    assert document.lines == ("hello",)


def test_insert_multiline_text_splits_lines() -> None:
    document = make_document("ab", "tail")

    edit = document.apply_operation(InsertText((0, 1), "x\ny"))

    assert document.lines == ("ax", "yb", "tail")
    assert document.cursor == (1, 1)
    assert edit.changed_lines == (0, 1, 2)


def test_out_of_range_leaves_document_unchanged() -> None:
    document = make_document("a")

    with pytest.raises(OutOfRange) as excinfo:
        document.apply_operation(InsertText((3, 0), "x"))

    assert excinfo.value.line == 3
    assert document.lines == ("a",)
    assert document.version == 0

    with pytest.raises(OutOfRange):
        document.apply_operation(DeleteRange((0, 0), (0, 5)))
    with pytest.raises(OutOfRange):
        document.get_line(1)


def test_split_with_continuation_then_join_restores_line() -> None:
    document = make_document("- item")

    edit = document.apply_operation(SplitLine((0, 6), continuation="- "))

    assert document.lines == ("- item", "- ")
    assert document.cursor == (1, 2)
    assert edit.inverse == JoinLines(0, drop=2)

    document.apply_operation(edit.inverse)
    assert document.lines == ("- item",)
    assert document.cursor == (0, 6)


def test_join_lines_requires_a_following_line() -> None:
    document = make_document("only")

    with pytest.raises(OutOfRange):
        document.apply_operation(JoinLines(0))


def test_delete_range_across_lines_round_trips() -> None:
    document = make_document("abc", "def", "ghi")

    edit = document.apply_operation(DeleteRange((2, 1), (0, 1)))

    assert document.lines == ("ahi",)
    assert document.cursor == (0, 1)
    assert edit.inverse == InsertText((0, 1), "bc\ndef\ng")

    document.apply_operation(edit.inverse)
    assert document.lines == ("abc", "def", "ghi")


def test_indent_and_outdent_shift_cursor() -> None:
    document = make_document("- item")
    document.set_cursor(0, 4)

    edit = document.apply_operation(Indent(0, 2))

    assert document.lines == ("  - item",)
    assert document.cursor == (0, 6)
    assert edit.inverse == Indent(0, -2)

    document.apply_operation(edit.inverse)
    assert document.lines == ("- item",)
    assert document.cursor == (0, 4)


def test_outdent_restores_tabs_exactly() -> None:
    document = make_document("\t- x")

    edit = document.apply_operation(Indent(0, -2))

    assert document.lines == ("- x",)
    document.apply_operation(edit.inverse)
    assert document.lines == ("\t- x",)


def test_toggle_checkbox_twice_restores_line() -> None:
    document = make_document("- [ ] task", "1. [X] done")

    document.apply_operation(ToggleCheckbox(0))
    assert document.get_line(0) == "- [x] task"
    document.apply_operation(ToggleCheckbox(0))
    assert document.get_line(0) == "- [ ] task"

    edit = document.apply_operation(ToggleCheckbox(1))
    assert document.get_line(1) == "1. [ ] done"
    document.apply_operation(edit.inverse)
    assert document.get_line(1) == "1. [X] done"


def test_toggle_checkbox_on_plain_bullet_raises() -> None:
    document = make_document("- task")

    with pytest.raises(NotATodo) as excinfo:
        document.apply_operation(ToggleCheckbox(0))

    assert excinfo.value.line == 0
    assert document.lines == ("- task",)


def test_move_lines_cursor_follows_content() -> None:
    document = make_document("a", "b", "c")
    document.set_cursor(2, 1)

    edit = document.apply_operation(MoveLines(2, 2, "up"))

    assert document.lines == ("a", "c", "b")
    assert document.cursor == (1, 1)
    assert edit.inverse == MoveLines(1, 1, "down")


def test_move_lines_at_boundary_raises_without_change() -> None:
    document = make_document("a", "b")

    with pytest.raises(OutOfRange):
        document.apply_operation(MoveLines(0, 0, "up"))
    with pytest.raises(OutOfRange):
        document.apply_operation(MoveLines(1, 1, "down"))

    assert document.lines == ("a", "b")


def test_move_block_down_keeps_selection_on_block() -> None:
    document = make_document("a", "b", "c", "d")
    document.set_selection((0, 0), (1, 1))

    document.apply_operation(MoveLines(0, 1, "down"))

    assert document.lines == ("c", "a", "b", "d")
    assert document.selection == ((1, 0), (2, 1))


def test_replace_line_keeps_cursor_after_marker_growth() -> None:
    document = make_document("9. x")
    document.set_cursor(0, 4)

    document.apply_operation(ReplaceLine(0, "10. x"))

    assert document.cursor == (0, 5)


def test_remove_only_line_is_rejected() -> None:
    document = make_document("solo")

    with pytest.raises(OutOfRange):
        document.apply_operation(RemoveLine(0))


def test_changed_lines_drop_only_their_cached_runs() -> None:
    document = make_document("a", "b", "c")
    for index in range(document.line_count):
        document.runs_for(index)

    edit = document.apply_operation(ReplaceLine(1, "**B**"))

    assert edit.changed_lines == (1,)
    assert document.is_cached(0)
    assert not document.is_cached(1)
    assert document.is_cached(2)
    assert [run.style for run in document.runs_for(1)] == ["syntax", "bold", "syntax"]


def test_structural_edits_mark_tail_dirty() -> None:
    document = make_document("a", "b", "c")

    edit = document.apply_operation(InsertLine(0, "z"))

    assert edit.changed_lines == (0, 1, 2, 3)
    assert edit.line_count == 4


def test_fence_change_marks_following_lines_dirty() -> None:
    document = make_document("x", "y", "z")

    opened = document.apply_operation(ReplaceLine(0, "```"))
    assert opened.changed_lines == (0,)

    closed = document.apply_operation(ReplaceLine(2, "```"))
    assert closed.changed_lines == (0, 1, 2)
    assert document.in_code_block(1)
    assert [run.style for run in document.runs_for(1)] == ["code_block"]


def test_compound_edit_is_atomic() -> None:
    document = make_document("a", "b")

    with pytest.raises(OutOfRange):
        document.apply_operation(
            CompoundEdit((ReplaceLine(0, "changed"), RemoveLine(5)))
        )

    assert document.lines == ("a", "b")
    assert document.version == 0


def test_compound_inverse_undoes_every_part() -> None:
    document = make_document("a", "b")

    edit = document.apply_operation(
        CompoundEdit((InsertLine(1, "n"), ReplaceLine(0, "A")), label="pair")
    )
    assert document.lines == ("A", "n", "b")

    document.apply_operation(edit.inverse)
    assert document.lines == ("a", "b")


def test_preview_does_not_mutate() -> None:
    document = make_document("a")

    preview = document.preview(InsertLine(1, "b"))

    assert preview == ("a", "b")
    assert document.lines == ("a",)
    assert document.version == 0


def test_plain_text_round_trip() -> None:
    text = "# Title\n- [x] done\n1. first\n\n```\ncode\n```\n"
    document = Document.from_text(text)

    assert document.to_plain_text() == text
    kinds = [document.list_kind(i) for i in range(document.line_count)]

    document.load_from_plain_text(document.to_plain_text())

    assert document.to_plain_text() == text
    assert [document.list_kind(i) for i in range(document.line_count)] == kinds


def test_load_resets_cursor_and_selection() -> None:
    document = make_document("abc", "def")
    document.set_selection((0, 1), (1, 2))

    document.load_from_plain_text("new")

    assert document.cursor == (0, 0)
    assert document.selection is None
    assert document.lines == ("new",)


def test_selected_text_spans_lines() -> None:
    document = make_document("abc", "def")

    document.set_selection((0, 1), (1, 2))

    assert document.selected_text() == "bc\nde"
    assert document.cursor == (1, 2)

    with pytest.raises(OutOfRange):
        document.set_selection((0, 0), (4, 0))
