import pytest

from jot_engine.document import Document, OutOfRange
from jot_engine.structure import move_line, move_lines, move_selection


def make_document(*lines: str) -> Document:
    return Document(list(lines))


def test_move_line_up_renumbers_block() -> None:
    document = make_document("1. a", "2. b", "3. c")

    document.apply_operation(move_line(document, 2, "up"))

    assert document.lines == ("1. a", "2. c", "3. b")


def test_move_line_down_swaps_neighbours() -> None:
    document = make_document("a", "b", "c")
    document.set_cursor(0, 1)

    document.apply_operation(move_line(document, 0, "down"))

    assert document.lines == ("b", "a", "c")
    assert document.cursor == (1, 1)


def test_move_at_boundary_raises() -> None:
    document = make_document("a", "b")

    with pytest.raises(OutOfRange):
        move_line(document, 0, "up")
    with pytest.raises(OutOfRange):
        move_lines(document, 0, 1, "down")


def test_move_selection_moves_spanned_block() -> None:
    document = make_document("a", "b", "c", "d")
    document.set_selection((1, 0), (2, 1))

    document.apply_operation(move_selection(document, "down"))

    assert document.lines == ("a", "d", "b", "c")
    assert document.selection == ((2, 0), (3, 1))


def test_moving_item_into_new_block_renumbers_it() -> None:
    document = make_document("1. a", "text", "1. x")

    document.apply_operation(move_line(document, 0, "down"))

    assert document.lines == ("text", "1. a", "2. x")
