from jot_engine.document import ReplaceLine
from jot_engine.structure import block_items, renumber_operations


def test_block_items_skip_nested_lines() -> None:
    lines = ["1. a", "   - nested", "2. b", "", "1. other"]

    assert block_items(lines, 0) == [0, 2]
    assert block_items(lines, 2) == [0, 2]
    assert block_items(lines, 4) == [4]
    assert block_items(lines, 1) == []


def test_block_ends_at_other_content_on_same_indent() -> None:
    lines = ["1. a", "text", "2. b"]

    assert block_items(lines, 0) == [0]
    assert block_items(lines, 2) == [2]


def test_renumber_keeps_block_start_value() -> None:
    lines = ["5. a", "5. b", "9. c"]

    operations = renumber_operations(lines, [1], before=["5. a", "9. c"])

    assert operations == [
        ReplaceLine(1, "6. b", label="renumber"),
        ReplaceLine(2, "7. c", label="renumber"),
    ]


def test_renumber_restarts_fresh_block_head() -> None:
    lines = ["1. a", "   2. b"]

    operations = renumber_operations(lines, [1], fresh=[1])

    assert operations == [ReplaceLine(1, "   1. b", label="renumber")]


def test_sequential_blocks_produce_no_operations() -> None:
    assert renumber_operations(["1. a", "2. b"], [0, 1]) == []
