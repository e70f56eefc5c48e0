import pytest

from jot_engine.render import StyledRun, fence_states, link_at, render_line, render_lines


def styles(text: str, **kwargs) -> list[str]:
    return [run.style for run in render_line(text, **kwargs)]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "plain words",
        "# Heading with `code`",
        "- [ ] todo with **bold** and [link](http://a.io)",
        "  12. nested *italic* ~~gone~~ ++under++",
        "**unterminated *mixed _marks",
        "snake_case_name and __init__",
        "see www.example.com, then https://x.io/path).",
        "---",
    ],
)
def test_runs_cover_line_without_gaps(text: str) -> None:
    runs = render_line(text)

    position = 0
    for run in runs:
        assert run.start == position
        assert run.end > run.start
        position = run.end
    assert position == len(text)
    assert render_line(text) == runs


def test_heading_line_marks_hashes_as_syntax() -> None:
    runs = render_line("# Title")

    assert runs == (
        StyledRun(0, 2, "syntax", level=1, extent=(0, 7)),
        StyledRun(2, 7, "heading", level=1),
    )


def test_heading_inline_styles_keep_level() -> None:
    runs = render_line("## A **b**")

    assert [(run.style, run.level) for run in runs] == [
        ("syntax", 2),
        ("heading", 2),
        ("syntax", 2),
        ("bold", 2),
        ("syntax", 2),
    ]


def test_seven_hashes_is_not_a_heading() -> None:
    assert render_line("####### x") == (StyledRun(0, 9, "plain"),)


def test_bold_and_italic_runs() -> None:
    runs = render_line("**bold** and *it*")

    assert [(run.start, run.end, run.style) for run in runs] == [
        (0, 2, "syntax"),
        (2, 6, "bold"),
        (6, 8, "syntax"),
        (8, 13, "plain"),
        (13, 14, "syntax"),
        (14, 16, "italic"),
        (16, 17, "syntax"),
    ]


def test_markup_runs_carry_their_construct_extent() -> None:
    runs = render_line("a **b** [c](http://d.io)")

    assert [(run.style, run.extent) for run in runs] == [
        ("plain", None),
        ("syntax", (2, 7)),
        ("bold", None),
        ("syntax", (2, 7)),
        ("plain", None),
        ("syntax", (8, 24)),
        ("link", None),
        ("syntax", (8, 24)),
        ("url", (8, 24)),
        ("syntax", (8, 24)),
    ]


def test_adjacent_constructs_keep_separate_markup_runs() -> None:
    runs = render_line("**a****b**")

    assert [(run.start, run.end, run.style) for run in runs] == [
        (0, 2, "syntax"),
        (2, 3, "bold"),
        (3, 5, "syntax"),
        (5, 7, "syntax"),
        (7, 8, "bold"),
        (8, 10, "syntax"),
    ]


def test_unterminated_markers_render_plain() -> None:
    assert styles("**bold") == ["plain"]
    assert styles("`code") == ["plain"]


def test_underscores_inside_words_are_not_emphasis() -> None:
    assert styles("snake_case_name") == ["plain"]


def test_code_span_hides_inner_markers() -> None:
    runs = render_line("`**not bold**`")

    assert [(run.start, run.end, run.style) for run in runs] == [
        (0, 1, "syntax"),
        (1, 13, "code"),
        (13, 14, "syntax"),
    ]


def test_raw_url_drops_trailing_punctuation() -> None:
    runs = render_line("see www.example.com.")

    assert runs == (
        StyledRun(0, 4, "plain"),
        StyledRun(4, 19, "url", target="http://www.example.com"),
        StyledRun(19, 20, "plain"),
    )


def test_todo_line_styles_checkbox_and_content() -> None:
    runs = render_line("- [x] done")

    assert [(run.start, run.end, run.style) for run in runs] == [
        (0, 1, "list_marker"),
        (1, 2, "plain"),
        (2, 5, "todo_checked"),
        (5, 6, "plain"),
        (6, 10, "todo_done"),
    ]
    assert "todo_unchecked" in styles("- [ ] open")


def test_numbered_marker_includes_dot() -> None:
    runs = render_line("1. item")

    assert runs == (StyledRun(0, 2, "list_marker"), StyledRun(2, 7, "plain"))


def test_rule_and_code_lines() -> None:
    assert styles("---") == ["rule"]
    assert styles("```python", in_code_block=True) == ["code_fence"]
    assert styles("**x**", in_code_block=True) == ["code_block"]


def test_fence_states_ignore_unterminated_fence() -> None:
    assert fence_states(["```", "code", "```", "after"]) == [True, True, True, False]
    assert fence_states(["before", "```", "x"]) == [False, False, False]


def test_render_lines_uses_fence_context() -> None:
    rendered = render_lines(["```", "**x**", "```", "**x**"], [1, 3, 9])

    assert sorted(rendered) == [1, 3]
    assert [run.style for run in rendered[1]] == ["code_block"]
    assert [run.style for run in rendered[3]] == ["syntax", "bold", "syntax"]


def test_link_at_returns_target_under_column() -> None:
    text = "see [site](http://a.io) now"

    assert link_at(text, 6) == "http://a.io"
    assert link_at(text, 14) == "http://a.io"
    assert link_at(text, 1) is None
