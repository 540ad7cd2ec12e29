# tests/test_display.py
from __future__ import annotations

import pytest

from magicsquare import InvalidInput, generate, summarise
from magicsquare.dataio import load_grid, write_csv
from magicsquare.display import (
    color_from_gradient,
    color_gradient,
    gradient_table,
    heatmap_cells,
    heatmap_table,
    line_sets,
    line_table,
    magic_square_table,
    occurrence_counts,
    render_page,
    write_page,
)
from magicsquare.fmt import format_grid, format_summary, strip_ansi
from magicsquare.runtime import APPLY
from magicsquare.utility import UserInputError

LO_SHU = [
    [8, 1, 6],
    [3, 5, 7],
    [4, 9, 2],
]


# ---------- summarise ---------------------------------------------------------


def test_summary_of_generated_square():
    s = summarise(generate(4))
    assert s.order == 4
    assert s.magic_constant == 34
    assert s.row_sums == (34, 34, 34, 34)
    assert s.column_sums == (34, 34, 34, 34)
    assert s.diagonal_sums == (34, 34)
    assert s.is_magic and s.is_normal


def test_summary_of_broken_square():
    grid = [row[:] for row in LO_SHU]
    grid[0][0] = 9
    s = summarise(grid)
    assert s.row_sums[0] == 16
    assert s.column_sums[0] == 16
    assert not s.is_magic
    assert not s.is_normal   # 9 now appears twice


def test_summary_of_shifted_square():
    s = summarise([[row_v + 1 for row_v in row] for row in LO_SHU])
    assert s.magic_constant == 15
    assert not s.is_magic    # every line sums to 18


@pytest.mark.parametrize("bad", [[], [[1, 2], [3]]])
def test_summary_rejects_non_square(bad):
    with pytest.raises(InvalidInput):
        summarise(bad)


# ---------- lines & occurrences -----------------------------------------------


def test_line_sets():
    lines = line_sets(LO_SHU)
    assert len(lines) == 8
    assert lines[:3] == LO_SHU
    assert lines[3:6] == [[8, 3, 4], [1, 5, 9], [6, 7, 2]]
    assert lines[6] == [8, 5, 2]
    assert lines[7] == [6, 5, 4]
    assert all(sum(line) == 15 for line in lines)


def test_occurrence_counts():
    counts = occurrence_counts(line_sets(LO_SHU))
    assert list(counts) == list(range(1, 10))
    assert counts[5] == 4               # centre: row, column, both diagonals
    assert counts[8] == counts[2] == counts[6] == counts[4] == 3
    assert counts[1] == counts[3] == counts[7] == counts[9] == 2


# ---------- colours -----------------------------------------------------------


def test_color_gradient_endpoints():
    stops = color_gradient("FFFFFF", "FFFF00", 10)
    assert len(stops) == 10
    assert stops[0] == "ffffff"
    assert stops[-1] == "ffff00"
    assert all(len(s) == 6 for s in stops)


def test_color_gradient_two_steps():
    assert color_gradient("000000", "#0000FF", 2) == ["000000", "0000ff"]


@pytest.mark.parametrize("steps", [0, 1, 2.5, True])
def test_color_gradient_rejects_bad_steps(steps):
    with pytest.raises(InvalidInput):
        color_gradient("000000", "FFFFFF", steps)


def test_color_gradient_rejects_bad_hex():
    with pytest.raises(InvalidInput):
        color_gradient("XYZ", "FFFFFF", 5)


def test_gradient_table_concatenates_segments():
    table = gradient_table(("FFFFFF", "FFFF00", "FF0000"), 10)
    assert len(table) == 20
    assert table[0] == "ffffff"
    assert table[9] == "ffff00"
    assert table[-1] == "ff0000"


@pytest.mark.parametrize(
    "value, expected",
    [(2, "#ffffff"), (3, "#ffff00"), (4, "#ff0000"), (1, "#ffffff"), (9, "#ff0000")],
)
def test_color_from_gradient(value, expected):
    assert color_from_gradient(value, 2, 4) == expected


def test_color_from_gradient_flat_range():
    assert color_from_gradient(7, 7, 7) == "#ffffff"


def test_heatmap_cells_follow_profile_colours():
    APPLY({"HEATMAP": {"COLORS": ["000000", "0000FF"], "STEPS": 2}})
    cells = heatmap_cells(occurrence_counts(line_sets(LO_SHU)))
    by_value = {v: (c, color) for v, c, color in cells}
    assert by_value[5] == (4, "#0000ff")
    assert by_value[1] == (2, "#000000")


# ---------- HTML --------------------------------------------------------------


def test_magic_square_table():
    html = magic_square_table(LO_SHU)
    assert html.count("<tr>") == 3
    assert "<td>5</td>" in html


def test_line_table_highlights_members():
    html = line_table(3, [8, 5, 2])
    assert html.count('class="td_magic"') == 3
    assert html.count('class="td_normal"') == 6


def test_heatmap_table_rows():
    html = heatmap_table(occurrence_counts(line_sets(LO_SHU)), 3)
    assert html.count("<tr>") == 3
    assert "<b>5</b> <sup>4</sup>" in html
    assert "background-color: #ff0000;" in html


def test_render_page():
    page = render_page(generate(3))
    assert "<!DOCTYPE html>" in page
    assert "sum up to 15" in page
    assert "This is a valid magic square" in page
    # 8 line tables of 3 highlighted numbers each
    assert page.count('class="td_magic"') == 24


def test_render_page_reports_invalid_square():
    page = render_page([[1, 2], [3, 4]])
    assert "This is not a valid magic square" in page


def test_render_page_rejects_empty():
    with pytest.raises(InvalidInput):
        render_page([])


def test_workspace_template_override(tmp_path):
    ws = tmp_path / "custom"
    (ws / "templates").mkdir(parents=True)
    (ws / "templates" / "page.html.j2").write_text("order={{ n }} sum={{ magic_sum }}", encoding="utf-8")
    assert render_page(generate(5), workspace=ws) == "order=5 sum=65"


def test_write_page(tmp_path):
    out = write_page(generate(4), tmp_path / "html" / "four.html")
    assert out.exists()
    assert "sum up to 34" in out.read_text(encoding="utf-8")


# ---------- text formatting ---------------------------------------------------


def test_format_grid_alignment():
    text = strip_ansi(format_grid(generate(4), highlight=False))
    assert text.splitlines()[0] == "   1 15 14  4"


def test_format_grid_highlights_diagonals():
    raw = format_grid(LO_SHU, highlight=True)
    assert raw != strip_ansi(raw)
    assert strip_ansi(raw).splitlines()[1] == "  3 5 7"


def test_format_summary_sections():
    text = strip_ansi(format_summary(summarise(LO_SHU), show_sums=True))
    assert "= 15" in text
    assert "Rows:" in text and "Columns:" in text and "Diagonals:" in text
    assert "This is a valid magic square" in text


def test_format_summary_uses_profile_setting():
    APPLY({"DISPLAY_SETTINGS": {"SHOW_SUMS": False}})
    text = strip_ansi(format_summary(summarise(LO_SHU)))
    assert "Rows:" not in text


def test_format_summary_doubled_square_is_not_magic():
    grid = [[2 * v for v in row] for row in LO_SHU]
    text = strip_ansi(format_summary(summarise(grid)))
    assert "This is not a valid magic square" in text


def test_format_summary_not_normal_note():
    # every line sums to 15 but only the value 5 is used
    s = summarise([[5, 5, 5], [5, 5, 5], [5, 5, 5]])
    assert s.is_magic and not s.is_normal
    text = strip_ansi(format_summary(s))
    assert "This is a valid magic square (values are not 1..9)" in text


# ---------- CSV ---------------------------------------------------------------


def test_csv_roundtrip(tmp_path):
    grid = generate(6)
    path = tmp_path / "six.csv"
    write_csv(grid, path)
    assert load_grid(path) == grid


def test_load_grid_skips_comments_and_blanks(tmp_path):
    path = tmp_path / "lo_shu.csv"
    path.write_text("# Lo Shu\n8,1,6\n\n3, 5, 7\n4,9,2\n", encoding="utf-8")
    assert load_grid(path) == LO_SHU


def test_load_grid_rejects_text_cells(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("1,2\n3,x\n", encoding="utf-8")
    with pytest.raises(UserInputError, match="line 2"):
        load_grid(path)


def test_load_grid_missing_file(tmp_path):
    with pytest.raises(UserInputError):
        load_grid(tmp_path / "nope.csv")


def test_load_grid_rejects_binary_file(tmp_path):
    path = tmp_path / "utf16.csv"
    path.write_bytes(b"\xff\xfe1,2\n3,4\n")
    with pytest.raises(UserInputError, match=r"reading utf16\.csv: not a UTF-8 text file"):
        load_grid(path)


def test_load_grid_rejects_directory(tmp_path):
    with pytest.raises(UserInputError, match=r"reading "):
        load_grid(tmp_path)
