from app.services.sheets import fit_to_length, flatten_column, flatten_column_preserve_length


def test_flatten_column_skips_rows_without_first_cell():
    matrix = [["a", "ignored"], [], ["b"], [None], [3]]
    assert flatten_column(matrix) == ["a", "b", "3"]


def test_flatten_column_empty_matrix():
    assert flatten_column([]) == []
    assert flatten_column(None) == []


def test_preserve_length_keeps_positions():
    matrix = [["x"], [], ["y"], [""], ["z"]]
    assert flatten_column_preserve_length(matrix, 5) == ["x", "", "y", "", "z"]


def test_preserve_length_pads_short_matrix():
    # 数据源会截掉末尾的空行
    assert flatten_column_preserve_length([[], ["Editor's Pick"]], 3) == ["", "Editor's Pick", ""]


def test_preserve_length_truncates_and_handles_empty():
    assert flatten_column_preserve_length([["a"], ["b"], ["c"]], 2) == ["a", "b"]
    assert flatten_column_preserve_length([], 3) == ["", "", ""]
    assert flatten_column_preserve_length([["a"]], 0) == []


def test_preserve_length_blanks_whitespace_cells():
    assert flatten_column_preserve_length([["  "], ["ok"]], 2) == ["", "ok"]


def test_fit_to_length():
    assert fit_to_length(["a"], 3) == ["a", "", ""]
    assert fit_to_length(["a", "b", "c"], 2) == ["a", "b"]
    assert fit_to_length([], 0) == []
