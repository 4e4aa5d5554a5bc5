from slot_allocator import generate_timetable
from display_utils import (
    grid_to_rows,
    grid_to_dataframe,
    dataframe_to_grid,
    format_result_for_display,
    find_differences,
    result_to_csv,
    teacher_title,
)


def _sample_result(teacher_name="Ms. Rao"):
    return generate_timetable([{"name": "Math", "sessions_per_week": 2}], ["Monday", "Tuesday"], 1, 1,
                              teacher_name=teacher_name)


def test_grid_rows_have_period_labels():
    rows = grid_to_rows([["Math", ""], ["", "Art"]], ["Monday", "Tuesday"])

    assert rows == [
        ["Periods", "Monday", "Tuesday"],
        ["Period 1", "Math", ""],
        ["Period 2", "", "Art"],
    ]


def test_dataframe_round_trip():
    grid = [["Math", ""], ["", "Art"]]
    df = grid_to_dataframe(grid, ["Monday", "Tuesday"])

    assert list(df.columns) == ["Periods", "Monday", "Tuesday"]
    assert dataframe_to_grid(df, ["Monday", "Tuesday"]) == grid


def test_tables_in_display_order():
    result = _sample_result()
    tables = format_result_for_display(result)

    assert list(tables) == ["Section A", "Ms. Rao (Teacher)"]
    assert tables["Ms. Rao (Teacher)"].iloc[0].tolist() == ["Period 1", "Math (Section A)", "Math (Section A)"]
    assert list(format_result_for_display(result, include_teacher=False)) == ["Section A"]


def test_teacher_title_without_name():
    assert teacher_title(_sample_result(teacher_name=None)) == "Teacher Timetable"


def test_find_differences():
    result = _sample_result()
    edited = [["Math", "Drama"]]

    assert find_differences(result.sections[0], edited) == [(0, 1, "Drama")]


def test_csv_export_blocks():
    csv_text = result_to_csv(_sample_result())

    assert csv_text == (
        "Section A\n"
        "Periods,Monday,Tuesday\n"
        "Period 1,Math,Math\n"
        "\n"
        "Ms. Rao (Teacher)\n"
        "Periods,Monday,Tuesday\n"
        "Period 1,Math (Section A),Math (Section A)\n"
    )


def test_csv_export_of_empty_result():
    result = generate_timetable([], ["Monday"], 1, 1)

    assert result_to_csv(result) == ""
