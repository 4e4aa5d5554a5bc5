import io
import pandas as pd
from schemas import TimetableResult, TimetableSection
from slot_allocator import period_label
from typing import Dict, List, Optional, Tuple

PERIOD_COLUMN = "Periods"

def grid_to_rows(grid: List[List[str]], days: List[str]) -> List[List[str]]:
    """
    Tabulates a grid as rows of [period label, *cells], with the header row
    ["Periods", *days] first.
    """
    rows = [[PERIOD_COLUMN, *days]]
    for period_index, cells in enumerate(grid):
        rows.append([period_label(period_index), *cells])
    return rows

def grid_to_dataframe(grid: List[List[str]], days: List[str]) -> pd.DataFrame:
    """One row per period, one column per day, with the period labels as a leading column."""
    header, *body = grid_to_rows(grid, days)
    return pd.DataFrame(body, columns=header)

def dataframe_to_grid(df: pd.DataFrame, days: List[str]) -> List[List[str]]:
    """The reverse tabulation used after in-place edits in the UI."""
    return [
        ["" if pd.isna(value) else str(value) for value in row]
        for row in df.reindex(columns=days).itertuples(index=False)
    ]

def teacher_title(result: TimetableResult) -> str:
    return f"{result.teacher_name} (Teacher)" if result.teacher_name else "Teacher Timetable"

def format_result_for_display(result: TimetableResult, include_teacher: bool = True) -> Dict[str, pd.DataFrame]:
    """
    Transforms the result into one titled table per section, followed by the
    teacher's table. Dict order is display order.
    """
    tables: Dict[str, pd.DataFrame] = {}
    for section in result.sections:
        tables[section.name] = grid_to_dataframe(section.grid, result.days)
    if include_teacher and result.teacher_grid:
        tables[teacher_title(result)] = grid_to_dataframe(result.teacher_grid, result.days)
    return tables

def find_differences(original: TimetableSection, edited: List[List[str]]) -> List[Tuple[int, int, str]]:
    """Cells whose text changed, as (period_index, day_index, new_value)."""
    changes = []
    for period_index, row in enumerate(edited):
        for day_index, value in enumerate(row):
            if original.grid[period_index][day_index] != value:
                changes.append((period_index, day_index, value))
    return changes

def result_to_csv(result: TimetableResult, tables: Optional[Dict[str, pd.DataFrame]] = None) -> str:
    """
    Row-oriented export: each table is a block made of a title line, the header
    row and one row per period, with a blank line between blocks.
    """
    tables = tables if tables is not None else format_result_for_display(result)
    buffer = io.StringIO()
    for block_index, (title, df) in enumerate(tables.items()):
        if block_index:
            buffer.write("\n")
        pd.DataFrame([[title]]).to_csv(buffer, index=False, header=False)
        df.to_csv(buffer, index=False)
    return buffer.getvalue()
