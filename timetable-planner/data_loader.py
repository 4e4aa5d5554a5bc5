import pandas as pd
from pathlib import Path
from typing import Any, Dict, List
from schemas import (
    TimetableRequest, Subject, ClassType, SubjectCategory, DayHalf
)
from log import LOGGER_NAME, get_logger

logger = get_logger(f"{LOGGER_NAME}.loader")

SUBJECT_COLUMNS = ['name', 'sessions_per_week']

def _parse_comma_separated_field(value: Any) -> List[str]:
    """
    Safely parses a string that may contain comma-separated values into a list of strings.
    Handles empty, NaN, or non-string values gracefully.
    """
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    if value is None or pd.isna(value):
        return []
    s_value = str(value)
    if not s_value.strip():
        return []
    items = [item.strip() for item in s_value.split(',')]
    return [item for item in items if item]

def _optional_cell(row: pd.Series, column: str, default: Any) -> Any:
    if column not in row.index or pd.isna(row[column]) or str(row[column]).strip() == "":
        return default
    return str(row[column]).strip()

def _parse_subjects(df: pd.DataFrame) -> List[Subject]:
    """
    Parses the subjects DataFrame. Only 'name' and 'sessions_per_week' are required;
    missing class type, category or preferred half fall back to the Subject defaults.
    """
    df = df.rename(columns=lambda column: str(column).strip().lower().replace(' ', '_'))
    for required_column in SUBJECT_COLUMNS:
        if required_column not in df.columns:
            raise ValueError(f"Required column '{required_column}' not found in the subjects table.")

    subjects: List[Subject] = []
    for _, row in df.iterrows():
        if pd.isna(row['name']):
            continue
        try:
            subject = Subject(
                name=row['name'],
                sessions_per_week=0 if pd.isna(row['sessions_per_week']) else row['sessions_per_week'],
                class_type=ClassType(_optional_cell(row, 'class_type', ClassType.THEORY.value)),
                category=SubjectCategory(_optional_cell(row, 'category', SubjectCategory.REGULAR.value)),
                preferred_half=DayHalf(_optional_cell(row, 'preferred_half', DayHalf.FIRST.value))
            )
            subjects.append(subject)
        except ValueError:
            logger.warning("Skipping subject row with invalid values: %s", row.to_dict())
    return subjects

def _parse_settings(df: pd.DataFrame) -> Dict[str, Any]:
    """Parses a two-column key/value settings sheet into a plain dict."""
    if df.shape[1] < 2:
        raise ValueError("The settings sheet needs a key column and a value column.")
    settings: Dict[str, Any] = {}
    for _, row in df.iterrows():
        key, value = row.iloc[0], row.iloc[1]
        if pd.isna(key):
            continue
        settings[str(key).strip().lower().replace(' ', '_')] = None if pd.isna(value) else value
    return settings

def _build_request(subjects: List[Subject], settings: Dict[str, Any]) -> TimetableRequest:
    teacher_name = settings.get('teacher_name')
    return TimetableRequest(
        subjects=subjects,
        days=_parse_comma_separated_field(settings.get('days')),
        periods_per_day=int(settings.get('periods_per_day') or 0),
        section_count=int(settings.get('section_count') or 1),
        section_names=_parse_comma_separated_field(settings.get('section_names')) or None,
        teacher_name=str(teacher_name).strip() if teacher_name else None
    )

def load_timetable_request_from_excel(file_path: str) -> TimetableRequest:
    """
    Reads a request from an Excel workbook with a 'Subjects' sheet and a
    'Settings' key/value sheet (days, periods_per_day, section_count,
    section_names, teacher_name).
    """
    sheets = pd.read_excel(file_path, sheet_name=None)

    sheet_parser_map = {
        'Subjects': _parse_subjects,
        'Settings': _parse_settings
    }
    for required_sheet in sheet_parser_map.keys():
        if required_sheet not in sheets:
            raise ValueError(f"Required sheet '{required_sheet}' not found in the Excel file.")

    subjects = sheet_parser_map['Subjects'](sheets['Subjects'])
    settings = sheet_parser_map['Settings'](sheets['Settings'])
    return _build_request(subjects, settings)

def load_subjects_from_csv(file_path: str) -> List[Subject]:
    return _parse_subjects(pd.read_csv(file_path))

def load_timetable_request(file_path: str, **settings: Any) -> TimetableRequest:
    """
    Main public function to read a timetable request from disk. The format follows
    the file extension: .xlsx (subjects and settings), .json (a full request) or
    .csv (subjects only; settings come from keyword arguments).
    """
    try:
        file_path_obj = Path(file_path).expanduser()
        if not file_path_obj.exists():
            raise FileNotFoundError(f'Fatal Error: provided file path {file_path_obj} does not exist.')

        suffix = file_path_obj.suffix.lower()
        if suffix in ('.xlsx', '.xls'):
            request = load_timetable_request_from_excel(file_path_obj)
        elif suffix == '.json':
            request = TimetableRequest.model_validate_json(file_path_obj.read_text(encoding='utf-8'))
        elif suffix == '.csv':
            request = _build_request(load_subjects_from_csv(file_path_obj), settings)
        else:
            raise ValueError(f"Unsupported file type '{suffix}'.")

        logger.info("Loaded %d subjects for %d days from %s.", len(request.subjects), len(request.days), file_path_obj.name)
        return request

    except Exception as e:
        raise ValueError(f"Failed to load or parse the timetable request. Reason: {e}")
