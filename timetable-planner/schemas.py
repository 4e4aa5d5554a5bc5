import math
from pydantic import BaseModel, Field, field_validator
from enum import Enum
from typing import Any, List, Optional

# Using Python's standard Enum for controlled vocabularies
class ClassType(str, Enum):
    """Enumeration for how a subject's sessions occupy the grid."""
    THEORY = "Theory"
    LAB = "Lab"

class SubjectCategory(str, Enum):
    """Enumeration for the scheduling category of a subject."""
    REGULAR = "Regular"
    REMEDIAL = "Remedial"

class DayHalf(str, Enum):
    """Enumeration for the half of a teaching day."""
    FIRST = "First"
    SECOND = "Second"

class DayOfWeek(str, Enum):
    """Enumeration for the days of the week, declared in calendar order."""
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

CALENDAR_ORDER = {day.value: index for index, day in enumerate(DayOfWeek)}

def sort_days(days: List[Any]) -> List[DayOfWeek]:
    """
    Returns the distinct days in calendar order, whatever order they were selected in.
    Raises ValueError for names that are not days of the week.
    """
    unique_days = {DayOfWeek(day) for day in days}
    return sorted(unique_days, key=lambda day: CALENDAR_ORDER[day.value])

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

# --- Input Models ---

class Subject(BaseModel):
    """Represents one subject taught by the shared teacher to every section."""
    name: str = Field("", description="The display name of the subject (e.g., 'Mathematics'). Blank names are never scheduled.")
    sessions_per_week: int = Field(0, description="How many sessions each section needs per week.")
    class_type: ClassType = Field(ClassType.THEORY, description="Theory takes one period, Lab takes two consecutive periods.")
    category: SubjectCategory = Field(SubjectCategory.REGULAR, description="Regular subjects are scheduled before Remedial ones.")
    preferred_half: DayHalf = Field(DayHalf.FIRST, description="The half of the day the subject should be placed in when possible.")

    @field_validator("name", mode="before")
    @classmethod
    def _trim_name(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("sessions_per_week", mode="before")
    @classmethod
    def _clamp_sessions(cls, value: Any) -> int:
        if value is None or value == "":
            return 0
        sessions = float(value)
        if not math.isfinite(sessions):
            raise ValueError("sessions_per_week must be a finite number")
        return max(0, _round_half_up(sessions))

    @property
    def is_schedulable(self) -> bool:
        return bool(self.name) and self.sessions_per_week > 0

class TimetableRequest(BaseModel):
    """Everything the allocator needs for one generation run."""
    subjects: List[Subject] = Field(default_factory=list)
    days: List[DayOfWeek] = Field(default_factory=list, description="Teaching days, re-sorted into calendar order.")
    periods_per_day: int = Field(0, description="Number of periods in each teaching day.")
    section_count: int = Field(1, description="Number of class sections taught by the teacher.")
    section_names: Optional[List[str]] = Field(None, description="Optional display names, one per section.")
    teacher_name: Optional[str] = Field(None, description="Name of the shared teacher.")

    @field_validator("days", mode="before")
    @classmethod
    def _calendar_order(cls, value: Any) -> List[DayOfWeek]:
        return sort_days(value or [])

    @field_validator("periods_per_day", mode="before")
    @classmethod
    def _clamp_periods(cls, value: Any) -> int:
        return max(0, int(value or 0))

# --- Internal Slot Model ---

class Slot(BaseModel):
    """A single (period, day) cell of the weekly grid, tagged with its half of the day."""
    period_index: int
    day_index: int
    slot_index: int = Field(description="Stable position in the period-major traversal order.")
    half: DayHalf

    class Config:
        frozen = True

# --- Models for the Allocator's Output ---

class TimetableSection(BaseModel):
    """One section's weekly grid, indexed grid[period][day]; an empty string means a free period."""
    name: str
    grid: List[List[str]] = Field(default_factory=list)

class TimetableResult(BaseModel):
    """The complete placement for all sections plus the derived teacher view."""
    sections: List[TimetableSection] = Field(default_factory=list)
    days: List[str] = Field(default_factory=list)
    subjects: List[Subject] = Field(default_factory=list, description="The normalized subjects that were scheduled.")
    periods_per_day: int = 0
    teacher_name: Optional[str] = None
    teacher_grid: List[List[str]] = Field(default_factory=list, description="grid[period][day] holding 'Subject (Section)' or ''.")
    unassigned_sessions: int = 0
    assigned_sessions: int = 0
    total_slots: int = 0
    required_sessions: int = 0

    @property
    def is_complete(self) -> bool:
        return self.unassigned_sessions == 0

# --- Persistence Models ---

class SavedTimetable(BaseModel):
    """A stored record, returned verbatim by id."""
    id: str
    teacher_name: Optional[str] = Field(None, alias="teacherName")
    payload: Any = None

    class Config:
        populate_by_name = True

class TimetableSummary(BaseModel):
    """The listing view of a stored record."""
    id: str
    teacher_name: Optional[str] = Field(None, alias="teacherName")

    class Config:
        populate_by_name = True

class StoredState(BaseModel):
    """The planner form plus the last generated timetable, as kept on local disk."""
    subjects: List[Subject] = Field(default_factory=list)
    selected_days: List[str] = Field(default_factory=list)
    periods_per_day: int = 6
    section_count: int = 1
    teacher_name: Optional[str] = None
    timetable: Optional[TimetableResult] = None
