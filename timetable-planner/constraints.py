from typing import Dict, List, Optional, Tuple
from schemas import (
    Slot, Subject, DayHalf, TimetableSection
)

# --- Type Aliases ---
OccupancyGrid = List[List[bool]]
SubjectGrid = List[List[str]]
Conflict = Tuple[int, int, List[str]]

# --- Grid Construction ---

def create_occupancy_grid(periods: int, day_count: int) -> OccupancyGrid:
    return [[False] * day_count for _ in range(periods)]

def create_empty_grid(periods: int, day_count: int) -> SubjectGrid:
    return [[""] * day_count for _ in range(periods)]

def half_for_period(period_index: int, periods: int) -> DayHalf:
    """The first ceil(periods / 2) periods of a day are the first half."""
    first_half_size = (periods + 1) // 2
    return DayHalf.FIRST if period_index < first_half_size else DayHalf.SECOND

def generate_slots(day_count: int, periods: int) -> List[Slot]:
    """
    Enumerates every (period, day) pair with periods as the outer loop.
    The returned order is also the placement search order.
    """
    slots: List[Slot] = []
    for period_index in range(periods):
        for day_index in range(day_count):
            slots.append(Slot(
                period_index=period_index,
                day_index=day_index,
                slot_index=len(slots),
                half=half_for_period(period_index, periods)
            ))
    return slots

# --- Hard Constraint Checking ---

def is_slot_free(slot: Slot, teacher_grid: OccupancyGrid, section_grid: OccupancyGrid) -> bool:
    """A slot is usable only when neither the shared teacher nor the section is committed there."""
    return not teacher_grid[slot.period_index][slot.day_index] and not section_grid[slot.period_index][slot.day_index]

def matches_half(slot: Slot, half: Optional[DayHalf]) -> bool:
    return half is None or slot.half == half

def lab_partner(slot: Slot, slots: List[Slot], day_count: int) -> Optional[Slot]:
    """
    Returns the slot one period later on the same day, or None on the last period.
    With period-major ordering that slot sits exactly day_count positions further on.
    """
    partner_index = slot.slot_index + day_count
    if partner_index >= len(slots):
        return None
    partner = slots[partner_index]
    if partner.day_index != slot.day_index or partner.period_index != slot.period_index + 1:
        return None
    return partner

def is_lab_pair_free(
    first: Slot,
    second: Slot,
    half: Optional[DayHalf],
    teacher_grid: OccupancyGrid,
    section_grid: OccupancyGrid
) -> bool:
    if not (matches_half(first, half) and matches_half(second, half)):
        return False
    return is_slot_free(first, teacher_grid, section_grid) and is_slot_free(second, teacher_grid, section_grid)

# --- Informational Counts ---

def calculate_required_sessions(subjects: List[Subject], section_count: int) -> int:
    """
    Total sessions the request asks for. A lab session counts once even though it
    occupies two periods, so this can understate the real slot pressure.
    """
    return sum(subject.sessions_per_week * section_count for subject in subjects)

def calculate_total_slots(day_count: int, periods: int) -> int:
    return day_count * periods

def exceeds_capacity(subjects: List[Subject], section_count: int, day_count: int, periods: int) -> bool:
    """True when the request obviously cannot fit; used for the pre-generation warning only."""
    return calculate_required_sessions(subjects, section_count) > calculate_total_slots(day_count, periods)

# --- Audit ---

def find_teacher_conflicts(sections: List[TimetableSection]) -> List[Conflict]:
    """
    Rebuilds the teacher's occupancy from the section grids and reports every
    (period, day) held by more than one section, with the names of those sections.
    Generated timetables never have conflicts; manual edits can introduce them.
    """
    occupants: Dict[Tuple[int, int], List[str]] = {}
    for section in sections:
        for period_index, row in enumerate(section.grid):
            for day_index, cell in enumerate(row):
                if cell:
                    occupants.setdefault((period_index, day_index), []).append(section.name)

    return [
        (period_index, day_index, names)
        for (period_index, day_index), names in sorted(occupants.items())
        if len(names) > 1
    ]
