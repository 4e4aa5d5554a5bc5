import argparse
from typing import Dict, List, Optional, Tuple
from schemas import (
    TimetableRequest, TimetableResult, TimetableSection,
    Subject, Slot, ClassType, SubjectCategory, DayHalf
)
from constraints import (
    OccupancyGrid,
    SubjectGrid,
    create_occupancy_grid,
    create_empty_grid,
    generate_slots,
    is_slot_free,
    matches_half,
    lab_partner,
    is_lab_pair_free,
    calculate_required_sessions,
    calculate_total_slots
)
from data_loader import load_timetable_request
from log import LOGGER_NAME, get_logger, init_logger
from pathlib import Path

# Buckets are scheduled in this order; subjects keep their input order inside a bucket.
SCHEDULING_PRIORITY: List[Tuple[SubjectCategory, ClassType]] = [
    (SubjectCategory.REGULAR, ClassType.LAB),
    (SubjectCategory.REGULAR, ClassType.THEORY),
    (SubjectCategory.REMEDIAL, ClassType.LAB),
    (SubjectCategory.REMEDIAL, ClassType.THEORY),
]

logger = get_logger(f"{LOGGER_NAME}.allocator")

def period_label(index: int) -> str:
    return f"Period {index + 1}"

def create_section_name(index: int) -> str:
    """Section A ... Section Z, then Section A2 ... Section Z2, and so on."""
    base = chr(ord("A") + index % 26)
    cycle = index // 26
    return f"Section {base}" if cycle == 0 else f"Section {base}{cycle + 1}"

def priority_of(subject: Subject) -> int:
    return SCHEDULING_PRIORITY.index((subject.category, subject.class_type))

class SlotAllocator:
    """
    Greedy first-fit placement of weekly sessions for every section of one teacher.
    """

    def __init__(self, request: TimetableRequest):
        """
        Normalizes the request and prepares the slot universe and the occupancy grids.
        Every allocator owns its own grids, so nothing is shared between runs.
        """
        self.request = request
        self.subjects: List[Subject] = [s for s in request.subjects if s.is_schedulable]
        self.days: List[str] = [day.value for day in request.days]
        self.periods: int = request.periods_per_day
        self.section_count: int = max(1, request.section_count)
        self.section_names: List[str] = self._resolve_section_names(request.section_names)

        self.slots: List[Slot] = generate_slots(len(self.days), self.periods)
        self.teacher_occupancy: OccupancyGrid = create_occupancy_grid(self.periods, len(self.days))
        self.section_occupancy: List[OccupancyGrid] = [
            create_occupancy_grid(self.periods, len(self.days)) for _ in range(self.section_count)
        ]
        self.section_grids: List[SubjectGrid] = [
            create_empty_grid(self.periods, len(self.days)) for _ in range(self.section_count)
        ]

        self.cursor: int = 0
        self.assigned: int = 0
        self.unassigned: int = 0

    def generate(self) -> TimetableResult:
        """
        The main public entry point. Never raises for a validated request: sessions
        that cannot be placed are reported through unassigned_sessions.
        """
        total_slots = calculate_total_slots(len(self.days), self.periods)
        if not self.subjects or not self.days or self.periods == 0:
            logger.info("Nothing to schedule: %d subjects, %d days, %d periods.",
                        len(self.subjects), len(self.days), self.periods)
            return TimetableResult(
                days=self.days,
                subjects=self.subjects,
                periods_per_day=self.periods,
                teacher_name=self.request.teacher_name,
                total_slots=total_slots
            )

        for subject in self._ordered_subjects():
            for section_index in range(self.section_count):
                for _ in range(subject.sessions_per_week):
                    if subject.class_type == ClassType.LAB:
                        placed = self._place_lab_session(subject, section_index)
                    else:
                        placed = self._place_theory_session(subject, section_index)
                    if placed:
                        self.assigned += 1
                    else:
                        self.unassigned += 1
                        logger.debug("Could not place a %s session of '%s' for %s.",
                                     subject.class_type.value, subject.name, self.section_names[section_index])

        result = TimetableResult(
            sections=[
                TimetableSection(name=name, grid=grid)
                for name, grid in zip(self.section_names, self.section_grids)
            ],
            days=self.days,
            subjects=self.subjects,
            periods_per_day=self.periods,
            teacher_name=self.request.teacher_name,
            teacher_grid=self._build_teacher_grid(),
            unassigned_sessions=self.unassigned,
            assigned_sessions=self.assigned,
            total_slots=total_slots,
            required_sessions=calculate_required_sessions(self.subjects, self.section_count)
        )
        logger.info("Placed %d of %d sessions across %d sections (%d unassigned).",
                    result.assigned_sessions, result.required_sessions, self.section_count, result.unassigned_sessions)
        return result

    def _resolve_section_names(self, names: Optional[List[str]]) -> List[str]:
        names = names or []
        resolved = []
        for index in range(self.section_count):
            name = names[index].strip() if index < len(names) and names[index] else ""
            resolved.append(name or create_section_name(index))
        return resolved

    def _ordered_subjects(self) -> List[Subject]:
        # sorted() is stable, which keeps input order within a bucket
        return sorted(self.subjects, key=priority_of)

    def _circular_order(self) -> List[Slot]:
        total = len(self.slots)
        return [self.slots[(self.cursor + offset) % total] for offset in range(total)]

    def _commit(self, section_index: int, slot: Slot, subject: Subject):
        self.teacher_occupancy[slot.period_index][slot.day_index] = True
        self.section_occupancy[section_index][slot.period_index][slot.day_index] = True
        self.section_grids[section_index][slot.period_index][slot.day_index] = subject.name

    def _find_theory_slot(self, section_index: int, half: Optional[DayHalf]) -> Optional[Slot]:
        section_grid = self.section_occupancy[section_index]
        for slot in self._circular_order():
            if matches_half(slot, half) and is_slot_free(slot, self.teacher_occupancy, section_grid):
                return slot
        return None

    def _find_lab_pair(self, section_index: int, half: Optional[DayHalf]) -> Optional[Tuple[Slot, Slot]]:
        section_grid = self.section_occupancy[section_index]
        for slot in self._circular_order():
            partner = lab_partner(slot, self.slots, len(self.days))
            if partner is None:
                continue
            if is_lab_pair_free(slot, partner, half, self.teacher_occupancy, section_grid):
                return slot, partner
        return None

    def _place_theory_session(self, subject: Subject, section_index: int) -> bool:
        """Preferred half first, then anywhere; the cursor only moves on success."""
        slot = self._find_theory_slot(section_index, subject.preferred_half)
        if slot is None:
            slot = self._find_theory_slot(section_index, None)
        if slot is None:
            return False

        self._commit(section_index, slot, subject)
        self.cursor = (slot.slot_index + 1) % len(self.slots)
        return True

    def _place_lab_session(self, subject: Subject, section_index: int) -> bool:
        pair = self._find_lab_pair(section_index, subject.preferred_half)
        if pair is None:
            pair = self._find_lab_pair(section_index, None)
        if pair is None:
            return False

        first, second = pair
        self._commit(section_index, first, subject)
        self._commit(section_index, second, subject)
        self.cursor = (second.slot_index + 1) % len(self.slots)
        return True

    def _build_teacher_grid(self) -> SubjectGrid:
        """
        For every slot, the first section holding something there. The shared
        occupancy grid guarantees that first match is the only match.
        """
        teacher_grid = create_empty_grid(self.periods, len(self.days))
        for period_index in range(self.periods):
            for day_index in range(len(self.days)):
                for name, grid in zip(self.section_names, self.section_grids):
                    cell = grid[period_index][day_index]
                    if cell:
                        teacher_grid[period_index][day_index] = f"{cell} ({name})"
                        break
        return teacher_grid

def generate_timetable(
    subjects: List,
    days: List,
    periods_per_day: int,
    section_count: int,
    section_names: Optional[List[str]] = None,
    teacher_name: Optional[str] = None
) -> TimetableResult:
    """Convenience wrapper taking plain data (Subject models or dicts, day names)."""
    request = TimetableRequest(
        subjects=subjects,
        days=days,
        periods_per_day=periods_per_day,
        section_count=section_count,
        section_names=section_names,
        teacher_name=teacher_name
    )
    return SlotAllocator(request).generate()

def update_cell(
    sections: List[TimetableSection],
    section_index: int,
    period_index: int,
    day_index: int,
    value: str
) -> List[TimetableSection]:
    """
    Returns new sections with one cell replaced. Manual edits are a deliberate
    override: nothing is re-validated and the teacher grid is left as generated.
    An address outside the grids yields an unchanged copy.
    """
    updated: List[TimetableSection] = []
    for current_index, section in enumerate(sections):
        grid = [list(row) for row in section.grid]
        if current_index == section_index and 0 <= period_index < len(grid) and 0 <= day_index < len(grid[period_index]):
            grid[period_index][day_index] = value
        updated.append(TimetableSection(name=section.name, grid=grid))
    return updated

def update_result_cell(result: TimetableResult, section_index: int, period_index: int, day_index: int, value: str) -> TimetableResult:
    return result.model_copy(update={
        "sections": update_cell(result.sections, section_index, period_index, day_index, value)
    })

def summarize_sections(result: TimetableResult) -> Dict[str, int]:
    """Number of occupied cells per section, for quick console summaries."""
    return {
        section.name: sum(1 for row in section.grid for cell in row if cell)
        for section in result.sections
    }

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Generate a weekly timetable from a request file.")
    parser.add_argument("request", help="Path to an .xlsx, .csv or .json request file")
    parser.add_argument("--output", default="../timetables/timetable.json", help="Where to write the result JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    init_logger(debug=args.debug)
    try:
        timetable_request = load_timetable_request(args.request)
        timetable = SlotAllocator(timetable_request).generate()

        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(timetable.model_dump_json(indent=2))

        for section_name, used in summarize_sections(timetable).items():
            print(f"{section_name}: {used} periods filled")
        if timetable.unassigned_sessions:
            print(f"{timetable.unassigned_sessions} sessions could not be placed.")
        print(f"Timetable saved to {output_path}")
    except (ValueError, FileNotFoundError) as e:
        print(e)
