from schemas import Subject, DayHalf, TimetableSection
from constraints import (
    generate_slots,
    half_for_period,
    lab_partner,
    is_slot_free,
    is_lab_pair_free,
    create_occupancy_grid,
    calculate_required_sessions,
    calculate_total_slots,
    exceeds_capacity,
    find_teacher_conflicts,
)


def test_slots_are_period_major():
    slots = generate_slots(day_count=2, periods=3)

    assert [(s.period_index, s.day_index) for s in slots] == [(0, 0), (0, 1), (1, 0), (1, 1), (2, 0), (2, 1)]
    assert [s.slot_index for s in slots] == list(range(6))


def test_first_half_takes_the_extra_period():
    assert [half_for_period(p, 3) for p in range(3)] == [DayHalf.FIRST, DayHalf.FIRST, DayHalf.SECOND]
    assert [half_for_period(p, 4) for p in range(4)] == [DayHalf.FIRST, DayHalf.FIRST, DayHalf.SECOND, DayHalf.SECOND]
    assert half_for_period(0, 1) == DayHalf.FIRST


def test_lab_partner_is_next_period_same_day():
    slots = generate_slots(day_count=3, periods=2)

    partner = lab_partner(slots[1], slots, 3)
    assert (partner.period_index, partner.day_index) == (1, 1)
    assert lab_partner(slots[4], slots, 3) is None


def test_slot_must_be_free_for_teacher_and_section():
    slots = generate_slots(day_count=2, periods=2)
    teacher = create_occupancy_grid(2, 2)
    section = create_occupancy_grid(2, 2)
    teacher[0][1] = True
    section[1][0] = True

    assert is_slot_free(slots[0], teacher, section)
    assert not is_slot_free(slots[1], teacher, section)
    assert not is_slot_free(slots[2], teacher, section)


def test_lab_pair_respects_half_filter():
    slots = generate_slots(day_count=1, periods=4)
    teacher = create_occupancy_grid(4, 1)
    section = create_occupancy_grid(4, 1)

    assert is_lab_pair_free(slots[0], slots[1], DayHalf.FIRST, teacher, section)
    assert not is_lab_pair_free(slots[1], slots[2], DayHalf.FIRST, teacher, section)
    assert is_lab_pair_free(slots[1], slots[2], None, teacher, section)
    teacher[2][0] = True
    assert not is_lab_pair_free(slots[1], slots[2], None, teacher, section)


def test_capacity_helpers():
    subjects = [Subject(name="Math", sessions_per_week=4), Subject(name="Art", sessions_per_week=2)]

    assert calculate_required_sessions(subjects, 3) == 18
    assert calculate_total_slots(5, 6) == 30
    assert not exceeds_capacity(subjects, 3, 5, 6)
    assert exceeds_capacity(subjects, 3, 2, 6)


def test_conflict_audit():
    sections = [
        TimetableSection(name="A", grid=[["Math", ""], ["", "Art"]]),
        TimetableSection(name="B", grid=[["", ""], ["", "Music"]]),
        TimetableSection(name="C", grid=[["", ""], ["", "Drama"]]),
    ]

    assert find_teacher_conflicts(sections) == [(1, 1, ["A", "B", "C"])]
    assert find_teacher_conflicts(sections[:1]) == []
