from datetime import date
from slot_allocator import generate_timetable
from export_utils import result_to_pdf, export_file_name


def test_pdf_export_produces_a_document():
    result = generate_timetable(
        [{"name": "Mathématiques", "sessions_per_week": 3}, {"name": "A very long subject name for a narrow cell", "sessions_per_week": 2}],
        ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"], 6, 2, teacher_name="Ms. Rao"
    )

    document = result_to_pdf(result)

    assert isinstance(document, bytes)
    assert document.startswith(b"%PDF")


def test_pdf_export_of_empty_result():
    document = result_to_pdf(generate_timetable([], [], 0, 1))

    assert document.startswith(b"%PDF")


def test_export_file_name():
    assert export_file_name("pdf", date(2025, 10, 11)) == "timetable-2025-10-11.pdf"
    assert export_file_name("csv").startswith("timetable-")
