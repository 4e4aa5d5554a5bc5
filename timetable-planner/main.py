import streamlit as st
import pandas as pd
from config import AppConfig
from schemas import (
    Subject, StoredState, DayOfWeek, ClassType, SubjectCategory, DayHalf, sort_days
)
from constraints import calculate_required_sessions, calculate_total_slots, exceeds_capacity
from slot_allocator import generate_timetable, update_result_cell
from display_utils import (
    format_result_for_display, grid_to_dataframe, dataframe_to_grid,
    find_differences, teacher_title, result_to_csv, PERIOD_COLUMN
)
from export_utils import result_to_pdf, export_file_name
from storage import LocalStateStore
from log import init_logger

config = AppConfig()
init_logger(debug=config.debug)
state_store = LocalStateStore(config.state_file)

st.set_page_config(
    page_title="Weekly Timetable Planner",
    page_icon="📅",
    layout="wide"
)

st.title("📅 Weekly Timetable Planner")
st.markdown("""
<style>
label {
    font-size: 1.1rem !important;
}
section[data-testid="stSidebar"] h2 {
    font-size: 1.5rem !important;
}
</style>
""", unsafe_allow_html=True)

def _default_subjects_frame(count: int) -> pd.DataFrame:
    names = config.form.subject_names
    return pd.DataFrame([
        {
            "name": names[index] if index < len(names) else "",
            "sessions_per_week": 4,
            "class_type": ClassType.THEORY.value,
            "category": SubjectCategory.REGULAR.value,
            "preferred_half": DayHalf.FIRST.value,
        }
        for index in range(count)
    ])

def _restore_saved_state():
    saved = state_store.load()
    if saved is None:
        return
    if saved.subjects:
        st.session_state['subjects_df'] = pd.DataFrame([s.model_dump(mode='json') for s in saved.subjects])
    if saved.selected_days:
        st.session_state['selected_days'] = saved.selected_days
    st.session_state['periods_per_day'] = saved.periods_per_day
    st.session_state['section_count'] = saved.section_count
    st.session_state['teacher_name'] = saved.teacher_name or ""
    if saved.timetable is not None and saved.timetable.sections:
        st.session_state['timetable'] = saved.timetable

def _reset_form():
    for key in ['subjects_df', 'selected_days', 'periods_per_day', 'section_count', 'teacher_name', 'timetable']:
        st.session_state.pop(key, None)
    state_store.clear()

if 'restored' not in st.session_state:
    st.session_state['restored'] = True
    _restore_saved_state()

with st.sidebar:
    st.header("⚙️ Configuration")

    teacher_name = st.text_input("Teacher name", value=st.session_state.get('teacher_name', ""))

    selected_days = st.multiselect(
        "Teaching days",
        options=[day.value for day in DayOfWeek],
        default=st.session_state.get('selected_days', config.form.days),
        help="Days are always laid out Monday to Sunday, whatever order you pick them in."
    )
    periods_per_day = st.number_input(
        "Periods per day", min_value=1, max_value=12,
        value=int(st.session_state.get('periods_per_day', config.form.periods_per_day))
    )
    section_count = st.number_input(
        "Number of sections", min_value=1, max_value=26,
        value=int(st.session_state.get('section_count', config.form.section_count))
    )

    col1, col2 = st.columns(2)
    with col1:
        save_button = st.button("Save locally")
    with col2:
        reset_button = st.button("Reset")

if reset_button:
    _reset_form()
    st.toast("Form reset. Default values restored.")
    st.rerun()

st.header("📚 Subjects")
subjects_df = st.session_state.get('subjects_df', _default_subjects_frame(config.form.subject_count))
edited_subjects_df = st.data_editor(
    subjects_df,
    num_rows="dynamic",
    use_container_width=True,
    column_config={
        "name": st.column_config.TextColumn("Subject", required=True),
        "sessions_per_week": st.column_config.NumberColumn("Sessions / week", min_value=0, max_value=20, step=1),
        "class_type": st.column_config.SelectboxColumn("Type", options=[t.value for t in ClassType]),
        "category": st.column_config.SelectboxColumn("Category", options=[c.value for c in SubjectCategory]),
        "preferred_half": st.column_config.SelectboxColumn("Preferred half", options=[h.value for h in DayHalf]),
    },
    key="subjects_editor"
)

subjects, dropped_subjects = config.form.limit_subjects([
    Subject(**{key: value for key, value in row.items() if not pd.isna(value)})
    for row in edited_subjects_df.to_dict(orient="records")
])
if dropped_subjects:
    st.warning(f"Only the first {config.form.max_subjects} subjects are used; "
               f"{dropped_subjects} extra rows are ignored.")
schedulable = [s for s in subjects if s.is_schedulable]

required = calculate_required_sessions(schedulable, int(section_count))
total = calculate_total_slots(len(selected_days), int(periods_per_day))
st.caption(f"{required} sessions required, {total} slots per section available.")
if exceeds_capacity(schedulable, int(section_count), len(selected_days), int(periods_per_day)):
    st.warning(f"The request needs {required} sessions but only {total} slots exist; some sessions will not be placed.")

if st.button("Generate Timetable", type="primary"):
    if not schedulable:
        st.warning("Please add at least one subject name before generating.")
    elif not selected_days:
        st.warning("Select at least one day of the week.")
    else:
        days = [day.value for day in sort_days(selected_days)]
        timetable = generate_timetable(
            subjects=schedulable,
            days=days,
            periods_per_day=int(periods_per_day),
            section_count=int(section_count),
            teacher_name=teacher_name.strip() or None
        )
        st.session_state['timetable'] = timetable
        if timetable.unassigned_sessions:
            st.warning(f"{timetable.unassigned_sessions} sessions could not be placed.")
        else:
            st.success("🎉 Timetable generated. You can now edit or save it.")

if save_button:
    state_store.save(StoredState(
        subjects=subjects,
        selected_days=selected_days,
        periods_per_day=int(periods_per_day),
        section_count=int(section_count),
        teacher_name=teacher_name.strip() or None,
        timetable=st.session_state.get('timetable')
    ))
    st.session_state['subjects_df'] = edited_subjects_df
    st.toast("Timetable saved locally.")

if 'timetable' in st.session_state:
    timetable = st.session_state['timetable']

    st.header("🗓️ Timetables")
    st.info(f"Placed **{timetable.assigned_sessions}** of **{timetable.required_sessions}** sessions "
            f"({timetable.unassigned_sessions} unassigned).")

    for section_index, section in enumerate(timetable.sections):
        st.subheader(section.name)
        edited = st.data_editor(
            grid_to_dataframe(section.grid, timetable.days),
            disabled=[PERIOD_COLUMN],
            hide_index=True,
            use_container_width=True,
            key=f"section_editor_{section_index}"
        )
        for period_index, day_index, value in find_differences(section, dataframe_to_grid(edited, timetable.days)):
            timetable = update_result_cell(timetable, section_index, period_index, day_index, value)
        st.session_state['timetable'] = timetable

    if timetable.teacher_grid:
        st.subheader(teacher_title(timetable))
        st.caption("Generated view; manual edits above are not reflected until the next generation.")
        st.table(grid_to_dataframe(timetable.teacher_grid, timetable.days))

    tables = format_result_for_display(timetable)
    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button(
            label="Download CSV",
            data=result_to_csv(timetable, tables),
            file_name=export_file_name("csv"),
            mime="text/csv"
        )
    with col2:
        st.download_button(
            label="Download PDF",
            data=result_to_pdf(timetable, tables),
            file_name=export_file_name("pdf"),
            mime="application/pdf"
        )
    with col3:
        st.download_button(
            label="Download JSON",
            data=timetable.model_dump_json(indent=2),
            file_name=export_file_name("json"),
            mime="application/json"
        )
