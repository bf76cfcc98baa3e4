import logging
import os
from datetime import date, timedelta

import pandas as pd
import streamlit as st
from PIL import Image

from config import LOGO_PATH, PERIODS_PER_DAY, TARGET_PERCENT, TIMETABLE_DAYS
from core.attendance_logic import aggregate_by_subject, round_half_up, subject_stats
from core.calendar_logic import month_calendar, shift_month
from core.exceptions import ValidationError
from core.forecast import attendance_trend
from core.models import Aggregate, DayMark, DayMarks
from core.prediction import predict_all
from core.records import bulk_import, clear_records, mark_attendance, records_for, unmark_attendance
from core.standing import subject_standing
from core.subjects import add_subject, delete_subject, subject_by_id, update_subject
from core.timetable import clear_period, place_slot, subjects_on_day, timetable_grid
from core.what_if import project_scenarios, what_if
from generate_logo import build_logo
from utils.attendance_parser import parse_date_lines, read_dates_from_excel
from utils.export import predictions_to_csv, predictions_to_frame
from utils.logger import setup_logging
from utils.pdf_reader import dates_from_pdf
from utils.timetable_parser import import_timetable, parse_timetable

setup_logging()
logger = logging.getLogger("classmark")

st.set_page_config(
    page_title="ClassMark",
    page_icon="📅",
    layout="wide"
)

if not os.path.exists(LOGO_PATH):
    build_logo(LOGO_PATH)

col1, col2 = st.columns([1, 6])

with col1:
    st.image(Image.open(LOGO_PATH), width=80)

with col2:
    st.title("ClassMark")
    st.caption(f"📅 Period-wise attendance, holiday-aware predictions · target {TARGET_PERCENT:g}%")


# -----------------------------
# SESSION STATE
# -----------------------------

def init_state():
    today = date.today()
    defaults = {
        "subjects": [],
        "slots": [],
        "records": [],
        "marks": DayMarks(),
        "view_month": (today.year, today.month),
        "predictions": None,
        "predicted_from": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


init_state()
state = st.session_state


def run_action(action, success=None):
    """
    Runs a state update; validation problems are shown,
    not raised.
    """
    try:
        action()
    except ValidationError as exc:
        logger.warning("Rejected: %s", exc)
        st.error(str(exc))
        return False

    if success:
        st.success(success)
    return True


def subject_label(subject_id):
    subject = subject_by_id(state.subjects, subject_id)
    return subject.name if subject else "?"


def class_card(title, subtitle, percent, band):
    color = {
        "high": "#2ecc71",
        "medium": "#ffa500",
        "low": "#ff4b4b"
    }[band]

    st.markdown(
        f"""
        <div style="
            background:#111;
            padding:14px;
            border-radius:12px;
            margin-bottom:10px;
            border-left:6px solid {color};
        ">
            <div style="font-size:16px;font-weight:600">{title}</div>
            <div style="opacity:0.8">{subtitle}</div>
            <div><b>{percent}%</b></div>
        </div>
        """,
        unsafe_allow_html=True
    )


tab_subjects, tab_timetable, tab_mark, tab_overview, tab_predict = st.tabs([
    "📚 Subjects",
    "🗓️ Timetable",
    "✅ Mark Attendance",
    "📊 Overview",
    "🔮 Holiday Predictor",
])


# -----------------------------
# SUBJECTS
# -----------------------------

with tab_subjects:
    st.subheader("Subjects")

    with st.form("add_subject", clear_on_submit=True):
        c1, c2 = st.columns([4, 1])
        name = c1.text_input("Subject name")
        color = c2.color_picker("Color", "#3B82F6")

        if st.form_submit_button("Add subject"):
            def _add():
                state.subjects = add_subject(state.subjects, name, color)
            run_action(_add, f"Added {name.strip()}")

    if not state.subjects:
        st.info("No subjects yet. Add one above or import a timetable sheet.")

    for subject in state.subjects:
        with st.expander(subject.name):
            c1, c2, c3 = st.columns([4, 1, 1])
            new_name = c1.text_input("Name", subject.name, key=f"name_{subject.id}")
            new_color = c2.color_picker("Color", subject.color, key=f"color_{subject.id}")

            if c3.button("Save", key=f"save_{subject.id}"):
                def _update(sid=subject.id, n=new_name, c=new_color):
                    state.subjects = update_subject(state.subjects, sid, name=n, color=c)
                if run_action(_update):
                    st.rerun()

            if st.button("🗑️ Delete subject, its slots and records", key=f"del_{subject.id}"):
                def _delete(sid=subject.id):
                    state.subjects, state.slots, state.records = delete_subject(
                        state.subjects, state.slots, state.records, sid
                    )
                if run_action(_delete):
                    st.rerun()


# -----------------------------
# TIMETABLE
# -----------------------------

with tab_timetable:
    st.subheader("Weekly Timetable")

    st.dataframe(
        timetable_grid(state.slots, state.subjects),
        use_container_width=True
    )

    if state.subjects:
        with st.form("place_slot"):
            c1, c2, c3, c4 = st.columns(4)
            day = c1.selectbox("Day", TIMETABLE_DAYS, format_func=str.capitalize)
            subject_id = c2.selectbox(
                "Subject",
                [s.id for s in state.subjects],
                format_func=subject_label
            )
            start = c3.number_input("From period", 1, PERIODS_PER_DAY, 1)
            end = c4.number_input("To period", 1, PERIODS_PER_DAY, 1)

            if st.form_submit_button("Assign"):
                def _place():
                    state.slots = place_slot(
                        state.slots, subject_id, day, int(start),
                        int(end) if end > start else None,
                    )
                if run_action(_place):
                    st.rerun()

        with st.form("clear_slot"):
            c1, c2 = st.columns(2)
            day = c1.selectbox("Day", TIMETABLE_DAYS, format_func=str.capitalize, key="clear_day")
            period = c2.number_input("Period", 1, PERIODS_PER_DAY, 1, key="clear_period")

            if st.form_submit_button("Clear period"):
                state.slots = clear_period(state.slots, day, int(period))
                st.rerun()

    tt_file = st.file_uploader(
        "Import timetable (.xlsx with a Period column and weekday columns)",
        type=["xlsx"]
    )

    if tt_file and st.button("Import timetable"):
        def _import():
            schedule = parse_timetable(tt_file)
            state.subjects, state.slots = import_timetable(state.subjects, state.slots, schedule)
        if run_action(_import, "Timetable imported"):
            st.rerun()


# -----------------------------
# MARK ATTENDANCE
# -----------------------------

with tab_mark:
    st.subheader("Mark Attendance")

    selected = st.date_input("Date", date.today(), key="mark_date")
    show_all = st.checkbox("Show all subjects")

    day_subjects = state.subjects if show_all else subjects_on_day(
        state.slots, state.subjects, selected.strftime("%A")
    )

    if not day_subjects:
        st.info("No classes scheduled for this day 🎉")

    for subject in day_subjects:
        existing = records_for(state.records, subject.id, selected)
        status = existing[0].status.value if existing else "not marked"

        c1, c2, c3, c4, c5 = st.columns([3, 1, 1, 1, 1])
        c1.markdown(f"**{subject.name}** · {status} · {len(existing)} period(s)")

        for column, (label, value) in zip(
            (c2, c3, c4),
            (("Present", "present"), ("Absent", "absent"), ("Holiday", "holiday")),
        ):
            if column.button(label, key=f"{value}_{subject.id}_{selected}"):
                state.records = mark_attendance(state.records, state.slots, subject.id, selected, value)
                st.rerun()

        if c5.button("Clear", key=f"unmark_{subject.id}_{selected}"):
            state.records = unmark_attendance(state.records, subject.id, selected)
            st.rerun()

    if state.subjects:
        with st.expander("📥 Bulk import dates"):
            subject_id = st.selectbox(
                "Subject",
                [s.id for s in state.subjects],
                format_func=subject_label,
                key="bulk_subject"
            )
            status = st.selectbox("Status", ["present", "absent", "holiday"], key="bulk_status")
            source = st.radio("Source", ["Paste", "Excel", "PDF"], horizontal=True)

            dates, invalid = [], []

            if source == "Paste":
                text = st.text_area("One date per line (DD-MM-YYYY, DD/MM/YYYY or YYYY-MM-DD)")
                dates, invalid = parse_date_lines(text)
            elif source == "Excel":
                xl = st.file_uploader("Dates in the first column", type=["xlsx"], key="bulk_xlsx")
                if xl:
                    try:
                        dates, invalid = read_dates_from_excel(xl)
                    except ValidationError as exc:
                        st.error(str(exc))
            else:
                pdf = st.file_uploader("Attendance report", type=["pdf"], key="bulk_pdf")
                if pdf:
                    try:
                        dates = dates_from_pdf(pdf)
                    except ValidationError as exc:
                        st.error(str(exc))

            if invalid:
                st.warning(f"{len(invalid)} line(s) had no valid date: {', '.join(invalid[:5])}")

            if st.button(f"Import {len(dates)} date(s)", disabled=not dates):
                result = bulk_import(state.records, state.slots, subject_id, dates, status)
                state.records = result.records

                if result.duplicates:
                    shown = ", ".join(d.isoformat() for d in result.duplicates[:5])
                    st.warning(
                        f"Imported {result.imported} record(s). "
                        f"{len(result.duplicates)} already fully marked: {shown}"
                    )
                else:
                    st.success(f"Imported {result.imported} record(s).")

        with st.expander("🧹 Clear records"):
            c1, c2 = st.columns(2)
            subject_id = c1.selectbox(
                "Subject",
                [s.id for s in state.subjects],
                format_func=subject_label,
                key="clear_subject"
            )
            which = c2.selectbox("Records", ["all", "present", "absent", "holiday"])

            if st.button(f"Delete {which} records of {subject_label(subject_id)}"):
                state.records, removed = clear_records(state.records, subject_id, which)
                st.success(f"Deleted {removed} record(s)")


# -----------------------------
# OVERVIEW
# -----------------------------

with tab_overview:
    st.subheader("🎯 Where You Stand")

    aggregates = aggregate_by_subject(state.records)
    rows = []

    for subject in state.subjects:
        current = aggregates.get(subject.id, Aggregate())
        stats = subject_stats(records_for(state.records, subject.id))
        standing = subject_standing(current)

        rows.append({
            "Subject": subject.name,
            "Attended": stats["present"],
            "Missed": stats["absent"],
            "Held": stats["total"],
            "Attendance %": current.percentage,
            f"Needed for {TARGET_PERCENT:g}%": standing["needed"],
            "Can Skip": standing["skippable"],
            "Status": standing["status"],
        })

    if rows:
        cards = st.columns(min(4, len(rows)))
        for i, subject in enumerate(state.subjects):
            current = aggregates.get(subject.id, Aggregate())
            with cards[i % len(cards)]:
                class_card(
                    subject.name,
                    f"{current.present_units}/{current.total_units} periods",
                    current.percentage,
                    subject_standing(current)["band"],
                )

        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

        st.subheader("📈 Attendance Trend")

        trend_subject = st.selectbox(
            "Select subject for trend",
            [s.id for s in state.subjects],
            format_func=subject_label,
            key="trend_subject"
        )
        trend = attendance_trend(records_for(state.records, trend_subject))

        if trend:
            chart_df = pd.DataFrame(trend).set_index("date")
            st.line_chart(chart_df)
            st.caption(f"⚠️ {TARGET_PERCENT:g}% attendance is the danger threshold")
        else:
            st.info("No attendance marked for this subject yet 📭")

        st.subheader("🔮 What-If Simulator")

        current = aggregates.get(trend_subject, Aggregate())
        c1, c2 = st.columns(2)
        attend_more = c1.number_input("Attend next classes", min_value=0, step=1)
        skip_more = c2.number_input("Skip next classes", min_value=0, step=1)

        result = what_if(current.present_units, current.total_units, attend_more, skip_more)
        st.metric("Projected Attendance", f"{result['percent']}%")
        st.write("Status:", result["status"])

        if result["needed"]:
            st.warning(
                f"You must attend {result['needed']} consecutive classes "
                f"to reach {TARGET_PERCENT:g}%"
            )
    else:
        st.info("Add subjects to see your attendance.")


# -----------------------------
# HOLIDAY PREDICTOR
# -----------------------------

with tab_predict:
    st.subheader("🔮 Holiday Predictor")
    st.caption(
        "Mark upcoming college holidays (class cancelled) and personal leaves "
        "(class held, you're away). Every other scheduled class counts as attended."
    )

    year, month = state.view_month

    c1, c2, c3, c4 = st.columns([1, 3, 1, 3])
    if c1.button("◀"):
        state.view_month = shift_month(year, month, -1)
        st.rerun()
    c2.markdown(f"### {date(year, month, 1).strftime('%B %Y')}")
    if c3.button("▶"):
        state.view_month = shift_month(year, month, 1)
        st.rerun()

    mode = c4.radio("Mark as", ["holiday", "leave"], horizontal=True, format_func=str.capitalize)

    icons = {DayMark.NORMAL: "", DayMark.HOLIDAY: " 🏖️", DayMark.LEAVE: " 🧳"}

    header = st.columns(7)
    for col, label in zip(header, ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]):
        col.markdown(f"**{label}**")

    cells = month_calendar(year, month, state.slots, state.marks)

    for week in range(6):
        cols = st.columns(7)
        for col, cell in zip(cols, cells[week * 7:(week + 1) * 7]):
            label = f"{cell.date.day}{icons[cell.mark]}"
            if cell.is_today:
                label = f"[{label}]"

            clicked = col.button(
                label,
                key=f"cal_{cell.date}",
                disabled=cell.is_past or not cell.in_month,
                use_container_width=True,
            )
            if clicked:
                state.marks = state.marks.toggle(cell.date, mode)
                state.predictions = None
                st.rerun()

    st.caption(
        f"{len(state.marks.holidays)} holiday(s) · {len(state.marks.leaves)} leave day(s) marked"
    )

    target = st.date_input("Predict up to", date.today() + timedelta(days=30), key="target_date")

    # Results are only shown for the inputs they were computed from
    inputs = (target, state.marks, state.subjects, state.slots, state.records)

    if st.button("Predict"):
        def _predict():
            state.predictions = predict_all(
                state.subjects, state.slots, state.records, target, state.marks
            )
            state.predicted_from = inputs
        run_action(_predict)

    if state.predictions and state.predicted_from != inputs:
        state.predictions = None
        st.info("Inputs changed since the last prediction. Press Predict again.")

    if state.predictions:
        st.dataframe(
            predictions_to_frame(state.predictions),
            use_container_width=True,
            hide_index=True
        )

        for r in state.predictions:
            if r.classes_in_period:
                st.caption(
                    f"{r.subject.name}: {r.classes_in_period} class(es) ahead, "
                    f"{r.missed_in_period} on leave"
                )

        st.download_button(
            "Download CSV",
            predictions_to_csv(state.predictions),
            file_name=f"attendance_prediction_{date.today().isoformat()}.csv",
            mime="text/csv"
        )

    with st.expander("Quick outlook without timetable (one class per working day)"):
        if state.subjects:
            outlook = []
            aggregates = aggregate_by_subject(state.records)

            try:
                for subject in state.subjects:
                    s = project_scenarios(aggregates.get(subject.id, Aggregate()), target)
                    outlook.append({
                        "Subject": subject.name,
                        "Working Days": s["working_days"],
                        "Current %": round_half_up(s["current"], 2),
                        "All Present %": round_half_up(s["all_present"], 2),
                        "All Absent %": round_half_up(s["all_absent"], 2),
                        f"Needed for {TARGET_PERCENT:g}%": s["classes_for_target"],
                    })
            except ValidationError as exc:
                st.error(str(exc))
            else:
                st.dataframe(pd.DataFrame(outlook), use_container_width=True, hide_index=True)
