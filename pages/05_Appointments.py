# =============================================================================
# 05_Appointments.py - Book and manage appointments
# =============================================================================
from __future__ import annotations
from datetime import date, time

import streamlit as st

from asthmacare.errors import ErrorContext, show_result
from asthmacare.health import AppointmentStatus
from asthmacare.state.session import protect_page

st.set_page_config(page_title="Appointments - AsthmaCare", page_icon="📅", layout="wide")

services = protect_page("pages/05_Appointments.py")

APPOINTMENT_TYPES = ["consultation", "follow-up", "lung function test", "emergency review"]
PRIORITIES = ["routine", "urgent", "emergency"]

st.title("📅 Appointments")

# =============================================================================
# BOOK
# =============================================================================
doctor_options = {}
with ErrorContext("Loading doctors"):
    doctors = services["doctors"].list_doctors()
    doctor_options = {d["doctor_id"]: f"{d['full_name']} ({d['specialty']})" for d in doctors.data or []}

with st.form("book_appointment", clear_on_submit=True):
    st.subheader("Book an appointment")
    doctor_id = st.selectbox(
        "Doctor",
        list(doctor_options),
        format_func=doctor_options.get,
        disabled=not doctor_options,
    )
    col1, col2 = st.columns(2)
    appointment_date = col1.date_input("Date", min_value=date.today())
    appointment_time = col2.time_input("Time", value=time(9, 0))
    appointment_type = st.selectbox("Type", APPOINTMENT_TYPES)
    priority = st.selectbox("Priority", PRIORITIES)
    reason = st.text_area("Reason")
    booked = st.form_submit_button("Book", type="primary")

if booked:
    with ErrorContext("Booking appointment"):
        result = services["appointments"].book(
            appointment_date,
            appointment_time,
            doctor_id=doctor_id,
            appointment_type=appointment_type,
            reason=reason,
            priority=priority,
        )
        show_result(result, "Appointment requested. You'll be notified once it is confirmed.")

# =============================================================================
# UPCOMING
# =============================================================================
st.subheader("Upcoming")
with ErrorContext("Loading appointments", stop_page=True):
    upcoming = services["appointments"].list(upcoming=True)
if show_result(upcoming) and not upcoming.data:
    st.caption("No upcoming appointments.")

for row in upcoming.data or []:
    if row["status"] == AppointmentStatus.CANCELLED.value:
        continue
    with st.container(border=True):
        doctor = doctor_options.get(row["doctor_id"], row.get("doctor_name") or row["doctor_id"])
        st.markdown(f"**{row['appointment_date']} {row['appointment_time'][:5]}** with {doctor}")
        st.caption(f"{row.get('appointment_type') or ''} · {row['status']}")

        col1, col2, col3 = st.columns([2, 1, 1])
        new_date = col1.date_input("New date", key=f"date_{row['id']}", min_value=date.today())
        if col2.button("Reschedule", key=f"reschedule_{row['id']}"):
            with ErrorContext("Rescheduling appointment"):
                if show_result(services["appointments"].reschedule(row["id"], new_date, row["appointment_time"])):
                    st.rerun()
        if col3.button("Cancel", key=f"cancel_{row['id']}"):
            with ErrorContext("Cancelling appointment"):
                if show_result(services["appointments"].cancel(row["id"])):
                    st.rerun()
