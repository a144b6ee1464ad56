# =============================================================================
# 02_Symptoms.py - Symptom and medication diary
# =============================================================================
from __future__ import annotations

import pandas as pd
import streamlit as st

from asthmacare.errors import ErrorContext, show_result
from asthmacare.state.session import protect_page

st.set_page_config(page_title="Symptoms - AsthmaCare", page_icon="📝", layout="wide")

services = protect_page("pages/02_Symptoms.py")

SYMPTOM_TYPES = ["wheezing", "coughing", "shortness of breath", "chest tightness", "general"]
TRIGGERS = ["pollen", "dust", "pet dander", "smoke", "cold air", "exercise", "stress"]
MEDICATION_TYPES = ["rescue", "controller", "preventive", "other"]

st.title("📝 Symptoms & medications")

log_col, med_col = st.columns(2)

with log_col:
    st.subheader("Log a symptom")
    with st.form("log_symptom", clear_on_submit=True):
        symptom_type = st.selectbox("Symptom", SYMPTOM_TYPES)
        severity = st.slider("Severity", min_value=1, max_value=5, value=2)
        triggers = st.multiselect("Triggers", TRIGGERS)
        notes = st.text_area("Notes")
        submitted = st.form_submit_button("Save", type="primary")
    if submitted:
        with ErrorContext("Logging symptom"):
            result = services["symptoms"].log(symptom_type, severity, triggers=triggers, notes=notes or None)
            if show_result(result, "Symptom logged") and severity == 5:
                st.warning("Severe symptoms: use your rescue inhaler and contact your doctor.")

with med_col:
    st.subheader("Log medication")
    with st.form("log_medication", clear_on_submit=True):
        name = st.text_input("Medication")
        dosage = st.text_input("Dosage")
        medication_type = st.selectbox("Type", MEDICATION_TYPES)
        taken = st.form_submit_button("Save", type="primary")
    if taken:
        with ErrorContext("Logging medication"):
            show_result(services["medications"].log(name, dosage or None, medication_type), "Medication logged")

st.subheader("History")
with ErrorContext("Loading symptom history"):
    history = services["symptoms"].history(limit=100)
    if show_result(history) and history.data:
        df = pd.DataFrame(history.data)
        st.dataframe(
            df[["recorded_at", "symptom_type", "severity", "triggers", "notes"]],
            use_container_width=True,
            hide_index=True,
        )
    elif history.success:
        st.caption("Nothing logged yet.")
