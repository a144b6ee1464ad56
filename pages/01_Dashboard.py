# =============================================================================
# 01_Dashboard.py - Personal asthma dashboard
# =============================================================================
"""
Dashboard - control score, health score, insights and symptom trend
"""
from __future__ import annotations
import json

import streamlit as st

from asthmacare.errors import ErrorContext, show_result
from asthmacare.health import ControlLevel
from asthmacare.state.session import protect_page

st.set_page_config(page_title="Dashboard - AsthmaCare", page_icon="📊", layout="wide")

services = protect_page("pages/01_Dashboard.py")

LEVEL_COLORS = {
    ControlLevel.WELL_CONTROLLED: "green",
    ControlLevel.PARTLY_CONTROLLED: "orange",
    ControlLevel.POORLY_CONTROLLED: "red",
}

st.title("📊 Dashboard")

with ErrorContext("Loading dashboard", stop_page=True):
    result = services["export"].dashboard()
if not show_result(result):
    st.stop()

dashboard = result.data
control = dashboard["control"]
summary = dashboard["summary"]

# =============================================================================
# HEADLINE METRICS
# =============================================================================
col1, col2, col3, col4 = st.columns(4)
col1.metric("Asthma control", control.score, help=control.level.value)
col2.metric("Health score", dashboard["health_score"])
col3.metric("Symptoms (7 days)", summary["recent_symptoms"])
col4.metric("Upcoming appointments", summary["upcoming_appointments"])

st.markdown(f"**Control level:** :{LEVEL_COLORS[control.level]}[{control.level.value}]")
for recommendation in control.recommendations:
    st.markdown(f"- {recommendation}")

for reminder in dashboard["reminders"]:
    if reminder["type"] == "urgent":
        st.warning(reminder["message"])
    else:
        st.info(reminder["message"])

# =============================================================================
# INSIGHTS + TREND
# =============================================================================
insights = dashboard["insights"]
for alert in insights["alerts"]:
    st.error(alert)
for recommendation in insights["recommendations"]:
    st.info(recommendation)

st.subheader("Symptom trend (30 days)")
with ErrorContext("Loading symptom trend"):
    trends = services["symptoms"].trends(days_back=30)
    if trends.empty:
        st.caption("No symptoms logged in the last 30 days.")
    else:
        st.line_chart(trends.set_index("date")[["avg_severity", "symptom_count"]])

# =============================================================================
# EXPORT
# =============================================================================
with st.expander("Export my data"):
    if st.button("Prepare export"):
        with ErrorContext("Exporting data"):
            exported = services["export"].export_user_data()
            if show_result(exported):
                st.download_button(
                    "Download JSON",
                    json.dumps(exported.data, default=str, indent=2),
                    file_name="asthmacare_export.json",
                    mime="application/json",
                )
