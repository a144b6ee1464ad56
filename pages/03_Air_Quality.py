# =============================================================================
# 03_Air_Quality.py - Air quality lookup
# =============================================================================
from __future__ import annotations
import streamlit as st

from asthmacare.errors import ErrorContext, show_result
from asthmacare.state.session import protect_page

st.set_page_config(page_title="Air Quality - AsthmaCare", page_icon="🌫️", layout="wide")

services = protect_page("pages/03_Air_Quality.py")

st.title("🌫️ Air quality")

location = st.text_input("Location", value=st.session_state.get("air_quality_location", ""))
if st.button("Check", type="primary") and location:
    st.session_state["air_quality_location"] = location
    with ErrorContext(f"Checking air quality for {location}", stop_page=True):
        with st.spinner("Checking air quality..."):
            result = services["air_quality"].check_air_quality(location)

    if show_result(result):
        current = result.data.get("current", {})
        air = current.get("air_quality", {})
        level = (result.metadata or {}).get("level")

        if level:
            st.markdown(f"### :{level['color']}[{level['status']}]")
            st.caption(level["description"])

        col1, col2, col3 = st.columns(3)
        col1.metric("PM2.5", air.get("pm2_5"))
        col2.metric("PM10", air.get("pm10"))
        col3.metric("Ozone", air.get("o3"))
        st.caption(f"Temperature {current.get('temp_c')} °C, humidity {current.get('humidity')}%")
