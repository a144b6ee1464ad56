# =============================================================================
# 04_AI_Chat.py - Asthma assistant chat
# =============================================================================
from __future__ import annotations
import streamlit as st

from asthmacare.errors import ErrorContext
from asthmacare.state.session import protect_page

st.set_page_config(page_title="AI Chat - AsthmaCare", page_icon="💬", layout="centered")

services = protect_page("pages/04_AI_Chat.py")

st.title("💬 Asthma assistant")
st.caption("General guidance only. Always follow your healthcare provider's advice.")

messages = st.session_state["chat_messages"]
if not messages:
    with ErrorContext("Loading chat history"):
        history = services["chat"].history(limit=20)
        for row in reversed(history.data or []):
            messages.append({"role": "user", "content": row["user_message"]})
            messages.append({"role": "assistant", "content": row["ai_response"]})

for message in messages:
    with st.chat_message(message["role"]):
        st.markdown(message["content"])

prompt = st.chat_input("Ask about symptoms, triggers, medication...")
if prompt:
    with st.chat_message("user"):
        st.markdown(prompt)

    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            result = services["chat"].send_message(prompt, context=list(messages))
        reply = result.data if result.success else result.error
        st.markdown(reply)

    messages.append({"role": "user", "content": prompt})
    messages.append({"role": "assistant", "content": reply})
