"""
app.py
------
Streamlit UI for AICodeExplainer — Your AI-powered Code Explainer & Converter.
Run with: streamlit run aicodeexplainer/app.py
"""

import os
from datetime import datetime

import requests
import streamlit as st

from aicodeexplainer.prompts import DEFAULT_TARGET_LANGUAGE, TargetLanguage, TaskIntent

# API Configuration
API_BASE_URL = os.getenv("CODE_EXPLAINER_API_URL", "http://localhost:8000")
REQUEST_TIMEOUT = 120

# Page Configuration
st.set_page_config(
    page_title="AICodeExplainer",
    page_icon="🧠",
    layout="centered",
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #1F4E79;
        margin-bottom: 0.2rem;
    }
    .tagline {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 1.5rem;
    }
    .app-footer {
        text-align: center;
        color: #999;
        font-size: 0.85rem;
        margin-top: 3rem;
    }
</style>
""", unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────────────────────
# API HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def _open_session() -> dict:
    response = requests.post(f"{API_BASE_URL}/sessions", timeout=10)
    response.raise_for_status()
    return response.json()


def _current_session() -> dict:
    """Returns the server-side state, reopening the session if the API restarted."""
    session_id = st.session_state.get("session_id")
    if session_id:
        response = requests.get(f"{API_BASE_URL}/sessions/{session_id}", timeout=10)
        if response.status_code == 200:
            return response.json()
    state = _open_session()
    st.session_state["session_id"] = state["session_id"]
    # The previous session's response belongs to a session that no longer exists.
    st.session_state.pop("output", None)
    return state


def _forget_session() -> None:
    st.session_state.pop("session_id", None)
    st.session_state.pop("output", None)


def _run_action(intent: TaskIntent) -> None:
    """Pushes the editor and selector values, then runs the action."""
    session_url = f"{API_BASE_URL}/sessions/{st.session_state['session_id']}"

    source = requests.put(
        f"{session_url}/source",
        json={"source_code": st.session_state.get("code", "")},
        timeout=10,
    )
    language = requests.put(
        f"{session_url}/language",
        json={"target_language": st.session_state["target_language"]},
        timeout=10,
    )
    if source.status_code == 404 or language.status_code == 404:
        _forget_session()
        st.info("Your session expired. Please try again.")
        return
    source.raise_for_status()
    language.raise_for_status()

    response = requests.post(f"{session_url}/actions/{intent.value}", timeout=REQUEST_TIMEOUT)
    if response.status_code == 200:
        st.session_state["output"] = response.json()["output_text"]
    elif response.status_code == 422:
        st.warning(response.json()["detail"])
    elif response.status_code == 409:
        st.info(response.json()["detail"])
    elif response.status_code == 404:
        _forget_session()
        st.info("Your session expired. Please try again.")
    else:
        st.error(f"API error ({response.status_code})")


# ─────────────────────────────────────────────────────────────────────────────
# SIDEBAR
# ─────────────────────────────────────────────────────────────────────────────

with st.sidebar:
    st.markdown("### ⚙️ API Status")
    try:
        health = requests.get(f"{API_BASE_URL}/health", timeout=2)
        if health.status_code == 200:
            st.success("✅ API Online")
        else:
            st.error("❌ API Error")
    except requests.RequestException:
        st.error("❌ API Offline")

    st.markdown("---")
    st.markdown("### 📚 Resources")
    st.markdown(f"- [API Docs]({API_BASE_URL}/docs)")


# ─────────────────────────────────────────────────────────────────────────────
# MAIN
# ─────────────────────────────────────────────────────────────────────────────

st.markdown('<div class="main-header">AICodeExplainer</div>', unsafe_allow_html=True)
st.markdown('<div class="tagline">Your AI-powered Code Explainer &amp; Converter</div>', unsafe_allow_html=True)

try:
    session = _current_session()
except requests.RequestException as e:
    st.error(f"❌ Could not reach the API at {API_BASE_URL}: {e}")
    st.stop()

loading = session["loading"]

# Streamlit cannot observe raw key presses; Ctrl + Enter only applies the edit here.
st.text_area(
    "Source code",
    key="code",
    placeholder="Paste your code here...",
    height=260,
    label_visibility="collapsed",
)

col_explain, col_lang, col_convert = st.columns([1, 1, 1])

with col_explain:
    explain_clicked = st.button(
        "Processing..." if loading else "Explain Code",
        key="explain",
        type="primary",
        disabled=loading,
        use_container_width=True,
    )

with col_lang:
    languages = [lang.value for lang in TargetLanguage]
    st.selectbox(
        "Target language",
        languages,
        index=languages.index(session.get("target_language", DEFAULT_TARGET_LANGUAGE.value)),
        key="target_language",
        label_visibility="collapsed",
    )

with col_convert:
    convert_clicked = st.button(
        "..." if loading else f"Convert to {st.session_state['target_language']}",
        key="convert",
        disabled=loading,
        use_container_width=True,
    )

if explain_clicked or convert_clicked:
    intent = TaskIntent.EXPLAIN if explain_clicked else TaskIntent.CONVERT
    with st.spinner("AI is thinking..."):
        try:
            _run_action(intent)
        except requests.RequestException as e:
            st.error(f"❌ Request Failed: {e}")

output = st.session_state.get("output") or session["output_text"]
if output:
    st.subheader("AI Response:")
    st.code(output, language=None)

st.markdown(
    f'<div class="app-footer">&copy; {datetime.now().year} aiCodeExplainer. Powered by SS team.</div>',
    unsafe_allow_html=True,
)
