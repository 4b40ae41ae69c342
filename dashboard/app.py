"""Streamlit dashboard for the access simulator."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
import requests
import streamlit as st

# ==========================================
# Configuration & Constants
# ==========================================
# Point this to your local FastAPI server
API_BASE_URL = "http://127.0.0.1:8000"

st.set_page_config(
    page_title="Access Simulator",
    page_icon="🔐",
    layout="wide",
)

# ==========================================
# API Helper Functions
# ==========================================
def _error_detail(response: requests.Response) -> str:
    try:
        return str(response.json().get("detail", response.text))
    except ValueError:
        return response.text


def fetch_sample() -> Optional[str]:
    """Fetches the built-in sample batch as pretty-printed JSON."""
    try:
        response = requests.get(f"{API_BASE_URL}/sample", timeout=5)
        response.raise_for_status()
        return response.json()["payload"]
    except requests.exceptions.RequestException as e:
        st.error(f"Backend connection failed: {e}")
        return None


def fetch_policies() -> List[Dict[str, Any]]:
    try:
        response = requests.get(f"{API_BASE_URL}/policies", timeout=5)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Could not load room policies: {e}")
        return []


def run_simulation(payload: str, input_order: bool) -> Optional[Dict[str, Any]]:
    """Calls the backend simulation engine; input errors are shown verbatim."""
    try:
        response = requests.post(
            f"{API_BASE_URL}/simulate",
            json={"payload": payload, "input_order": input_order},
            timeout=10,
        )
    except requests.exceptions.RequestException as e:
        st.error(f"Simulation failed: {e}")
        return None
    if response.status_code == 400:
        st.error(f"Input error: {_error_detail(response)}")
        return None
    if not response.ok:
        st.error(f"Simulation failed: {_error_detail(response)}")
        return None
    return response.json()


def decisions_frame(decisions: List[Dict[str, Any]]) -> pd.DataFrame:
    rows = [
        {
            "#": decision["index"],
            "Employee": decision["request"]["id"],
            "Room": decision["request"]["room"],
            "Time": decision["request"]["request_time"],
            "Level": decision["request"]["access_level"],
            "Decision": decision["decision"],
            "Reason": decision["reason"],
        }
        for decision in decisions
    ]
    return pd.DataFrame(rows)


# ==========================================
# UI
# ==========================================
def render_policies() -> None:
    policies = fetch_policies()
    if policies:
        st.sidebar.write("### Room Policies")
        st.sidebar.dataframe(pd.DataFrame(policies), use_container_width=True)


def render_simulator() -> None:
    st.header("🔐 Access Simulator")
    st.markdown("Paste a JSON array of access requests or load the sample batch.")

    if "payload" not in st.session_state:
        st.session_state["payload"] = fetch_sample() or "[]"

    if st.button("Load sample"):
        sample = fetch_sample()
        if sample is not None:
            st.session_state["payload"] = sample

    payload = st.text_area("Requests (JSON)", key="payload", height=320)
    input_order = st.checkbox("Show results in input order", value=False)

    if st.button("Run simulation", type="primary"):
        result = run_simulation(payload, input_order)
        if result:
            summary = result.get("summary", {})
            col_a, col_b, col_c = st.columns(3)
            col_a.metric("Requests", summary.get("total", 0))
            col_b.metric("Granted", summary.get("granted", 0))
            col_c.metric("Denied", summary.get("denied", 0))

            decisions = result.get("decisions", [])
            if decisions:
                st.dataframe(decisions_frame(decisions), use_container_width=True)
            else:
                st.info("The batch was empty.")


def main() -> None:
    st.sidebar.title("Access Simulator")
    st.sidebar.markdown("---")
    render_policies()
    render_simulator()


if __name__ == "__main__":
    main()
