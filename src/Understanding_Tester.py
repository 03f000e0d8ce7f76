# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""Main entry point for the language model understanding tester app based on Streamlit
"""
# Python Built-Ins:
import logging
import os

# External Dependencies:
import streamlit as st

# Local Dependencies:
# `understanding_tester` holds all the logic (inference client, evaluation heuristic, and session
# state machine) with no awareness of Streamlit: this script only renders state and wires widgets
# up to orchestrator operations.
from understanding_tester.config import bool_env_var, get_auth_token, request_timeout
from understanding_tester.evaluations import format_score
from understanding_tester.model import DEFAULT_MODEL_NAME, MODELS
from understanding_tester.serialization import history_json
from understanding_tester.session import (
    history_dataframe,
    SubmissionOrchestrator,
    verdict_dataframe,
)

# Configuration:
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
SHOW_HISTORY_TABLE = bool_env_var("SHOW_HISTORY_TABLE", default=True)

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("understanding_tester.app")

st.set_page_config(page_title="LM Understanding Tester", page_icon=":brain:", layout="centered")


def main() -> None:
    """Main Streamlit app entry point"""
    initialize()
    title()
    prompt_form()
    render_result()
    render_history()


def initialize() -> None:
    """Initialize the Streamlit Session State."""
    if "tester" not in st.session_state:
        st.session_state.tester = SubmissionOrchestrator(
            token_provider=get_auth_token,
            timeout=request_timeout(),
        )
    if "model_name" not in st.session_state:
        st.session_state.model_name = DEFAULT_MODEL_NAME
    if "prompt_input" not in st.session_state:
        st.session_state.prompt_input = ""


def title() -> None:
    """Simply display the title/header on the page."""
    st.markdown(
        "<h3 style='text-align: center'>Language Model Understanding Tester</h3>",
        unsafe_allow_html=True,
    )
    st.write("Enter a prompt to test how well the language model understands it!")


def prompt_form() -> None:
    """Model selector, prompt box, and the Submit / Clear History buttons"""
    tester: SubmissionOrchestrator = st.session_state.tester
    st.selectbox(
        label="Model",
        options=list(MODELS.keys()),
        key="model_name",
        on_change=model_select_handler,
    )
    st.text_area(
        label="Prompt",
        key="prompt_input",
        height=128,
        placeholder="Enter your prompt...",
    )
    tester.edit_prompt(st.session_state.prompt_input)

    col_submit, col_clear = st.columns(2)
    with col_submit:
        st.button(
            label="Submit",
            key="button_submit",
            on_click=button_submit_handler,
            type="primary",
            disabled=tester.state.loading or not tester.state.prompt,
        )
    with col_clear:
        st.button(
            label="Clear History",
            key="button_clear_history",
            on_click=clear_history_handler,
        )


def model_select_handler() -> None:
    model_cfg, _ = MODELS[st.session_state.model_name]
    st.session_state.tester.select_model(model_cfg.model_id)


def button_submit_handler() -> None:
    """Send the current prompt to the selected model and evaluate the response"""
    tester: SubmissionOrchestrator = st.session_state.tester
    tester.edit_prompt(st.session_state.prompt_input)
    try:
        with st.spinner("Loading..."):
            tester.submit()
    except Exception as err:
        logger.exception("Submission failed unexpectedly")
        st.exception(err)


def clear_history_handler() -> None:
    st.session_state.tester.clear_history()


def render_result() -> None:
    """Response / evaluation / score panels for the latest submission"""
    state = st.session_state.tester.state
    if not state.response:
        return
    st.subheader("Model Response")
    with st.container(border=True):
        st.text(state.response)
    st.subheader("Evaluation")
    with st.container(border=True):
        st.write(state.evaluation.display())
    if state.score is not None:
        st.caption(f"Keyword Overlap Score: {format_score(state.score)}")
    if state.verdict is not None:
        with st.expander(label=":straight_ruler: Score breakdown", expanded=False):
            st.table(verdict_dataframe(state.verdict))


def render_history() -> None:
    state = st.session_state.tester.state
    if not state.history:
        return
    st.subheader("Prompt History")
    for entry in state.history:
        with st.container(border=True):
            st.markdown(f"**Prompt:** {entry.prompt}")
            st.markdown(f"**Response:** {entry.response}")
            st.markdown(f"**Evaluation:** {entry.verdict_label.display()}")

    if SHOW_HISTORY_TABLE:
        with st.expander(label=":file_cabinet: History table", expanded=False):
            st.table(history_dataframe(state.history))
    st.download_button(
        data=history_json(state.history, model_id=state.model_id),
        file_name="prompt_history.json",
        key="button_dl_history",
        label="Download History",
        mime="application/json",
    )


if __name__ == "__main__":
    main()
