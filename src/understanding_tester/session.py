# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""Application state and the submit -> infer -> evaluate -> record lifecycle

State is an immutable `AppState` value, updated only through the reducer functions below, so the
Idle -> Loading -> Idle state machine can be tested without any rendering layer. The Streamlit UI
keeps one `SubmissionOrchestrator` per browser session and re-renders from its `.state`.
"""
# Python Built-Ins:
from dataclasses import dataclass, replace
from logging import getLogger
from typing import Callable, Optional, Sequence, Tuple

# External Dependencies:
import pandas as pd

# Local Dependencies:
from .config import get_auth_token
from .evaluations import EvaluationVerdict, UnderstandingEvaluator, VerdictLabel
from .model import (
    DEFAULT_MODEL_NAME,
    get_model_config,
    infer,
    InferenceResult,
    MODELS,
    PromptRequest,
)

logger = getLogger(__name__)

Evaluator = Callable[[str, str], EvaluationVerdict]
InferFn = Callable[..., InferenceResult]


class SubmissionRejected(ValueError):
    """Raised when a state transition is not allowed from the current state"""


@dataclass(frozen=True)
class HistoryEntry:
    """Record of one completed submission, never modified after it's added to the history"""

    prompt: str
    response: str
    verdict_label: VerdictLabel


@dataclass(frozen=True)
class AppState:
    """Everything the UI renders, plus the in-flight request (if any)

    Attributes
    ----------
    model_id :
        ID of the currently selected model
    prompt :
        Current content of the prompt text box
    response :
        Text shown in the response panel (generated text, or "Error: ..." after a failure)
    evaluation :
        Verdict label shown in the evaluation panel (None before the first submission)
    score :
        Unrounded keyword overlap score of the latest submission (None before the first)
    verdict :
        Full heuristic verdict of the latest submission (None before the first, or after a failed
        call)
    history :
        Completed submissions since the last clear, most recent first
    loading :
        True while an inference call is outstanding
    pending :
        The request currently in flight, captured when the submission started
    """

    model_id: str
    prompt: str = ""
    response: str = ""
    evaluation: Optional[VerdictLabel] = None
    score: Optional[float] = None
    verdict: Optional[EvaluationVerdict] = None
    history: Tuple[HistoryEntry, ...] = ()
    loading: bool = False
    pending: Optional[PromptRequest] = None


def initial_state(model_id: Optional[str] = None) -> AppState:
    if model_id is None:
        model_id = MODELS[DEFAULT_MODEL_NAME][0].model_id
    return AppState(model_id=model_id)


def edit_prompt(state: AppState, prompt: str) -> AppState:
    return replace(state, prompt=prompt)


def select_model(state: AppState, model_id: str) -> AppState:
    """Switch the selected model (raises ValueError for IDs not in the registry)"""
    get_model_config(model_id)
    return replace(state, model_id=model_id)


def can_submit(state: AppState) -> bool:
    return not state.loading and bool(state.prompt)


def begin_submission(state: AppState) -> AppState:
    """Idle -> Loading: capture the current prompt and model as the in-flight request"""
    if state.loading:
        raise SubmissionRejected("A submission is already in progress")
    if not state.prompt:
        raise SubmissionRejected("Cannot submit an empty prompt")
    request = PromptRequest(prompt=state.prompt, model_id=state.model_id)
    return replace(state, loading=True, pending=request)


def complete_submission(
    state: AppState,
    result: InferenceResult,
    evaluator: Optional[Evaluator] = None,
) -> AppState:
    """Loading -> Idle: show the outcome of the in-flight request and prepend it to the history

    Successful results are evaluated against the prompt that was submitted (not whatever is in the
    prompt box now). Failures get a fixed "Error" verdict with score 0.
    """
    if not state.loading or state.pending is None:
        raise SubmissionRejected("No submission is in progress")
    evaluator = evaluator or UnderstandingEvaluator()
    prompt = state.pending.prompt

    if result.ok:
        verdict = evaluator(prompt, result.text)
        response, label, score = result.text, verdict.label, verdict.keyword_score
    else:
        verdict = None
        response, label, score = f"Error: {result.error_message}", VerdictLabel.ERROR, 0.0

    entry = HistoryEntry(prompt=prompt, response=response, verdict_label=label)
    return replace(
        state,
        response=response,
        evaluation=label,
        score=score,
        verdict=verdict,
        history=(entry,) + state.history,
        loading=False,
        pending=None,
    )


def clear_history(state: AppState) -> AppState:
    """Empty the history (allowed at any time, including while loading)"""
    return replace(state, history=())


def history_dataframe(history: Sequence[HistoryEntry]) -> pd.DataFrame:
    """Tabulate a history for display, most recent first"""
    return pd.DataFrame(
        [
            {
                "Prompt": entry.prompt,
                "Response": entry.response,
                "Evaluation": entry.verdict_label.value,
            }
            for entry in history
        ],
        columns=["Prompt", "Response", "Evaluation"],
    )


def verdict_dataframe(verdict: EvaluationVerdict) -> pd.DataFrame:
    """Tabulate the components of one verdict as Metric -> Value rows"""
    scores = verdict.scores()
    return pd.DataFrame(
        [{"Value": score.value} for score in scores],
        index=pd.Series([score.name for score in scores], name="Metric"),
    )


class SubmissionOrchestrator:
    """Owns the session's AppState and drives submissions through the inference client

    At most one inference call is outstanding at a time: `submit()` blocks until the call settles,
    and is rejected while `state.loading` is set.
    """

    def __init__(
        self,
        state: Optional[AppState] = None,
        infer_fn: InferFn = infer,
        evaluator: Optional[Evaluator] = None,
        token_provider: Callable[[], str] = get_auth_token,
        timeout: Optional[float] = None,
    ):
        self._state = state or initial_state()
        self._infer = infer_fn
        self._evaluator = evaluator or UnderstandingEvaluator()
        self._token_provider = token_provider
        self.timeout = timeout

    @property
    def state(self) -> AppState:
        return self._state

    def edit_prompt(self, prompt: str) -> AppState:
        self._state = edit_prompt(self._state, prompt)
        return self._state

    def select_model(self, model_id: str) -> AppState:
        self._state = select_model(self._state, model_id)
        return self._state

    def clear_history(self) -> AppState:
        logger.info("Clearing %s history entries", len(self._state.history))
        self._state = clear_history(self._state)
        return self._state

    def submit(self) -> AppState:
        """Run one full submission of the current prompt, returning the resulting state"""
        if not can_submit(self._state):
            raise SubmissionRejected("Submission is disabled while loading or with an empty prompt")
        auth_token = self._token_provider()
        self._state = begin_submission(self._state)
        request = self._state.pending
        logger.info("Submitting prompt (%s chars) to %s", len(request.prompt), request.model_id)
        try:
            result = self._infer(request, auth_token, timeout=self.timeout)
        except Exception:
            # Unexpected errors still return the session to Idle before propagating
            self._state = replace(self._state, loading=False, pending=None)
            raise
        self._state = complete_submission(self._state, result, self._evaluator)
        logger.info("Submission to %s finished: %s", request.model_id, self._state.evaluation)
        return self._state
