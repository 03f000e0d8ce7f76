# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""A cheap keyword-overlap heuristic for judging whether a model understood a prompt

The verdict combines three signals, all computed without any model calls:

- **Keyword overlap**: the fraction of unique prompt tokens that also appear in the response.
  Tokens are lower-cased, whitespace-delimited words. Punctuation is *not* stripped, so `france?`
  in a prompt does not match `france` in a response.
- **Length**: the response must have more than a minimum number of whitespace-delimited tokens.
- **Coherence**: the response must not contain any canned failure phrase like "sorry".

A response is "understood" only if all three pass.
"""
# Python Built-Ins:
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

# External Dependencies:
from fmeval.eval_algorithms import EvalScore

# Local Dependencies:
from .base import VerdictLabel

KEYWORD_SCORE = "keyword_overlap"
LENGTH_OK = "length_ok"
COHERENCE_OK = "coherence_ok"


@dataclass(frozen=True)
class UnderstandingConfig:
    """Thresholds for the understanding heuristic

    :param min_keyword_score: The keyword overlap score must be strictly greater than this.
    :param min_response_tokens: The response token count must be strictly greater than this.
    :param failure_phrases: Phrases which, if found anywhere in the response (ignoring case), mark
        it as incoherent.
    """

    min_keyword_score: float = 0.3
    min_response_tokens: int = 10
    failure_phrases: Tuple[str, ...] = ("i don't know", "sorry", "not sure", "cannot help")

    def __post_init__(self):
        if not 0 <= self.min_keyword_score <= 1:
            raise ValueError(
                f"min_keyword_score must be between 0 and 1, got {self.min_keyword_score}"
            )
        if self.min_response_tokens < 0:
            raise ValueError(
                f"min_response_tokens must be non-negative, got {self.min_response_tokens}"
            )
        if any(not phrase for phrase in self.failure_phrases):
            raise ValueError("failure_phrases must not contain empty strings")


DEFAULT_CONFIG = UnderstandingConfig()


@dataclass(frozen=True)
class EvaluationVerdict:
    """Result of evaluating one (prompt, response) pair

    `keyword_score` is the unrounded overlap fraction in [0, 1]: round it only for display.
    """

    understood: bool
    keyword_score: float
    length_ok: bool
    coherence_ok: bool

    @property
    def label(self) -> VerdictLabel:
        return VerdictLabel.UNDERSTOOD if self.understood else VerdictLabel.NOT_UNDERSTOOD

    def scores(self) -> List[EvalScore]:
        """The verdict's components as fmeval EvalScores (booleans as 1.0 / 0.0)"""
        return [
            EvalScore(name=KEYWORD_SCORE, value=self.keyword_score),
            EvalScore(name=LENGTH_OK, value=float(self.length_ok)),
            EvalScore(name=COHERENCE_OK, value=float(self.coherence_ok)),
        ]


def tokenize(text: str) -> List[str]:
    """Lower-case and split on runs of whitespace (no empty tokens, punctuation kept)"""
    return text.lower().split()


def keyword_score(prompt_tokens: FrozenSet[str], response_tokens: FrozenSet[str]) -> float:
    if not prompt_tokens:
        return 0.0
    return len(prompt_tokens & response_tokens) / len(prompt_tokens)


def evaluate(
    prompt: str, response: str, config: UnderstandingConfig = DEFAULT_CONFIG
) -> EvaluationVerdict:
    """Judge whether `response` shows the model understood `prompt`

    Pure and deterministic: the same inputs always give the same verdict.
    """
    response_tokens = tokenize(response)
    score = keyword_score(frozenset(tokenize(prompt)), frozenset(response_tokens))
    length_ok = len(response_tokens) > config.min_response_tokens
    lowered = response.lower()
    coherence_ok = not any(phrase.lower() in lowered for phrase in config.failure_phrases)
    return EvaluationVerdict(
        understood=score > config.min_keyword_score and length_ok and coherence_ok,
        keyword_score=score,
        length_ok=length_ok,
        coherence_ok=coherence_ok,
    )


class UnderstandingEvaluator:
    """Callable wrapper binding `evaluate()` to a particular threshold configuration"""

    config: UnderstandingConfig

    def __init__(self, config: Optional[UnderstandingConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def evaluate(self, prompt: str, response: str) -> EvaluationVerdict:
        return evaluate(prompt, response, config=self.config)

    def __call__(self, prompt: str, response: str) -> EvaluationVerdict:
        return self.evaluate(prompt, response)


def format_score(score: Optional[float]) -> str:
    """Two-decimal display string for a keyword score ('' when there is no score yet)"""
    if score is None:
        return ""
    return f"{score:.2f}"
