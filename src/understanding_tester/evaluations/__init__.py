# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""Heuristic checks of whether a model "understood" the prompt it was given"""
# Local Dependencies:
from .base import VerdictLabel
from .understanding import (
    DEFAULT_CONFIG,
    evaluate,
    EvaluationVerdict,
    format_score,
    tokenize,
    UnderstandingConfig,
    UnderstandingEvaluator,
)
