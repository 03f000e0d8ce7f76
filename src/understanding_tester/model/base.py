# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""Common classes for configuring hosted model runners in the understanding tester app"""
# Python Built-Ins:
from dataclasses import dataclass
from enum import Enum


class ModelType(Enum):
    """Supported types of model deployment"""

    HUGGINGFACE: str = "huggingface"


@dataclass
class BaseModelConfig:
    """Base Model Configuration that all subtypes should extend

    Model Configurations store parameters associated with model deployment and invocation and *NOT*
    any hyperparameters (e.g. temperature, max new tokens, etc) that should be put in an
    InferenceConfig instead.
    """

    model_id: str
    model_type: ModelType


@dataclass
class BaseInferenceConfig:
    """Base Inference Configuration that all subtypes should extend

    Inference Configurations store parameters associated with model inference and *NOT*
    any model deployment parameters (e.g. model_id, endpoint URL, etc) that should be put in a
    ModelConfig instead.
    """

    config_id: str
