# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""Utilities for describing model deployments and inference configurations
"""
# Python Built-Ins:
from logging import getLogger
from typing import Dict, Optional, Tuple
from uuid import uuid4

# External Dependencies:
from fmeval.model_runners.model_runner import ModelRunner
import requests

# Local Dependencies:
from ..config import hf_api_url
from .base import BaseInferenceConfig, BaseModelConfig, ModelType
from .huggingface import (
    HuggingFaceInferenceConfig,
    HuggingFaceModelConfig,
    HuggingFaceModelRunner,
    InferenceFailure,
    InferenceResult,
    InferenceSuccess,
    PromptRequest,
)

logger = getLogger("model")

# Display name -> (model deployment, available inference configurations). Only one model is
# enabled at present.
dflt_hf_ifconfig = HuggingFaceInferenceConfig(config_id=uuid4().hex)
MODELS: Dict[str, Tuple[BaseModelConfig, Tuple[BaseInferenceConfig, ...]]] = {
    "Llama-2-7B-Chat": (
        HuggingFaceModelConfig(model_id="meta-llama/Llama-2-7b-chat-hf", url=hf_api_url()),
        (dflt_hf_ifconfig,),
    ),
    # "Mistral-7B-Instruct": (
    #     HuggingFaceModelConfig(model_id="mistralai/Mistral-7B-Instruct-v0.3", url=hf_api_url()),
    #     (dflt_hf_ifconfig,),
    # ),
}
DEFAULT_MODEL_NAME = next(iter(MODELS))


def get_model_config(model_id: str) -> Tuple[BaseModelConfig, BaseInferenceConfig]:
    """Look up the deployment and default inference config for a registered model ID"""
    for model_cfg, inf_cfgs in MODELS.values():
        if model_cfg.model_id == model_id and len(inf_cfgs):
            return model_cfg, inf_cfgs[0]
    raise ValueError(f"Unknown model ID: {model_id}")


def get_model_runner(
    model_config: BaseModelConfig,
    inf_config: BaseInferenceConfig,
    auth_token: str,
    timeout: Optional[float] = None,
) -> ModelRunner:
    """Get an fmeval ModelRunner for a given pair of model config and inference parameter config

    Parameters
    ----------
    model_config :
        Describes the deployment of the model itself (information necessary to call its API)
    inf_config :
        Describes the inference parameters to use (such as temperature, max new tokens, etc)
    auth_token :
        Bearer token passed through to the model API as-is
    timeout :
        Optional HTTP timeout in seconds (None to wait indefinitely)
    """
    if model_config.model_type == ModelType.HUGGINGFACE:
        logger.info(
            "Creating HuggingFaceModelRunner for %s with parameters %s",
            model_config.model_id,
            inf_config.parameters(),
        )
        return HuggingFaceModelRunner(
            model_config=model_config,
            inf_config=inf_config,
            auth_token=auth_token,
            timeout=timeout,
        )
    else:
        raise ValueError(f"Unknown model type: {model_config.model_type}")


def infer(
    request: PromptRequest,
    auth_token: str,
    timeout: Optional[float] = None,
) -> InferenceResult:
    """Send one prompt to the requested model and return the generated text or a failure

    Every network, HTTP status and payload decoding problem is collapsed into a single
    `InferenceFailure` carrying the underlying error's message. Nothing is retried.
    """
    try:
        model_cfg, inf_cfg = get_model_config(request.model_id)
        runner = get_model_runner(model_cfg, inf_cfg, auth_token=auth_token, timeout=timeout)
        text, _ = runner.predict(request.prompt)
    except (requests.RequestException, ValueError) as err:
        logger.warning("Inference call to %s failed: %s", request.model_id, err)
        return InferenceFailure(error_message=str(err))
    return InferenceSuccess(text=text)
