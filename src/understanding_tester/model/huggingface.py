# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""Hugging Face Inference API ModelRunner classes, compatible with fmeval"""
# Python Built-Ins:
from dataclasses import asdict, dataclass, field
from logging import getLogger
from typing import Any, Dict, Optional, Tuple, Union

# External Dependencies:
from fmeval.model_runners.model_runner import ModelRunner
import requests

# Local Dependencies:
from ..config import DEFAULT_HF_API_URL
from .base import BaseInferenceConfig, BaseModelConfig, ModelType

logger = getLogger(__name__)

NO_RESPONSE_TEXT = "Error: No response"


@dataclass
class HuggingFaceModelConfig(BaseModelConfig):
    """Deployment configuration for the Hugging Face Inference API (excluding inference parameters)"""

    model_type: ModelType = ModelType.HUGGINGFACE
    url: str = DEFAULT_HF_API_URL

    @property
    def endpoint(self) -> str:
        return f"{self.url.rstrip('/')}/{self.model_id}"


@dataclass
class HuggingFaceInferenceConfig(BaseInferenceConfig):
    """Inference configuration for text generation models on the Hugging Face Inference API"""

    max_new_tokens: int = 200
    temperature: float = 0.7

    def parameters(self) -> Dict[str, Any]:
        """The `parameters` object of the request body (everything except `config_id`)"""
        return {k: v for k, v in asdict(self).items() if k != "config_id"}


@dataclass(frozen=True)
class PromptRequest:
    """One submission from the user: a non-empty prompt and the ID of the model to send it to"""

    prompt: str
    model_id: str

    def __post_init__(self):
        if not self.prompt:
            raise ValueError("PromptRequest.prompt must be a non-empty string")


@dataclass(frozen=True)
class InferenceSuccess:
    text: str
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class InferenceFailure:
    error_message: str
    ok: bool = field(default=False, init=False)


InferenceResult = Union[InferenceSuccess, InferenceFailure]


@dataclass(frozen=True)
class GeneratedSequence:
    """Payload shaped like `[{"generated_text": ...}, ...]`: the first element's text is used"""

    text: str


@dataclass(frozen=True)
class GeneratedObject:
    """Payload shaped like `{"generated_text": ...}`"""

    text: str


@dataclass(frozen=True)
class NoGeneration:
    """Payload carrying no usable `generated_text` in either supported shape"""

    text: str = NO_RESPONSE_TEXT


GenerationPayload = Union[GeneratedSequence, GeneratedObject, NoGeneration]


def _generated_text(obj: Any) -> Optional[str]:
    if isinstance(obj, dict):
        text = obj.get("generated_text")
        # Empty text falls through to the next shape, same as a missing field
        if isinstance(text, str) and text:
            return text
    return None


def parse_generation_payload(data: Any) -> GenerationPayload:
    """Classify a decoded JSON response body from the text generation API

    The sequence shape is checked first, then the bare object shape. Anything else (including
    error objects, empty lists, or empty `generated_text`) is a `NoGeneration`.
    """
    if isinstance(data, list) and data:
        text = _generated_text(data[0])
        if text is not None:
            return GeneratedSequence(text=text)
    text = _generated_text(data)
    if text is not None:
        return GeneratedObject(text=text)
    return NoGeneration()


class HuggingFaceModelRunner(ModelRunner):
    """An fmeval Model Runner class for invoking text generation models on the HF Inference API

    Each `predict()` makes exactly one HTTP call: no caching, retries or de-duplication. Transport
    errors, non-2xx statuses and undecodable bodies are raised to the caller.
    """

    model_config: HuggingFaceModelConfig
    inference_config: HuggingFaceInferenceConfig

    def __init__(
        self,
        model_config: HuggingFaceModelConfig,
        inf_config: HuggingFaceInferenceConfig,
        auth_token: str,
        timeout: Optional[float] = None,
    ):
        self.model_config = model_config
        self.inference_config = inf_config
        self.timeout = timeout
        self._auth_token = auth_token

    def request_body(self, prompt: str) -> Dict[str, Any]:
        return {"inputs": prompt, "parameters": self.inference_config.parameters()}

    def predict(self, prompt: str) -> Tuple[Optional[str], None]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {self._auth_token}",
        }
        response = requests.post(
            self.model_config.endpoint,
            json=self.request_body(prompt),
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = parse_generation_payload(response.json())
        if isinstance(payload, NoGeneration):
            logger.warning("No generated_text in response from %s", self.model_config.endpoint)
        return payload.text, None
