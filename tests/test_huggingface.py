"""Unit tests for the Hugging Face inference client."""

import pytest
import requests

from understanding_tester.model import (
    get_model_config,
    get_model_runner,
    infer,
    InferenceFailure,
    InferenceSuccess,
    MODELS,
    PromptRequest,
)
from understanding_tester.model.base import BaseModelConfig, ModelType
from understanding_tester.model.huggingface import (
    GeneratedObject,
    GeneratedSequence,
    HuggingFaceInferenceConfig,
    HuggingFaceModelConfig,
    HuggingFaceModelRunner,
    NO_RESPONSE_TEXT,
    NoGeneration,
    parse_generation_payload,
)

LLAMA = "meta-llama/Llama-2-7b-chat-hf"


class TestParseGenerationPayload:
    def test_sequence_shape(self) -> None:
        payload = [{"generated_text": "first"}, {"generated_text": "second"}]
        assert parse_generation_payload(payload) == GeneratedSequence(text="first")

    def test_object_shape(self) -> None:
        assert parse_generation_payload({"generated_text": "hi"}) == GeneratedObject(text="hi")

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            {},
            None,
            "some text",
            {"error": "Model is currently loading"},
            [{"summary_text": "wrong task"}],
            [{"generated_text": ""}],
            {"generated_text": ""},
            {"generated_text": 42},
        ],
    )
    def test_anything_else_is_no_generation(self, payload) -> None:
        result = parse_generation_payload(payload)
        assert isinstance(result, NoGeneration)
        assert result.text == NO_RESPONSE_TEXT == "Error: No response"


class TestConfigs:
    def test_endpoint_joins_base_url_and_model_id(self) -> None:
        cfg = HuggingFaceModelConfig(model_id=LLAMA, url="https://hf.example/models/")
        assert cfg.endpoint == f"https://hf.example/models/{LLAMA}"
        assert cfg.model_type is ModelType.HUGGINGFACE

    def test_fixed_generation_parameters(self) -> None:
        assert HuggingFaceInferenceConfig(config_id="x").parameters() == {
            "max_new_tokens": 200,
            "temperature": 0.7,
        }

    def test_prompt_request_requires_prompt(self) -> None:
        with pytest.raises(ValueError):
            PromptRequest(prompt="", model_id=LLAMA)


class TestModelRegistry:
    def test_exactly_one_active_model(self) -> None:
        assert list(MODELS) == ["Llama-2-7B-Chat"]
        model_cfg, inf_cfg = get_model_config(LLAMA)
        assert model_cfg.model_id == LLAMA
        assert isinstance(inf_cfg, HuggingFaceInferenceConfig)

    def test_unknown_model_id(self) -> None:
        with pytest.raises(ValueError, match="Unknown model ID"):
            get_model_config("nobody/nothing")

    def test_runner_factory(self) -> None:
        model_cfg, inf_cfg = get_model_config(LLAMA)
        runner = get_model_runner(model_cfg, inf_cfg, auth_token="tok", timeout=5)
        assert isinstance(runner, HuggingFaceModelRunner)
        assert runner.timeout == 5

    def test_runner_factory_rejects_unknown_type(self) -> None:
        class OtherType:
            value = "other"

        model_cfg = BaseModelConfig(model_id="x", model_type=OtherType())
        with pytest.raises(ValueError, match="Unknown model type"):
            get_model_runner(model_cfg, HuggingFaceInferenceConfig(config_id="x"), "tok")


class TestModelRunner:
    def test_predict_posts_prompt_and_parameters(self, mock_post, make_response) -> None:
        mock_post.return_value = make_response([{"generated_text": "Paris."}])
        runner = HuggingFaceModelRunner(
            HuggingFaceModelConfig(model_id=LLAMA, url="https://hf.example/models"),
            HuggingFaceInferenceConfig(config_id="cfg"),
            auth_token="secret-token",
        )

        assert runner.predict("Capital of France?") == ("Paris.", None)

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args == (f"https://hf.example/models/{LLAMA}",)
        assert kwargs["json"] == {
            "inputs": "Capital of France?",
            "parameters": {"max_new_tokens": 200, "temperature": 0.7},
        }
        assert kwargs["headers"]["Authorization"] == "Bearer secret-token"
        assert kwargs["timeout"] is None

    def test_predict_raises_on_http_error(self, mock_post, make_response) -> None:
        mock_post.return_value = make_response({"error": "unauthorized"}, status_code=401)
        model_cfg, inf_cfg = get_model_config(LLAMA)
        runner = HuggingFaceModelRunner(model_cfg, inf_cfg, auth_token="bad")
        with pytest.raises(requests.HTTPError):
            runner.predict("hello")


class TestInfer:
    def test_success_sequence_shape(self, mock_post, make_response) -> None:
        mock_post.return_value = make_response([{"generated_text": "Hello there"}])
        result = infer(PromptRequest(prompt="hi", model_id=LLAMA), "tok")
        assert result == InferenceSuccess(text="Hello there")
        assert result.ok

    def test_success_object_shape(self, mock_post, make_response) -> None:
        mock_post.return_value = make_response({"generated_text": "Hello object"})
        result = infer(PromptRequest(prompt="hi", model_id=LLAMA), "tok")
        assert result == InferenceSuccess(text="Hello object")

    def test_missing_text_is_a_successful_no_response(self, mock_post, make_response) -> None:
        mock_post.return_value = make_response({"unexpected": True})
        result = infer(PromptRequest(prompt="hi", model_id=LLAMA), "tok")
        assert result == InferenceSuccess(text="Error: No response")

    def test_http_error_becomes_failure(self, mock_post, make_response) -> None:
        mock_post.return_value = make_response({"error": "bad token"}, status_code=401)
        result = infer(PromptRequest(prompt="hi", model_id=LLAMA), "your_hugging_face_token_here")
        assert isinstance(result, InferenceFailure)
        assert not result.ok
        assert "401" in result.error_message

    def test_transport_error_becomes_failure(self, mock_post) -> None:
        mock_post.side_effect = requests.ConnectionError("Name or service not known")
        result = infer(PromptRequest(prompt="hi", model_id=LLAMA), "tok")
        assert result == InferenceFailure(error_message="Name or service not known")

    def test_malformed_payload_becomes_failure(self, mock_post, make_response) -> None:
        mock_post.return_value = make_response(json_error=ValueError("Expecting value"))
        result = infer(PromptRequest(prompt="hi", model_id=LLAMA), "tok")
        assert result == InferenceFailure(error_message="Expecting value")

    def test_unknown_model_becomes_failure(self, mock_post) -> None:
        result = infer(PromptRequest(prompt="hi", model_id="nobody/nothing"), "tok")
        assert isinstance(result, InferenceFailure)
        mock_post.assert_not_called()

    def test_one_call_per_invocation_and_no_caching(self, mock_post, make_response) -> None:
        mock_post.return_value = make_response([{"generated_text": "same"}])
        request = PromptRequest(prompt="same prompt", model_id=LLAMA)
        infer(request, "tok")
        infer(request, "tok")
        assert mock_post.call_count == 2

    def test_timeout_passed_through(self, mock_post, make_response) -> None:
        mock_post.return_value = make_response([{"generated_text": "ok"}])
        infer(PromptRequest(prompt="hi", model_id=LLAMA), "tok", timeout=12.5)
        assert mock_post.call_args.kwargs["timeout"] == 12.5
