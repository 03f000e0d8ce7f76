# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""Environment-driven configuration for the understanding tester app

Top-level configurations are loaded from environment variables when the app starts, but every
helper here also accepts explicit overrides so the rest of the app (and the tests) never need to
mutate `os.environ`.
"""
# Python Built-Ins:
import json
from logging import getLogger
import os
from typing import Mapping, Optional

# External Dependencies:
import boto3

logger = getLogger(__name__)

DEFAULT_HF_API_URL = "https://api-inference.huggingface.co/models"
# Never validated locally: a placeholder token only surfaces as a rejected remote call
PLACEHOLDER_HF_TOKEN = "your_hugging_face_token_here"
TOKEN_SECRET_KEYS = ("HF_TOKEN", "token")


def bool_env_var(name: str, default: bool = False, env: Optional[Mapping[str, str]] = None) -> bool:
    """Parse a boolean flag from an environment variable ('1', 'true', 'yes', 'y' are truthy)"""
    env = os.environ if env is None else env
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "y")


def float_env_var(name: str, env: Optional[Mapping[str, str]] = None) -> Optional[float]:
    """Parse an optional float from an environment variable (unset or blank -> None)"""
    env = os.environ if env is None else env
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"Environment variable {name} must be a number, got '{raw}'") from e


def hf_api_url(env: Optional[Mapping[str, str]] = None) -> str:
    """Base URL of the hosted inference API, without trailing slash"""
    env = os.environ if env is None else env
    return (env.get("HF_API_URL") or DEFAULT_HF_API_URL).rstrip("/")


def request_timeout(env: Optional[Mapping[str, str]] = None) -> Optional[float]:
    """Optional HTTP timeout in seconds for inference calls (None = wait indefinitely)"""
    return float_env_var("HF_REQUEST_TIMEOUT", env=env)


def read_token_secret(secret_id: str, client=None) -> str:
    """Fetch the inference API token from an AWS Secrets Manager secret

    The secret may be stored either as the raw token string, or as a JSON object with an `HF_TOKEN`
    (or `token`) key.
    """
    if client is None:
        client = boto3.client("secretsmanager")
    try:
        secret_string = client.get_secret_value(SecretId=secret_id)["SecretString"]
    except Exception as e:
        logger.exception(
            "Failed to retrieve inference API token from AWS Secrets Manager secret "
            f"'{secret_id}'. Check the secret exists and this app has AWS IAM permissions to read "
            "it."
        )
        raise e

    try:
        parsed = json.loads(secret_string)
    except ValueError:
        return secret_string.strip()
    if isinstance(parsed, dict):
        for key in TOKEN_SECRET_KEYS:
            if parsed.get(key):
                return str(parsed[key])
        raise ValueError(
            f"Secret '{secret_id}' is a JSON object but has none of the keys {TOKEN_SECRET_KEYS}"
        )
    return secret_string.strip()


def get_auth_token(env: Optional[Mapping[str, str]] = None, secrets_client=None) -> str:
    """Resolve the bearer token used for inference calls

    Resolution order: the `HF_TOKEN_SECRET_NAME` Secrets Manager secret (if configured), then the
    `HF_TOKEN` environment variable, then a placeholder value.
    """
    env = os.environ if env is None else env
    secret_name = env.get("HF_TOKEN_SECRET_NAME")
    if secret_name:
        logger.info("Loading inference API token from secret '%s'", secret_name)
        return read_token_secret(secret_name, client=secrets_client)
    token = env.get("HF_TOKEN")
    if token:
        return token
    logger.debug("HF_TOKEN not set - falling back to placeholder token")
    return PLACEHOLDER_HF_TOKEN
