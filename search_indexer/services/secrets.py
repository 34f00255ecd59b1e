from __future__ import annotations

from typing import Any, Protocol

import boto3


class SecretsProvider(Protocol):
    def get_global_secret_string(self, key: str) -> str: ...


class AwsSecretsManager:
    """Reads plain string secrets from AWS Secrets Manager."""

    def __init__(self, region_name: str, *, client: Any | None = None) -> None:
        self._client = client or boto3.client("secretsmanager", region_name=region_name)

    def get_global_secret_string(self, key: str) -> str:
        response = self._client.get_secret_value(SecretId=key)
        return response.get("SecretString") or ""
