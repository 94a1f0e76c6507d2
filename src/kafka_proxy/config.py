"""Configuration for the proxy client.

The library itself never reads the environment; `ProxyConfig.from_env` is
used by the `kp` CLI and the functional tests only.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .models import Format
from .polling import DEFAULT_POLL_INTERVAL
from .transport import DEFAULT_REQUEST_TIMEOUT

URL_ENV_VAR = "KAFKA_REST_URL"
FORMAT_ENV_VAR = "KAFKA_REST_FORMAT"

TEST_URL_ENV_VAR = "KAFKA_PROXY_TEST_URL"
TEST_TOPIC_ENV_VAR = "KAFKA_PROXY_TEST_TOPIC"
TEST_REQUIRED_ENV_VAR = "KAFKA_PROXY_TEST_REQUIRED"


@dataclass(frozen=True)
class ProxyConfig:
    base_url: str = ""
    format: Format = Format.AVRO
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "ProxyConfig":
        env = os.environ if environ is None else environ
        fmt = env.get(FORMAT_ENV_VAR, "").strip() or Format.AVRO.value
        return ProxyConfig(
            base_url=env.get(URL_ENV_VAR, "").strip(),
            format=Format.parse(fmt),
        )


def functional_test_required(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get(TEST_REQUIRED_ENV_VAR, "").strip() == "true"
