"""Environment based configuration for the Aliyun client."""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigurationError

DEFAULT_REGION_ID = "cn-hangzhou"
DEFAULT_SMS_ENDPOINT = "https://dysmsapi.aliyuncs.com"
DEFAULT_TIMEOUT = 30.0


def _env_str(name: str, default: str = "") -> str:
    """Read a string env var, stripping whitespace."""
    return (os.getenv(name, default) or "").strip()


@dataclass(frozen=True)
class AliyunSettings:
    access_key_id: str
    access_key_secret: str = field(repr=False)
    region_id: str = DEFAULT_REGION_ID
    endpoint: str = DEFAULT_SMS_ENDPOINT
    sign_name: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT


def load_settings(dotenv: bool = True) -> AliyunSettings:
    """Load settings from the environment (and a .env file when present).

    Raises:
        ConfigurationError: if the AccessKey pair is missing or ALIYUN_TIMEOUT
            is not a number
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    access_key_id = _env_str("ALIYUN_ACCESS_KEY_ID")
    access_key_secret = _env_str("ALIYUN_ACCESS_KEY_SECRET")

    if not access_key_id or not access_key_secret:
        raise ConfigurationError(
            "Missing ALIYUN_ACCESS_KEY_ID or ALIYUN_ACCESS_KEY_SECRET in environment/.env file"
        )

    raw_timeout = _env_str("ALIYUN_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError as e:
        raise ConfigurationError(f"ALIYUN_TIMEOUT must be a number, got {raw_timeout!r}") from e

    return AliyunSettings(
        access_key_id=access_key_id,
        access_key_secret=access_key_secret,
        region_id=_env_str("ALIYUN_REGION_ID") or DEFAULT_REGION_ID,
        endpoint=_env_str("ALIYUN_SMS_ENDPOINT") or DEFAULT_SMS_ENDPOINT,
        sign_name=_env_str("ALIYUN_SMS_SIGN_NAME") or None,
        timeout=timeout,
    )
