"""Runtime configuration: Streamlit secrets first, then environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import streamlit as st
from streamlit.errors import StreamlitAPIException

log = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:8080/api"
DEFAULT_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    app_name: str = "GiftRedeem"


def get_secret(key) -> Optional[str]:
    try:
        return st.secrets.get(key)
    except (FileNotFoundError, StreamlitAPIException):
        # No secrets.toml: configuration comes from the environment
        return None


def _config_value(key) -> Optional[str]:
    return get_secret(key) or os.getenv(key)


def load_settings() -> Settings:
    timeout = DEFAULT_TIMEOUT_SECONDS
    raw_timeout = _config_value("API_TIMEOUT")
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            log.warning(f"API_TIMEOUT={raw_timeout!r} is not a number, using {DEFAULT_TIMEOUT_SECONDS}s")

    return Settings(
        api_base_url=_config_value("API_BASE_URL") or DEFAULT_API_BASE_URL,
        request_timeout=timeout,
    )
