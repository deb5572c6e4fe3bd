# genelinker/config.py
# Explicit client configuration; nothing secret lives in source.
from __future__ import annotations
import os, re
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from genelinker import prefs as _prefs

DEFAULT_LLM_ENDPOINT = "https://api.openai.com/v1"
DEFAULT_LLM_MODEL = "gpt-4o-mini"
DEFAULT_SEARCH_ENDPOINT = "https://api.core.ac.uk/v3"
DEFAULT_TIMEOUT_S = 12.0

_PLACEHOLDER = re.compile(
    r"^(your[-_ ]?api[-_ ]?key|api[-_ ]?key|changeme|change[-_]me|none|null|xxx+|sk-\.\.\.|\.\.\.|<.*>|your_.*)$",
    re.I,
)


def looks_like_placeholder(credential: Optional[str]) -> bool:
    s = (credential or "").strip()
    return not s or bool(_PLACEHOLDER.match(s))


@dataclass(frozen=True)
class ClientConfig:
    endpoint: str
    credential: Optional[str] = None
    model_name: Optional[str] = None
    timeout_s: float = DEFAULT_TIMEOUT_S

    @property
    def is_configured(self) -> bool:
        return not looks_like_placeholder(self.credential)

    def __repr__(self) -> str:
        # keep keys out of logs and tracebacks
        shown = "set" if self.is_configured else "unset"
        return (f"ClientConfig(endpoint={self.endpoint!r}, credential=<{shown}>, "
                f"model_name={self.model_name!r}, timeout_s={self.timeout_s})")


def first_credential(*candidates: Optional[str]) -> Optional[str]:
    """First candidate that is a usable key; placeholders fall through to the next source."""
    for c in candidates:
        if not looks_like_placeholder(c):
            return c.strip()
    return None


def load_env() -> None:
    load_dotenv(find_dotenv(usecwd=True))


def _timeout() -> float:
    raw = os.environ.get("GENELINKER_TIMEOUT_S")
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT_S
    except ValueError:
        return DEFAULT_TIMEOUT_S


def load_llm_config(preferences: Optional[_prefs.Preferences] = None,
                    credential: Optional[str] = None,
                    model_name: Optional[str] = None) -> ClientConfig:
    stored = preferences or _prefs.Preferences()
    return ClientConfig(
        endpoint=os.environ.get("GENELINKER_LLM_ENDPOINT", DEFAULT_LLM_ENDPOINT),
        credential=first_credential(credential, os.environ.get("OPENAI_API_KEY"), stored.get(_prefs.API_KEY)),
        model_name=(model_name or os.environ.get("GENELINKER_LLM_MODEL")
                    or stored.get(_prefs.MODEL_NAME) or DEFAULT_LLM_MODEL),
        timeout_s=_timeout(),
    )


def load_search_config(credential: Optional[str] = None) -> ClientConfig:
    return ClientConfig(
        endpoint=os.environ.get("GENELINKER_CORE_ENDPOINT", DEFAULT_SEARCH_ENDPOINT),
        credential=first_credential(credential, os.environ.get("CORE_API_KEY")),
        timeout_s=_timeout(),
    )
