# genelinker/server/services.py
from __future__ import annotations
import random
from dataclasses import dataclass, field
from typing import Optional

import httpx
from fastapi import Request

from genelinker.config import ClientConfig, load_env, load_llm_config, load_search_config
from genelinker.llm.openai_client import CompletionClient
from genelinker.prefs import Preferences
from genelinker.session import Workspace


@dataclass
class Services:
    llm: CompletionClient
    search_config: ClientConfig
    prefs: Preferences
    workspace: Workspace = field(default_factory=Workspace)
    search_transport: Optional[httpx.AsyncBaseTransport] = None
    download_transport: Optional[httpx.AsyncBaseTransport] = None
    llm_transport: Optional[httpx.AsyncBaseTransport] = None
    rng: Optional[random.Random] = None


def default_services() -> Services:
    load_env()
    prefs = Preferences()
    return Services(
        llm=CompletionClient(load_llm_config(prefs)),
        search_config=load_search_config(),
        prefs=prefs,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
