# genelinker/sources/papers.py
# Literature search against a CORE-style /search/works endpoint.
from __future__ import annotations
import hashlib, logging
from typing import Any, Dict, List, Optional

import httpx

from genelinker.config import ClientConfig
from genelinker.errors import require_text
from genelinker.models import Degraded, FallbackReason, PaperRecord, QueryOutcome, SearchResult, Success

log = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class SearchFailed(Exception):
    def __init__(self, reason: FallbackReason, detail: str = ""):
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason


def _first_text(*vals) -> Optional[str]:
    for v in vals:
        if isinstance(v, str) and v.strip():
            return v.strip()
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
    return None


def _authors(raw) -> List[str]:
    out: List[str] = []
    for a in raw or []:
        name = a.get("name") if isinstance(a, dict) else a
        if isinstance(name, str) and name.strip():
            out.append(name.strip())
    return out


def _journal(w: Dict[str, Any]) -> Optional[str]:
    js = w.get("journals")
    if isinstance(js, list) and js:
        j = js[0]
        return _first_text(j.get("title") if isinstance(j, dict) else j)
    return _first_text(w.get("journal"), w.get("venue"))


def _count(v) -> int:
    try:
        return max(0, int(v))
    except (TypeError, ValueError):
        return 0


def to_paper(w: Dict[str, Any]) -> PaperRecord:
    """Map one heterogeneous search hit; every field is optional."""
    title = _first_text(w.get("title")) or "Untitled"
    doi = _first_text(w.get("doi"))
    pid = _first_text(w.get("id"))
    if pid is None:
        pid = "core_" + hashlib.sha1(f"{title}|{doi or ''}".encode("utf-8")).hexdigest()[:9]
    return PaperRecord(
        id=pid,
        title=title,
        abstract=_first_text(w.get("abstract")) or "No abstract available",
        authors=tuple(_authors(w.get("authors")) or ["Unknown Author"]),
        journal=_journal(w) or "Unknown Journal",
        year=_first_text(w.get("yearPublished"), w.get("year")) or "Unknown Year",
        doi=doi,
        pdf_url=_first_text(w.get("downloadUrl"), w.get("pdf_url")),
        citation_count=_count(w.get("citationCount")),
        relevance_score=None,
    )


def mock_papers(query: str) -> SearchResult:
    q = (query or "").strip()
    papers = (
        PaperRecord(
            id="core_001",
            title=f"Advanced {q} research: Novel approaches and clinical implications",
            abstract=(f"This comprehensive study investigates {q} using cutting-edge methodologies. Our "
                      f"research reveals significant insights into the molecular mechanisms underlying {q} "
                      "and its therapeutic potential. The findings demonstrate promising applications in "
                      "clinical settings with improved patient outcomes."),
            authors=("Dr. Sarah Johnson", "Prof. Michael Chen", "Dr. Emily Rodriguez"),
            journal="Nature Biotechnology", year="2024",
            doi="10.1038/nbt.2024.001", pdf_url="https://example.com/paper1.pdf",
            citation_count=127,
        ),
        PaperRecord(
            id="core_002",
            title=f"Molecular mechanisms of {q}: A systematic review and meta-analysis",
            abstract=(f"We conducted a systematic review and meta-analysis to evaluate the current "
                      f"understanding of {q}. Our analysis included 45 studies with over 10,000 participants. "
                      f"The results provide robust evidence for the efficacy and safety of {q}-based "
                      "interventions."),
            authors=("Dr. James Wilson", "Dr. Lisa Park", "Prof. Robert Taylor"),
            journal="Cell", year="2024",
            doi="10.1016/j.cell.2024.001", pdf_url="https://example.com/paper2.pdf",
            citation_count=89,
        ),
        PaperRecord(
            id="core_003",
            title=f"{q} in precision medicine: From bench to bedside",
            abstract=(f"This translational research explores the application of {q} in precision medicine "
                      f"approaches. We demonstrate how personalized {q} strategies can improve treatment "
                      "outcomes and reduce adverse effects in diverse patient populations."),
            authors=("Dr. Maria Garcia", "Dr. David Kim", "Prof. Jennifer Lee"),
            journal="Science Translational Medicine", year="2023",
            doi="10.1126/scitranslmed.2023.001", pdf_url="https://example.com/paper3.pdf",
            citation_count=156,
        ),
    )
    return SearchResult(papers=papers, total_results=len(papers))


async def fetch_core(query: str, config: ClientConfig, limit: int,
                     transport: Optional[httpx.AsyncBaseTransport] = None) -> SearchResult:
    body = {
        "q": query,
        "limit": limit,
        "offset": 0,
        "sort": "relevance",
        "exclude_deleted": True,
    }
    headers = {"Authorization": f"Bearer {config.credential}"}
    url = config.endpoint.rstrip("/") + "/search/works"
    try:
        async with httpx.AsyncClient(timeout=config.timeout_s, transport=transport) as cx:
            r = await cx.post(url, json=body, headers=headers)
            r.raise_for_status()
            data = r.json()
    except httpx.TimeoutException as e:
        raise SearchFailed(FallbackReason.TIMEOUT, type(e).__name__) from e
    except httpx.HTTPStatusError as e:
        raise SearchFailed(FallbackReason.HTTP_STATUS, str(e.response.status_code)) from e
    except httpx.RequestError as e:
        raise SearchFailed(FallbackReason.NETWORK, type(e).__name__) from e
    except ValueError as e:
        raise SearchFailed(FallbackReason.BAD_RESPONSE, "body is not JSON") from e

    if not isinstance(data, dict):
        raise SearchFailed(FallbackReason.BAD_RESPONSE, "body is not an object")
    results = data.get("results") or []
    if not isinstance(results, list):
        raise SearchFailed(FallbackReason.BAD_RESPONSE, "results is not a list")
    papers = tuple(to_paper(w) for w in results if isinstance(w, dict))
    return SearchResult(papers=papers, total_results=_count(data.get("totalHits")) or len(papers))


async def search_papers(query: str, config: ClientConfig, limit: int = DEFAULT_LIMIT,
                        transport: Optional[httpx.AsyncBaseTransport] = None) -> QueryOutcome[SearchResult]:
    q = require_text(query, "search term")
    n = max(1, min(MAX_LIMIT, int(limit or DEFAULT_LIMIT)))
    if not config.is_configured:
        log.warning("literature search fell back (%s)", FallbackReason.NO_CREDENTIAL.value)
        return Degraded(mock_papers(q), FallbackReason.NO_CREDENTIAL)
    try:
        result = await fetch_core(q, config, n, transport=transport)
    except SearchFailed as e:
        log.warning("literature search fell back (%s)", e)
        return Degraded(mock_papers(q), e.reason)
    return Success(result, sources=(config.endpoint,))
