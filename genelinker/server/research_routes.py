# genelinker/server/research_routes.py
# Question answering, gene linking, literature search, paper analysis and report export.

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import PurePath
from typing import Optional

from fastapi import APIRouter, Body, Depends, File, UploadFile
from fastapi.responses import JSONResponse, Response

from genelinker.config import load_llm_config
from genelinker.errors import UserInputError, require_text
from genelinker.export.files import attachment
from genelinker.export.report import build_report, export_report
from genelinker.ingest.pdf_text import download_pdf, extract_pdf_text, looks_like_pdf
from genelinker.llm.analysis_llm import analyze_paper, paper_content
from genelinker.llm.openai_client import CompletionClient
from genelinker.llm.qa_llm import ask_research_question, link_gene_to_literature
from genelinker.mindmap.render import png_bytes
from genelinker.models import Degraded, PaperRecord, QueryOutcome, SearchResult, outcome_dict
from genelinker.server.services import Services, get_services
from genelinker.sources.papers import search_papers, to_paper

log = logging.getLogger(__name__)

router = APIRouter(tags=["research"])

# workspace channels
ANSWER, GENE, SEARCH, ANALYSIS, PAPER = "answer", "gene", "search", "analysis", "paper"


def _pct(x: float) -> str:
    return f"{x * 100:.0f}%"


def _notice(outcome: QueryOutcome, live: str) -> str:
    if isinstance(outcome, Degraded):
        return f"Provider unavailable ({outcome.reason.value}); showing an offline result."
    return live


def _reply(outcome: QueryOutcome, value: dict, fresh: bool, notice: str) -> JSONResponse:
    body = {"ok": True, "stale": not fresh, "notice": notice}
    body.update(outcome_dict(outcome, value))
    return JSONResponse(body)


def _search_dict(r: SearchResult) -> dict:
    return {"papers": [p.to_dict() for p in r.papers], "total_results": r.total_results}


def _find_paper(svc: Services, paper_id: Optional[str]) -> Optional[PaperRecord]:
    outcome = svc.workspace.get(SEARCH)
    if outcome is None or not paper_id:
        return None
    for p in outcome.value.papers:
        if p.id == paper_id:
            return p
    return None


# ---------- AI queries ----------
@router.post("/ask")
async def ask(payload: dict = Body(...), svc: Services = Depends(get_services)):
    q = require_text((payload or {}).get("q"), "question")
    ticket = svc.workspace.begin(ANSWER)
    outcome = await ask_research_question(q, svc.llm, rng=svc.rng)
    fresh = svc.workspace.commit(ticket, outcome)
    a = outcome.value
    value = {"answer": a.answer, "confidence": a.confidence, "sources": list(a.sources)}
    return _reply(outcome, value, fresh,
                  _notice(outcome, f"Response generated with {_pct(a.confidence)} confidence"))


@router.post("/gene/link")
async def gene_link(payload: dict = Body(...), svc: Services = Depends(get_services)):
    g = require_text((payload or {}).get("gene_id"), "gene id")
    ticket = svc.workspace.begin(GENE)
    outcome = await link_gene_to_literature(g, svc.llm, rng=svc.rng)
    fresh = svc.workspace.commit(ticket, outcome)
    link = outcome.value
    value = asdict(link)
    value["keywords"] = list(link.keywords)
    value["papers"] = [asdict(p) for p in link.papers]
    return _reply(outcome, value, fresh, _notice(outcome, "Literature linked successfully"))


# ---------- literature ----------
@router.post("/papers/search")
async def papers_search(payload: dict = Body(...), svc: Services = Depends(get_services)):
    q = require_text((payload or {}).get("q"), "search term")
    try:
        limit = int((payload or {}).get("limit") or 10)
    except (TypeError, ValueError):
        raise UserInputError("limit must be an integer")
    svc.prefs.add_recent_search(q)
    ticket = svc.workspace.begin(SEARCH)
    outcome = await search_papers(q, svc.search_config, limit=limit, transport=svc.search_transport)
    fresh = svc.workspace.commit(ticket, outcome)
    if fresh:
        # a new result list invalidates the previous selection and any analysis still in flight
        svc.workspace.invalidate(PAPER, ANALYSIS)
        svc.workspace.view = None
    r = outcome.value
    return _reply(outcome, _search_dict(r), fresh, _notice(outcome, f"Found {r.total_results} papers"))


async def _analyze(svc: Services, paper: Optional[PaperRecord], title: str, content: str) -> JSONResponse:
    ticket = svc.workspace.begin(ANALYSIS)
    outcome = await analyze_paper(title, content, svc.llm)
    fresh = svc.workspace.commit(ticket, outcome)
    if fresh:
        svc.workspace.put(PAPER, paper)
        svc.workspace.view = None
    result = outcome.value
    return _reply(outcome, result.model_dump(mode="json"), fresh,
                  _notice(outcome, f"Analysis completed with {result.confidence_score * 100:.1f}% confidence"))


@router.post("/papers/analyze")
async def papers_analyze(payload: dict = Body(...), svc: Services = Depends(get_services)):
    payload = payload or {}
    paper = _find_paper(svc, payload.get("paper_id"))
    if paper is None and isinstance(payload.get("paper"), dict):
        paper = to_paper(payload["paper"])
    if paper is None:
        raise UserInputError("paper required: pass paper_id from the last search or a paper object")
    return await _analyze(svc, paper, paper.title, paper_content(paper))


@router.post("/papers/upload")
async def papers_upload(file: UploadFile = File(...), svc: Services = Depends(get_services)):
    if not looks_like_pdf(file.filename, file.content_type):
        raise UserInputError("only PDF uploads are supported")
    text = extract_pdf_text(await file.read())
    title = PurePath(file.filename or "upload.pdf").stem or "Uploaded paper"
    log.info("analysing upload %r (%d chars of text)", file.filename, len(text))
    return await _analyze(svc, None, title, text)


@router.post("/papers/download")
async def papers_download(payload: dict = Body(...), svc: Services = Depends(get_services)):
    payload = payload or {}
    paper = _find_paper(svc, payload.get("paper_id"))
    url = payload.get("pdf_url") or (paper.pdf_url if paper else None)
    title = payload.get("title") or (paper.title if paper else "paper")
    name, content = await download_pdf(url, title, transport=svc.download_transport)
    return Response(content=content, media_type="application/pdf", headers=attachment(name))


# ---------- export ----------
@router.post("/export/report")
def export_analysis(payload: dict = Body(default={}), svc: Services = Depends(get_services)):
    outcome = svc.workspace.get(ANALYSIS)
    if outcome is None:
        raise UserInputError("No analysis to export. Analyze a paper first.")
    fmt = (payload or {}).get("format") or "pdf"
    include_map = bool((payload or {}).get("include_mindmap")) and svc.workspace.view is not None
    report = build_report(svc.workspace.get(PAPER), outcome.value, include_mindmap=include_map)
    png = png_bytes(svc.workspace.view.image) if include_map else None
    name, content, media = export_report(report, fmt, mindmap_png=png)
    return Response(content=content, media_type=media, headers=attachment(name))


# ---------- preferences ----------
@router.get("/prefs/recent")
def recent_searches(svc: Services = Depends(get_services)):
    return {"ok": True, "recent": svc.prefs.recent_searches()}


@router.post("/prefs/tour")
def tour_completed(payload: dict = Body(default={}), svc: Services = Depends(get_services)):
    svc.prefs.mark_tour_completed(bool((payload or {}).get("completed", True)))
    return {"ok": True, "tour_completed": svc.prefs.tour_completed}


@router.post("/prefs/api")
async def save_api_config(payload: dict = Body(...), svc: Services = Depends(get_services)):
    svc.prefs.save_api_config((payload or {}).get("api_key") or "", (payload or {}).get("model_name") or "")
    await _reload_llm(svc)
    return {"ok": True, "llm_configured": svc.llm.config.is_configured, "model_name": svc.llm.config.model_name}


@router.delete("/prefs/api")
async def clear_api_config(svc: Services = Depends(get_services)):
    svc.prefs.clear_api_config()
    await _reload_llm(svc)
    return {"ok": True, "llm_configured": svc.llm.config.is_configured}


async def _reload_llm(svc: Services) -> None:
    old, svc.llm = svc.llm, CompletionClient(load_llm_config(svc.prefs), transport=svc.llm_transport)
    await old.aclose()
