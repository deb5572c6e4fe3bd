# genelinker/llm/analysis_llm.py
from __future__ import annotations
import json, logging, re
from typing import Any, Dict

from pydantic import ValidationError

from genelinker.errors import require_text
from genelinker.llm.fallback import mock_analysis
from genelinker.llm.openai_client import CompletionClient, CompletionFailed
from genelinker.models import AnalysisResult, Degraded, FallbackReason, PaperRecord, QueryOutcome, Success

log = logging.getLogger(__name__)

SYSTEM = """You are a scientific research analyst. Analyze the provided research paper and provide a \
comprehensive analysis including summary, key findings, methodology, conclusions, research gaps, and \
future directions. Return ONLY JSON with this structure:
{
  "summary": "Brief overview of the paper",
  "key_findings": ["finding1", "finding2", ...],
  "methodology": "Description of methods used",
  "conclusions": "Main conclusions",
  "research_gaps": ["gap1", "gap2", ...],
  "future_directions": ["direction1", "direction2", ...],
  "confidence_score": 0.85
}"""


def strict_json(text: str) -> Dict[str, Any]:
    if not text or not text.strip():
        raise ValueError("empty LLM response")
    try:
        return json.loads(text)
    except ValueError:
        pass
    m = re.search(r"```(?:json)?\s*(.+?)\s*```", text, flags=re.S | re.I)
    if m:
        return json.loads(m.group(1))
    i, j = text.find("{"), text.rfind("}")
    if i != -1 and j != -1 and j > i:
        return json.loads(text[i:j+1])
    raise ValueError("no valid JSON object found in LLM response")


def paper_content(paper: PaperRecord) -> str:
    return (f"Title: {paper.title}\nAbstract: {paper.abstract}\n"
            f"Authors: {', '.join(paper.authors)}\nJournal: {paper.journal} ({paper.year})")


async def analyze_paper(title: str, content: str, client: CompletionClient) -> QueryOutcome[AnalysisResult]:
    body = require_text(content, "paper content")
    title = (title or "").strip() or "Untitled analysis"
    try:
        text = await client.complete(SYSTEM, f"Analyze this research paper: {body}",
                                     temperature=0.3, max_tokens=1500)
    except CompletionFailed as e:
        log.warning("paper analysis fell back (%s)", e.reason.value)
        return Degraded(mock_analysis(title), e.reason)

    try:
        data = strict_json(text)
        if not isinstance(data, dict):
            raise ValueError("LLM did not return a JSON object")
        data["title"] = title
        result = AnalysisResult.model_validate(data)
    except (ValueError, ValidationError) as e:
        log.warning("paper analysis JSON unusable: %s", e)
        return Degraded(mock_analysis(title), FallbackReason.BAD_RESPONSE)
    return Success(result, confidence=result.confidence_score)
