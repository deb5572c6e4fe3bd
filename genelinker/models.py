# genelinker/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# at most this many items of a list field are kept; the layout renders 3
MAX_LIST_ITEMS = 4


def clamp_unit(x) -> float:
    try:
        v = float(x)
    except (TypeError, ValueError):
        return 0.0
    if v != v:  # NaN
        return 0.0
    return max(0.0, min(1.0, v))


class AnalysisResult(BaseModel):
    """Normalized summary of an AI analysis; read-only input of the layout."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(default="Untitled analysis")
    summary: str = ""
    key_findings: Tuple[str, ...] = ()
    methodology: Optional[str] = None
    conclusions: Optional[str] = None
    research_gaps: Tuple[str, ...] = ()
    future_directions: Tuple[str, ...] = ()
    confidence_score: float = 0.0

    @field_validator("key_findings", "research_gaps", "future_directions", mode="before")
    @classmethod
    def bounded_str_list(cls, v):
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        items = [str(s).strip() for s in v if s is not None and str(s).strip()]
        return tuple(items[:MAX_LIST_ITEMS])

    @field_validator("methodology", "conclusions", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @field_validator("confidence_score", mode="before")
    @classmethod
    def confidence_in_unit_interval(cls, v):
        return clamp_unit(v)


@dataclass(frozen=True)
class PaperRecord:
    id: str
    title: str
    abstract: str
    authors: Tuple[str, ...]
    journal: str
    year: str
    doi: Optional[str] = None
    pdf_url: Optional[str] = None
    citation_count: int = 0
    relevance_score: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "abstract": self.abstract,
            "authors": list(self.authors),
            "journal": self.journal,
            "year": self.year,
            "doi": self.doi,
            "pdf_url": self.pdf_url,
            "citations": self.citation_count,
            "relevance_score": self.relevance_score,
        }


@dataclass(frozen=True)
class SearchResult:
    papers: Tuple[PaperRecord, ...]
    total_results: int


@dataclass(frozen=True)
class Answer:
    answer: str
    confidence: float
    sources: Tuple[str, ...]


@dataclass(frozen=True)
class GenePaper:
    title: str
    url: str
    journal: str
    year: str
    relevance_score: float


@dataclass(frozen=True)
class GeneLink:
    gene_id: str
    summary: str
    keywords: Tuple[str, ...]
    papers: Tuple[GenePaper, ...]
    confidence: float


class FallbackReason(str, Enum):
    NO_CREDENTIAL = "no_credential"
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    BAD_RESPONSE = "bad_response"


T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    confidence: float = 1.0
    sources: Tuple[str, ...] = field(default_factory=tuple)

    provenance = "live"
    degraded = False


@dataclass(frozen=True)
class Degraded(Generic[T]):
    value: T
    reason: FallbackReason

    provenance = "fallback"
    degraded = True


QueryOutcome = Union[Success[T], Degraded[T]]


def outcome_dict(outcome: QueryOutcome, value: dict) -> dict:
    out = {"provenance": outcome.provenance, "degraded": outcome.degraded, "value": value}
    if isinstance(outcome, Degraded):
        out["reason"] = outcome.reason.value
    else:
        out["confidence"] = outcome.confidence
        out["sources"] = list(outcome.sources)
    return out
