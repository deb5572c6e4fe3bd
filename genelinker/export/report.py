# genelinker/export/report.py
# Analysis report: a JSON document, or the same content laid out as a PDF.
from __future__ import annotations
import datetime, io, json, logging
from html import escape
from typing import Any, Dict, Optional

from genelinker.errors import ExportError, UserInputError
from genelinker.export.files import report_filename
from genelinker.models import AnalysisResult, PaperRecord

log = logging.getLogger(__name__)

FORMATS = ("pdf", "json")


def build_report(paper: Optional[PaperRecord], analysis: AnalysisResult,
                 include_mindmap: bool = False) -> Dict[str, Any]:
    data = analysis.model_dump(mode="json")
    out: Dict[str, Any] = {
        "paper": None,
        "analysis": data,
        "exported_at": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="seconds"),
    }
    if paper is not None:
        out["paper"] = {
            "id": paper.id,
            "title": paper.title,
            "authors": list(paper.authors),
            "journal": paper.journal,
            "year": paper.year,
            "abstract": paper.abstract,
        }
    if include_mindmap:
        out["mindMapData"] = data
    return out


def report_json(report: Dict[str, Any]) -> bytes:
    return json.dumps(report, indent=2, ensure_ascii=False).encode("utf-8")


def report_pdf(report: Dict[str, Any], mindmap_png: Optional[bytes] = None) -> bytes:
    from reportlab.lib import colors
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.lib.units import inch
    from reportlab.platypus import HRFlowable, Image, Paragraph, SimpleDocTemplate, Spacer

    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=(595, 842), leftMargin=0.9*inch, rightMargin=0.9*inch,
                            topMargin=0.9*inch, bottomMargin=0.9*inch)
    styles = getSampleStyleSheet()
    T = ParagraphStyle("T", parent=styles["Heading1"], fontSize=18, spaceAfter=8,
                       textColor=colors.HexColor("#1e3a8a"), fontName="Helvetica-Bold")
    H = ParagraphStyle("H", parent=styles["Heading2"], fontSize=13, spaceAfter=4, spaceBefore=12,
                       textColor=colors.HexColor("#065f46"), fontName="Helvetica-Bold")
    N = ParagraphStyle("N", parent=styles["Normal"], fontSize=10, leading=15, spaceAfter=4)
    M = ParagraphStyle("M", parent=styles["Normal"], fontSize=8, spaceAfter=8,
                       textColor=colors.HexColor("#6b7280"), fontName="Helvetica-Oblique")

    a = report["analysis"]
    p = report.get("paper") or {}
    elems = [Paragraph(escape(p.get("title") or a.get("title") or "Research analysis"), T)]
    meta = [x for x in (", ".join(p.get("authors") or []), p.get("journal"), p.get("year")) if x]
    meta.append(f"confidence {float(a.get('confidence_score') or 0) * 100:.1f}%")
    meta.append(f"exported {report.get('exported_at', '')}")
    elems.append(Paragraph(escape(" | ".join(meta)), M))
    elems.append(HRFlowable(width="100%", thickness=0.5, color=colors.HexColor("#c7d2fe"), spaceAfter=10))

    def section(title: str, body) -> None:
        if not body:
            return
        elems.append(Paragraph(title, H))
        if isinstance(body, (list, tuple)):
            for item in body:
                elems.append(Paragraph("&bull; " + escape(str(item)), N))
        else:
            elems.append(Paragraph(escape(str(body)), N))

    section("Abstract", p.get("abstract"))
    section("Summary", a.get("summary"))
    section("Key Findings", a.get("key_findings"))
    section("Methodology", a.get("methodology"))
    section("Conclusions", a.get("conclusions"))
    section("Research Gaps", a.get("research_gaps"))
    section("Future Directions", a.get("future_directions"))

    if mindmap_png:
        elems.append(Paragraph("Mind Map", H))
        elems.append(Spacer(1, 0.1*inch))
        elems.append(Image(io.BytesIO(mindmap_png), width=6*inch, height=4.5*inch))

    try:
        doc.build(elems)
    except Exception as e:
        raise ExportError(f"PDF build: {e}") from e
    return buf.getvalue()


def export_report(report: Dict[str, Any], fmt: str = "pdf",
                  mindmap_png: Optional[bytes] = None) -> tuple:
    fmt = (fmt or "pdf").lower()
    if fmt not in FORMATS:
        raise UserInputError(f"Unknown format: {fmt}")
    title = (report.get("paper") or {}).get("title") or report["analysis"].get("title") or "analysis"
    name = report_filename(title, fmt)
    log.info("exporting report %s", name)
    if fmt == "json":
        return name, report_json(report), "application/json"
    return name, report_pdf(report, mindmap_png), "application/pdf"
