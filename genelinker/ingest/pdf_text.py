# genelinker/ingest/pdf_text.py
from __future__ import annotations
import io, logging
from typing import Optional, Tuple

import httpx
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from genelinker.errors import DownloadError, UserInputError
from genelinker.export.files import pdf_filename

log = logging.getLogger(__name__)

MAX_PAGES = 12
NO_TEXT = "(no extractable text)"


def looks_like_pdf(filename: Optional[str], content_type: Optional[str]) -> bool:
    if (content_type or "").lower().split(";")[0].strip() == "application/pdf":
        return True
    return (filename or "").lower().endswith(".pdf")


def extract_pdf_text(data: bytes, max_pages: int = MAX_PAGES) -> str:
    if not data:
        raise UserInputError("empty upload")
    try:
        reader = PdfReader(io.BytesIO(data))
        text = ""
        for p in reader.pages[:max_pages]:
            text += (p.extract_text() or "") + "\n"
    except (PdfReadError, ValueError) as e:
        raise UserInputError(f"not a readable PDF: {e}") from e
    return text.strip() or NO_TEXT


async def download_pdf(url: Optional[str], title: str, timeout_s: float = 60.0,
                       transport: Optional[httpx.AsyncBaseTransport] = None) -> Tuple[str, bytes]:
    """Fetch the bytes behind a paper's PDF link; the caller turns them into a download."""
    if not (url or "").strip():
        raise DownloadError("PDF URL not available", missing_url=True)
    try:
        async with httpx.AsyncClient(timeout=timeout_s, follow_redirects=True, transport=transport) as cx:
            r = await cx.get(url)
            r.raise_for_status()
            content = r.content
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log.warning("PDF download failed for %s: %s", url, type(e).__name__)
        raise DownloadError("Failed to download PDF") from e
    return pdf_filename(title), content
